"""The client that brings every group of cluster operations together."""

from __future__ import annotations

from .base import InMemoryStore
from .pods import PodOps
from .policies import PolicyOps
from .replicasets import ReplicaSetOps
from .services import ServiceOps
from .volumes import VolumeClaimOps


class Client(PolicyOps, VolumeClaimOps, PodOps, ReplicaSetOps, ServiceOps):
    """Manages pods, replica sets, services, volumes and access rules in one namespace.

    Without a store the client keeps its objects in memory. Used as a context
    manager, the client is terminated on exit.
    """

    def __init__(self, store=None, namespace="default", max_pending_duration=60.0, logger=None):
        super().__init__(
            store if store is not None else InMemoryStore(),
            namespace,
            max_pending_duration=max_pending_duration,
            logger=logger,
        )

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.terminate()
        return False