"""Storage of cluster objects and the shared state of every client."""

from __future__ import annotations

import abc
import copy
import logging
import threading
from collections.abc import Mapping
from datetime import datetime, timezone

from .errors import ERR_CLIENT_TERMINATED


class ApiError(Exception):
    """An error reported by the cluster API."""

    def __init__(self, message, status=500, reason="InternalError"):
        super().__init__(message)
        self.message = message
        self.status = status
        self.reason = reason

    def __str__(self):
        return self.message


class NotFoundError(ApiError):
    """The requested object does not exist."""

    def __init__(self, message):
        super().__init__(message, status=404, reason="NotFound")


class ResourceStore(abc.ABC):
    """Where cluster objects live; ``kind`` is the plural resource name."""

    @abc.abstractmethod
    def create(self, kind, namespace, obj):
        """Store a new object and return it as stored."""

    @abc.abstractmethod
    def get(self, kind, namespace, name):
        """Return the named object or raise ``NotFoundError``."""

    @abc.abstractmethod
    def update(self, kind, namespace, obj):
        """Replace an existing object and return it as stored."""

    @abc.abstractmethod
    def delete(self, kind, namespace, name, grace_period_seconds=None):
        """Remove the named object or raise ``NotFoundError``."""

    @abc.abstractmethod
    def list(self, kind, namespace, label_selector=None):
        """Return the objects of a kind whose labels match the selector."""


def _parse_selector(label_selector):
    if not label_selector:
        return {}
    if isinstance(label_selector, Mapping):
        return dict(label_selector)
    selector = {}
    for term in label_selector.split(","):
        term = term.strip()
        if not term:
            continue
        key, sep, value = term.partition("==") if "==" in term else term.partition("=")
        if not sep:
            raise ValueError(f"unsupported label selector term {term!r}")
        selector[key.strip()] = value.strip()
    return selector


class InMemoryStore(ResourceStore):
    """A thread-safe store kept in memory.

    ``reactors`` holds ``(verb, kind, handler)`` entries consulted in order
    before the store itself; ``"*"`` matches any verb or kind. A handler is
    called as ``handler(verb, kind, namespace, name, obj)`` and returns
    ``(handled, result)``, or raises to report a failure.
    """

    def __init__(self, reactors=None):
        self.reactors = list(reactors or [])
        self._objects = {}
        self._lock = threading.RLock()

    def _react(self, verb, kind, namespace, name, obj):
        for reactor_verb, reactor_kind, handler in list(self.reactors):
            if reactor_verb in (verb, "*") and reactor_kind in (kind, "*"):
                handled, result = handler(verb, kind, namespace, name, obj)
                if handled:
                    return True, copy.deepcopy(result)
        return False, None

    @staticmethod
    def _key(kind, namespace, name):
        return kind, namespace or "", name

    def create(self, kind, namespace, obj):
        name = obj.get("metadata", {}).get("name", "")
        handled, result = self._react("create", kind, namespace, name, obj)
        if handled:
            return result
        key = self._key(kind, namespace, name)
        with self._lock:
            if key in self._objects:
                raise ApiError(f'{kind} "{name}" already exists', status=409, reason="AlreadyExists")
            stored = copy.deepcopy(obj)
            metadata = stored.setdefault("metadata", {})
            if namespace:
                metadata["namespace"] = namespace
            if not metadata.get("creationTimestamp"):
                metadata["creationTimestamp"] = datetime.now(timezone.utc)
            self._objects[key] = stored
            return copy.deepcopy(stored)

    def get(self, kind, namespace, name):
        handled, result = self._react("get", kind, namespace, name, None)
        if handled:
            return result
        with self._lock:
            stored = self._objects.get(self._key(kind, namespace, name))
            if stored is None:
                raise NotFoundError(f'{kind} "{name}" not found')
            return copy.deepcopy(stored)

    def update(self, kind, namespace, obj):
        name = obj.get("metadata", {}).get("name", "")
        handled, result = self._react("update", kind, namespace, name, obj)
        if handled:
            return result
        key = self._key(kind, namespace, name)
        with self._lock:
            previous = self._objects.get(key)
            if previous is None:
                raise NotFoundError(f'{kind} "{name}" not found')
            stored = copy.deepcopy(obj)
            metadata = stored.setdefault("metadata", {})
            if namespace:
                metadata["namespace"] = namespace
            if not metadata.get("creationTimestamp"):
                metadata["creationTimestamp"] = previous.get("metadata", {}).get("creationTimestamp")
            self._objects[key] = stored
            return copy.deepcopy(stored)

    def delete(self, kind, namespace, name, grace_period_seconds=None):
        handled, _ = self._react("delete", kind, namespace, name, None)
        if handled:
            return
        with self._lock:
            if self._objects.pop(self._key(kind, namespace, name), None) is None:
                raise NotFoundError(f'{kind} "{name}" not found')

    def list(self, kind, namespace, label_selector=None):
        selector = _parse_selector(label_selector)
        handled, result = self._react("list", kind, namespace, "", None)
        if handled:
            return result
        with self._lock:
            items = []
            for (obj_kind, obj_namespace, _), obj in self._objects.items():
                if obj_kind != kind:
                    continue
                if namespace is not None and obj_namespace != (namespace or ""):
                    continue
                labels = obj.get("metadata", {}).get("labels") or {}
                if all(labels.get(key) == value for key, value in selector.items()):
                    items.append(copy.deepcopy(obj))
            return items


class KubeBase:
    """State shared by every group of cluster operations."""

    retry_interval = 0.1
    wait_retry = 5.0

    def __init__(self, store, namespace, max_pending_duration=60.0, logger=None):
        self.store = store
        self.namespace = namespace
        self.max_pending_duration = max_pending_duration
        self.logger = logger or logging.getLogger("kubeharness")
        self.terminated = False

    def terminate(self):
        """Refuse any further creating operation."""
        self.terminated = True

    def _ensure_active(self):
        if self.terminated:
            raise ERR_CLIENT_TERMINATED