"""Plain configuration records for pods, replica sets and access rules."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .quantity import Quantity


@dataclass
class Volume:
    """A persistent volume mounted into a container."""

    path: str = ""
    size: Quantity = field(default_factory=Quantity)
    owner: int = 0


@dataclass
class File:
    """A file copied from ``source`` to ``dest`` inside a container."""

    source: str = ""
    dest: str = ""


@dataclass
class ContainerConfig:
    """Settings for one container of a pod."""

    name: str = ""
    image: str = ""
    image_pull_policy: str = ""
    command: List[str] = field(default_factory=list)
    args: List[str] = field(default_factory=list)
    env: Dict[str, str] = field(default_factory=dict)
    volumes: List[Volume] = field(default_factory=list)
    memory_request: Quantity = field(default_factory=Quantity)
    memory_limit: Quantity = field(default_factory=Quantity)
    cpu_request: Quantity = field(default_factory=Quantity)
    liveness_probe: Optional[Dict[str, Any]] = None
    readiness_probe: Optional[Dict[str, Any]] = None
    startup_probe: Optional[Dict[str, Any]] = None
    files: List[File] = field(default_factory=list)
    security_context: Optional[Dict[str, Any]] = None


@dataclass
class PodConfig:
    """Settings for a pod: its main container plus any sidecars."""

    namespace: str = ""
    name: str = ""
    labels: Dict[str, str] = field(default_factory=dict)
    service_account_name: str = ""
    fs_group: int = 0
    container_config: ContainerConfig = field(default_factory=ContainerConfig)
    sidecar_configs: List[ContainerConfig] = field(default_factory=list)
    annotations: Dict[str, str] = field(default_factory=dict)


@dataclass
class ReplicaSetConfig:
    """Settings for a replica set running copies of one pod template."""

    name: str = ""
    namespace: str = ""
    labels: Dict[str, str] = field(default_factory=dict)
    replicas: int = 0
    pod_config: PodConfig = field(default_factory=PodConfig)


@dataclass
class PolicyRule:
    """One rule of a role: which verbs are allowed on which resources."""

    verbs: List[str] = field(default_factory=list)
    api_groups: List[str] = field(default_factory=list)
    resources: List[str] = field(default_factory=list)
    resource_names: List[str] = field(default_factory=list)
    non_resource_urls: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class GroupVersionResource:
    """Identifies a resource type by API group, version and plural name."""

    group: str = ""
    version: str = ""
    resource: str = ""