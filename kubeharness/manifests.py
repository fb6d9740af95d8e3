"""Builders for pod, replica set, service and network policy manifests.

Manifests are plain dictionaries laid out the way the cluster API expects
them, so they can be serialised or stored as they are.
"""

from __future__ import annotations

import logging
import posixpath

from .errors import ERR_NAMESPACE_REQUIRED, ERR_NO_PORTS_SPECIFIED, ERR_SERVICE_NAME_REQUIRED

logger = logging.getLogger(__name__)

KNUU_PATH = "/knuu"
DEFAULT_FILE_MODE_FOR_VOLUME = 0o777
POD_FILES_CONFIGMAP_NAME_SUFFIX = "-config"
INIT_CONTAINER_NAME_SUFFIX = "-init"
DEFAULT_CONTAINER_USER = 0


def _parent_dir(path):
    """Return the cleaned parent directory of ``path`` ("." when it has none)."""
    parent = posixpath.dirname(path)
    if not parent:
        return "."
    return posixpath.normpath(parent)


def _join_under(base, path):
    """Join ``path`` below ``base`` even when ``path`` is absolute."""
    return posixpath.normpath(f"{base}/{path}")


def build_env(env_map):
    """Turn a mapping of variable names to values into container env entries."""
    return [{"name": key, "value": value} for key, value in (env_map or {}).items()]


def build_pod_volumes(name, volumes_amount, files_amount):
    """Return the pod volumes: a claim when there are volumes, a config map when there are files."""
    pod_volumes = []
    if volumes_amount:
        pod_volumes.append({"name": name, "persistentVolumeClaim": {"claimName": name}})
    if files_amount:
        pod_volumes.append(
            {
                "name": name + POD_FILES_CONFIGMAP_NAME_SUFFIX,
                "configMap": {"name": name, "defaultMode": DEFAULT_FILE_MODE_FOR_VOLUME},
            }
        )
    return pod_volumes


def build_container_volumes(name, volumes, files):
    """Return the volume mounts of a container.

    Files whose destination lies inside one of the volumes are not mounted
    separately, since the volume already carries them.
    """
    mounts = [
        {"name": name, "mountPath": volume.path, "subPath": volume.path.lstrip("/")}
        for volume in volumes
    ]
    for index, file in enumerate(files):
        if any(file.dest.startswith(volume.path) for volume in volumes):
            continue
        mounts.append(
            {
                "name": name + POD_FILES_CONFIGMAP_NAME_SUFFIX,
                "mountPath": file.dest,
                "subPath": str(index),
            }
        )
    return mounts


def build_init_container_volumes(name, volumes, files):
    """Return the volume mounts of the init container that seeds the volumes."""
    if not volumes and not files:
        return []
    mounts = [{"name": name, "mountPath": KNUU_PATH}]
    mounts.extend(
        {
            "name": name + POD_FILES_CONFIGMAP_NAME_SUFFIX,
            "mountPath": file.dest,
            "subPath": str(index),
        }
        for index, file in enumerate(files)
    )
    return mounts


def build_init_container_command(volumes, files):
    """Return the shell command that copies files and volume contents into the shared volume."""
    parts = ["set -xe && ", f"mkdir -p {KNUU_PATH} && "]
    processed_dirs = set()

    for file in files:
        folder = _parent_dir(file.dest)
        if folder not in processed_dirs:
            parts.append(f"mkdir -p {KNUU_PATH}{folder} && ")
            processed_dirs.add(folder)
        parts.append(f"cp {file.dest} {_join_under(KNUU_PATH, file.dest)} && ")

    last = len(volumes) - 1
    for index, volume in enumerate(volumes):
        target = f"{KNUU_PATH}{volume.path}"
        cmd = (
            f'if [ -d {volume.path} ] && [ "$(ls -A {volume.path})" ]; then '
            f"mkdir -p {target} && cp -r {volume.path}/* {target} && "
            f"chown -R {volume.owner}:{volume.owner} {target}"
        )
        cmd += " ;fi && " if index < last else " ;fi"
        parts.append(cmd)

    full_command = "".join(parts)
    logger.debug("init container command: %s", full_command)
    return ["sh", "-c", full_command]


def build_resources(memory_request, memory_limit, cpu_request):
    """Return the resource requests and limits of a container."""
    return {
        "requests": {"memory": str(memory_request), "cpu": str(cpu_request)},
        "limits": {"memory": str(memory_limit)},
    }


def prepare_container(config):
    """Build a container manifest from a ``ContainerConfig``."""
    return {
        "name": config.name,
        "image": config.image,
        "imagePullPolicy": config.image_pull_policy,
        "command": list(config.command),
        "args": list(config.args),
        "env": build_env(config.env),
        "volumeMounts": build_container_volumes(config.name, config.volumes, config.files),
        "resources": build_resources(config.memory_request, config.memory_limit, config.cpu_request),
        "livenessProbe": config.liveness_probe,
        "readinessProbe": config.readiness_probe,
        "startupProbe": config.startup_probe,
        "securityContext": config.security_context,
    }


def prepare_init_containers(config, init):
    """Return the init containers: one when ``init`` is set and there are volumes, else none."""
    if not init or not config.volumes:
        return []
    return [
        {
            "name": config.name + INIT_CONTAINER_NAME_SUFFIX,
            "image": config.image,
            "securityContext": {"runAsUser": DEFAULT_CONTAINER_USER},
            "command": build_init_container_command(config.volumes, config.files),
            "volumeMounts": build_init_container_volumes(config.name, config.volumes, config.files),
        }
    ]


def prepare_pod_volumes(config):
    """Return the pod volumes one container needs."""
    return build_pod_volumes(config.name, len(config.volumes), len(config.files))


def prepare_pod_spec(spec, init):
    """Build a pod spec from a ``PodConfig``, sidecars included."""
    containers = [prepare_container(spec.container_config)]
    volumes = prepare_pod_volumes(spec.container_config)
    for sidecar in spec.sidecar_configs:
        containers.append(prepare_container(sidecar))
        volumes.extend(prepare_pod_volumes(sidecar))
    return {
        "serviceAccountName": spec.service_account_name,
        "securityContext": {"fsGroup": spec.fs_group},
        "initContainers": prepare_init_containers(spec.container_config, init),
        "containers": containers,
        "volumes": volumes,
    }


def prepare_pod(spec, init):
    """Build a complete pod manifest from a ``PodConfig``."""
    pod = {
        "metadata": {
            "namespace": spec.namespace,
            "name": spec.name,
            "labels": dict(spec.labels),
            "annotations": dict(spec.annotations),
        },
        "spec": prepare_pod_spec(spec, init),
        "status": {},
    }
    logger.debug("prepared pod %s in namespace %s", spec.name, spec.namespace)
    return pod


def prepare_replica_set(rs_config, init):
    """Build a complete replica set manifest from a ``ReplicaSetConfig``."""
    labels = dict(rs_config.labels)
    replica_set = {
        "metadata": {
            "namespace": rs_config.namespace,
            "name": rs_config.name,
            "labels": labels,
        },
        "spec": {
            "replicas": rs_config.replicas,
            "selector": {"matchLabels": dict(labels)},
            "template": {
                "metadata": {
                    "namespace": rs_config.namespace,
                    "name": rs_config.name,
                    "labels": dict(labels),
                    "annotations": dict(rs_config.pod_config.annotations),
                },
                "spec": prepare_pod_spec(rs_config.pod_config, init),
            },
        },
        "status": {},
    }
    logger.debug("prepared replica set %s in namespace %s", rs_config.name, rs_config.namespace)
    return replica_set


def build_ports(tcp_ports, udp_ports):
    """Return service ports, TCP ones first, each targeting the same port number."""
    ports = [
        {"name": f"tcp-{port}", "protocol": "TCP", "port": port, "targetPort": port}
        for port in tcp_ports or []
    ]
    ports.extend(
        {"name": f"udp-{port}", "protocol": "UDP", "port": port, "targetPort": port}
        for port in udp_ports or []
    )
    return ports


def prepare_service(namespace, name, labels, selector_map, tcp_ports, udp_ports):
    """Build a ClusterIP service manifest; raise when a required part is missing."""
    if not namespace:
        raise ERR_NAMESPACE_REQUIRED
    if not name:
        raise ERR_SERVICE_NAME_REQUIRED
    ports = build_ports(tcp_ports, udp_ports)
    if not ports:
        raise ERR_NO_PORTS_SPECIFIED.with_params(name)
    return {
        "metadata": {
            "namespace": namespace,
            "name": name,
            "labels": dict(labels or {}),
        },
        "spec": {
            "ports": ports,
            "selector": dict(selector_map or {}),
            "type": "ClusterIP",
        },
        "status": {},
    }


def prepare_network_policy(namespace, name, selector_map, ingress_selector_map, egress_selector_map):
    """Build a network policy manifest restricting both ingress and egress.

    A ``None`` selector for ingress or egress means no traffic is allowed in
    that direction; a mapping allows traffic to or from the matching pods.
    """
    ingress = []
    if ingress_selector_map is not None:
        ingress = [{"from": [{"podSelector": {"matchLabels": dict(ingress_selector_map)}}]}]
    egress = []
    if egress_selector_map is not None:
        egress = [{"to": [{"podSelector": {"matchLabels": dict(egress_selector_map)}}]}]
    return {
        "metadata": {"namespace": namespace, "name": name},
        "spec": {
            "podSelector": {"matchLabels": dict(selector_map or {})},
            "policyTypes": ["Ingress", "Egress"],
            "ingress": ingress,
            "egress": egress,
        },
    }