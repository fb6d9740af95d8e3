"""Services: creation, patching, deletion, endpoints and readiness."""

from __future__ import annotations

import socket
import time

from .base import ApiError, KubeBase, NotFoundError
from .errors import (
    ERR_CHECKING_SERVICE_READY,
    ERR_CREATING_SERVICE,
    ERR_DELETING_SERVICE,
    ERR_FAILED_TO_CONNECT,
    ERR_GETTING_NODES,
    ERR_GETTING_SERVICE,
    ERR_GETTING_SERVICE_ENDPOINT,
    ERR_LOAD_BALANCER_IP_NOT_AVAILABLE,
    ERR_NO_NODES_FOUND,
    ERR_PATCHING_SERVICE,
    ERR_PREPARING_SERVICE,
    ERR_TIMEOUT_WAITING_FOR_SERVICE_READY,
    KubeError,
)
from .manifests import prepare_service
from .validate import validate_labels, validate_ports, validate_selector_map, validate_service_name

SERVICE_TYPE_LOAD_BALANCER = "LoadBalancer"
SERVICE_TYPE_NODE_PORT = "NodePort"
NODE_EXTERNAL_IP = "ExternalIP"

_KIND = "services"


def check_service_connectivity(service_endpoint):
    """Open and close a TCP connection to ``host:port``; raise when that fails."""
    host, _, port = service_endpoint.rpartition(":")
    host = host.strip("[]")
    try:
        with socket.create_connection((host, int(port)), timeout=KubeBase.wait_retry):
            pass
    except (OSError, ValueError) as err:
        raise ERR_FAILED_TO_CONNECT.with_params(service_endpoint).wrap(err) from err


class ServiceOps(KubeBase):
    """Operations on services."""

    def get_service(self, name):
        self._ensure_active()
        return self.store.get(_KIND, self.namespace, name)

    def _build_service(self, name, labels, selector_map, ports_tcp, ports_udp):
        self._ensure_active()
        validate_service_name(name)
        validate_labels(labels)
        validate_selector_map(selector_map)
        validate_ports(list(ports_tcp or []) + list(ports_udp or []))
        try:
            return prepare_service(self.namespace, name, labels, selector_map, ports_tcp, ports_udp)
        except KubeError as err:
            raise ERR_PREPARING_SERVICE.with_params(name).wrap(err) from err

    def create_service(self, name, labels, selector_map, ports_tcp, ports_udp):
        """Create a ClusterIP service exposing the given TCP and UDP ports."""
        service = self._build_service(name, labels, selector_map, ports_tcp, ports_udp)
        try:
            created = self.store.create(_KIND, self.namespace, service)
        except ApiError as err:
            raise ERR_CREATING_SERVICE.with_params(name).wrap(err) from err
        self.logger.debug("service %s created in namespace %s", name, self.namespace)
        return created

    def patch_service(self, name, labels, selector_map, ports_tcp, ports_udp):
        """Replace an existing service with one built from the given settings."""
        service = self._build_service(name, labels, selector_map, ports_tcp, ports_udp)
        try:
            updated = self.store.update(_KIND, self.namespace, service)
        except ApiError as err:
            raise ERR_PATCHING_SERVICE.with_params(name).wrap(err) from err
        self.logger.debug("service %s patched in namespace %s", name, self.namespace)
        return updated

    def delete_service(self, name):
        """Delete the service; one that does not exist is not an error."""
        try:
            self.get_service(name)
        except NotFoundError:
            return
        except (ApiError, KubeError) as err:
            raise ERR_GETTING_SERVICE.with_params(name).wrap(err) from err
        try:
            self.store.delete(_KIND, self.namespace, name)
        except ApiError as err:
            raise ERR_DELETING_SERVICE.with_params(name).wrap(err) from err
        self.logger.debug("service %s deleted from namespace %s", name, self.namespace)

    def get_service_ip(self, name):
        try:
            service = self.get_service(name)
        except (ApiError, KubeError) as err:
            raise ERR_GETTING_SERVICE.with_params(name).wrap(err) from err
        return service.get("spec", {}).get("clusterIP", "")

    def wait_for_service(self, name, timeout=None):
        """Wait until the service is ready and accepts connections.

        Raises the timeout error once ``timeout`` seconds have passed.
        """
        deadline = None if timeout is None else time.monotonic() + timeout
        interval = 0.0
        while True:
            if deadline is not None:
                remaining = deadline - time.monotonic()
                if remaining <= 0 or interval > remaining:
                    time.sleep(max(remaining, 0.0))
                    raise ERR_TIMEOUT_WAITING_FOR_SERVICE_READY
            time.sleep(interval)
            interval = self.wait_retry

            try:
                ready = self._is_service_ready(name)
            except (ApiError, KubeError) as err:
                raise ERR_CHECKING_SERVICE_READY.with_params(name).wrap(err) from err
            if not ready:
                continue

            try:
                endpoint = self.get_service_endpoint(name)
            except (ApiError, KubeError) as err:
                raise ERR_GETTING_SERVICE_ENDPOINT.with_params(name).wrap(err) from err

            try:
                check_service_connectivity(endpoint)
            except KubeError:
                continue
            return

    def get_service_endpoint(self, name):
        """Return ``host:port`` at which the service can be reached."""
        try:
            service = self.store.get(_KIND, self.namespace, name)
        except ApiError as err:
            raise ERR_GETTING_SERVICE.with_params(name).wrap(err) from err

        spec = service.get("spec", {})
        ports = spec.get("ports") or [{}]
        service_type = spec.get("type")

        if service_type == SERVICE_TYPE_LOAD_BALANCER:
            ingress = service.get("status", {}).get("loadBalancer", {}).get("ingress") or []
            if ingress:
                return f"{ingress[0].get('ip', '')}:{ports[0].get('port', 0)}"
            raise ERR_LOAD_BALANCER_IP_NOT_AVAILABLE

        if service_type == SERVICE_TYPE_NODE_PORT:
            try:
                nodes = self.store.list("nodes", None)
            except ApiError as err:
                raise ERR_GETTING_NODES.wrap(err) from err
            if not nodes:
                raise ERR_NO_NODES_FOUND
            addresses = nodes[0].get("status", {}).get("addresses") or []
            node_ip = next(
                (addr.get("address", "") for addr in addresses if addr.get("type") == NODE_EXTERNAL_IP),
                "",
            )
            return f"{node_ip}:{ports[0].get('nodePort', 0)}"

        return f"{spec.get('clusterIP', '')}:{ports[0].get('port', 0)}"

    def _is_service_ready(self, name):
        try:
            service = self.get_service(name)
        except (ApiError, KubeError) as err:
            raise ERR_GETTING_SERVICE.with_params(name).wrap(err) from err
        spec = service.get("spec", {})
        service_type = spec.get("type")
        if service_type == SERVICE_TYPE_LOAD_BALANCER:
            return bool(service.get("status", {}).get("loadBalancer", {}).get("ingress"))
        if service_type == SERVICE_TYPE_NODE_PORT:
            ports = spec.get("ports") or [{}]
            return ports[0].get("nodePort", 0) != 0
        return bool(spec.get("externalIPs"))