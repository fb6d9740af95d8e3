"""Pods: deployment, replacement, deletion and status reporting."""

from __future__ import annotations

import threading
import time
from collections import Counter
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

from .base import ApiError, KubeBase, NotFoundError
from .configs import File, Volume
from .errors import (
    ERR_CREATING_POD,
    ERR_DELETING_POD,
    ERR_DELETING_POD_FAILED,
    ERR_DEPLOYING_POD,
    ERR_GET_POD_STATUS,
    ERR_GETTING_POD,
    ERR_LISTING_PODS,
    ERR_WAITING_FOR_POD_DELETION,
    KubeError,
)
from .manifests import prepare_pod
from .validate import validate_pod_config

POD_PENDING = "Pending"


@dataclass(frozen=True)
class PodStatus:
    """The phase of a pod and, when pending, how long it has been pending."""

    name: str
    status: str
    pending_duration: timedelta = timedelta(0)


def _creation_time(pod):
    created = pod.get("metadata", {}).get("creationTimestamp")
    if isinstance(created, str):
        created = datetime.fromisoformat(created.replace("Z", "+00:00"))
    if isinstance(created, datetime) and created.tzinfo is None:
        created = created.replace(tzinfo=timezone.utc)
    return created


def _status_of(pod):
    phase = pod.get("status", {}).get("phase", "")
    pending = timedelta(0)
    if phase == POD_PENDING:
        created = _creation_time(pod)
        if created is not None:
            pending = datetime.now(timezone.utc) - created
    return PodStatus(pod.get("metadata", {}).get("name", ""), phase, pending)


def generate_pods_status_summary(statuses):
    """Return a count of pods per phase, in the order the phases first appear."""
    counts = Counter(status.status for status in statuses)
    output = "".join(f"{phase}: {count} , " for phase, count in counts.items())
    return output.removesuffix(", ")


class PodOps(KubeBase):
    """Operations on pods."""

    def deploy_pod(self, pod_config, init=False):
        """Create a pod from ``pod_config`` and return it as created."""
        self._ensure_active()
        validate_pod_config(pod_config)
        pod = prepare_pod(pod_config, init)
        try:
            return self.store.create("pods", self.namespace, pod)
        except ApiError as err:
            raise ERR_CREATING_POD.wrap(err) from err

    def new_volume(self, path, size, owner):
        return Volume(path=path, size=size, owner=owner)

    def new_file(self, source, dest):
        return File(source=source, dest=dest)

    def replace_pod_with_grace_period(self, pod_config, grace_period=None):
        """Delete the pod, wait until it is gone, then deploy it again."""
        self.logger.debug("replacing pod %s", pod_config.name)
        try:
            self.delete_pod_with_grace_period(pod_config.name, grace_period)
        except (ApiError, KubeError) as err:
            raise ERR_DELETING_POD.wrap(err) from err

        try:
            self._wait_for_pod_deletion(pod_config.name)
        except (ApiError, KubeError) as err:
            raise ERR_WAITING_FOR_POD_DELETION.with_params(pod_config.name).wrap(err) from err

        try:
            return self.deploy_pod(pod_config, False)
        except (ApiError, KubeError) as err:
            raise ERR_DEPLOYING_POD.wrap(err) from err

    def replace_pod(self, pod_config):
        return self.replace_pod_with_grace_period(pod_config, None)

    def _wait_for_pod_deletion(self, name):
        while True:
            time.sleep(self.retry_interval)
            try:
                self._get_pod(name)
            except NotFoundError:
                self.logger.debug("pod %s successfully deleted", name)
                return
            except (ApiError, KubeError) as err:
                raise ERR_WAITING_FOR_POD_DELETION.with_params(name).wrap(err) from err

    def is_pod_running(self, name):
        """Tell whether every container of the pod is ready."""
        try:
            pod = self._get_pod(name)
        except (ApiError, KubeError) as err:
            raise ERR_GETTING_POD.with_params(name).wrap(err) from err
        statuses = pod.get("status", {}).get("containerStatuses") or []
        return all(status.get("ready", False) for status in statuses)

    def delete_pod_with_grace_period(self, name, grace_period_seconds=None):
        """Delete the pod; a pod that does not exist is not an error."""
        try:
            self._get_pod(name)
        except NotFoundError:
            return
        try:
            self.store.delete("pods", self.namespace, name, grace_period_seconds)
        except ApiError as err:
            raise ERR_DELETING_POD_FAILED.with_params(name).wrap(err) from err

    def delete_pod(self, name):
        self.delete_pod_with_grace_period(name, None)

    def _get_pod(self, name):
        self._ensure_active()
        return self.store.get("pods", self.namespace, name)

    def all_pods_statuses(self):
        """Return the status of every pod in the namespace."""
        try:
            pods = self.store.list("pods", self.namespace)
        except ApiError as err:
            raise ERR_LISTING_PODS.wrap(err) from err
        return [_status_of(pod) for pod in pods]

    def pod_status(self, name):
        try:
            pod = self.store.get("pods", self.namespace, name)
        except ApiError as err:
            raise ERR_GET_POD_STATUS.with_params(name).wrap(err) from err
        return _status_of(pod)

    def print_all_pods_statuses(self):
        for status in self.all_pods_statuses():
            print(f"{status.name:<60} | {status.status}")

    def report_long_pending_pods(self):
        """Log a warning naming the pods pending longer than allowed; return their names."""
        statuses = self.all_pods_statuses()
        long_pending = [
            status.name
            for status in statuses
            if status.status == POD_PENDING
            and status.pending_duration.total_seconds() > self.max_pending_duration
        ]
        if long_pending:
            self.logger.warning("Pods pending for too long: %s", ", ".join(long_pending))
            self.logger.info("Pod statuses: %s", generate_pods_status_summary(statuses))
        return long_pending

    def start_pending_pods_warning_monitor(self, stop_event):
        """Check for long pending pods periodically until ``stop_event`` is set."""

        def run():
            while not stop_event.wait(self.max_pending_duration):
                try:
                    self.report_long_pending_pods()
                except (ApiError, KubeError) as err:
                    self.logger.error("failed to report long pending pods: %s", err)
            self.logger.info("Shutting down long pending pods monitor.")

        thread = threading.Thread(target=run, name="pending-pods-monitor", daemon=True)
        thread.start()
        return thread