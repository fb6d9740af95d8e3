"""Replica sets: creation, replacement, deletion and inspection."""

from __future__ import annotations

import dataclasses
import time

from .base import ApiError, KubeBase, NotFoundError
from .errors import (
    ERR_CHECKING_REPLICA_SET_EXISTS,
    ERR_CREATING_REPLICA_SET,
    ERR_DELETING_REPLICA_SET,
    ERR_DEPLOYING_REPLICA_SET,
    ERR_GETTING_POD,
    ERR_GETTING_REPLICA_SET,
    ERR_LISTING_PODS_FOR_REPLICA_SET,
    ERR_NO_PODS_FOR_REPLICA_SET,
    ERR_WAITING_FOR_REPLICA_SET_DELETION,
    KubeError,
)
from .manifests import prepare_replica_set
from .validate import validate_replica_set_config

_KIND = "replicasets"


class ReplicaSetOps(KubeBase):
    """Operations on replica sets."""

    def create_replica_set(self, rs_config, init=False):
        """Create a replica set in the client's namespace and return it as created."""
        self._ensure_active()
        validate_replica_set_config(rs_config)
        rs_config = dataclasses.replace(rs_config, namespace=self.namespace)
        replica_set = prepare_replica_set(rs_config, init)
        try:
            return self.store.create(_KIND, self.namespace, replica_set)
        except ApiError as err:
            raise ERR_CREATING_REPLICA_SET.wrap(err) from err

    def replace_replica_set_with_grace_period(self, rs_config, grace_period=None):
        """Delete the replica set, wait until it is gone, then create it again."""
        self.logger.debug("replacing replica set %s", rs_config.name)
        try:
            self.delete_replica_set_with_grace_period(rs_config.name, grace_period)
        except (ApiError, KubeError) as err:
            raise ERR_DELETING_REPLICA_SET.wrap(err) from err

        try:
            self._wait_for_replica_set_deletion(rs_config.name)
        except (ApiError, KubeError) as err:
            raise ERR_WAITING_FOR_REPLICA_SET_DELETION.with_params(rs_config.name).wrap(err) from err

        try:
            return self.create_replica_set(rs_config, False)
        except (ApiError, KubeError) as err:
            raise ERR_DEPLOYING_REPLICA_SET.wrap(err) from err

    def replace_replica_set(self, rs_config):
        return self.replace_replica_set_with_grace_period(rs_config, None)

    def is_replica_set_running(self, name):
        """Tell whether as many replicas are ready as were asked for."""
        try:
            replica_set = self._get_replica_set(name)
        except (ApiError, KubeError) as err:
            raise ERR_GETTING_POD.with_params(name).wrap(err) from err
        wanted = replica_set.get("spec", {}).get("replicas", 1)
        ready = replica_set.get("status", {}).get("readyReplicas", 0)
        return ready == wanted

    def delete_replica_set_with_grace_period(self, name, grace_period_seconds=None):
        """Delete the replica set; one that does not exist is not an error."""
        try:
            exists = self.replica_set_exists(name)
        except (ApiError, KubeError) as err:
            raise ERR_CHECKING_REPLICA_SET_EXISTS.with_params(name).wrap(err) from err
        if not exists:
            return
        if grace_period_seconds is None:
            grace_period_seconds = 0
        try:
            self.store.delete(_KIND, self.namespace, name, grace_period_seconds)
        except ApiError as err:
            raise ERR_DELETING_REPLICA_SET.with_params(name).wrap(err) from err

    def delete_replica_set(self, name):
        self.delete_replica_set_with_grace_period(name, None)

    def get_first_pod_from_replica_set(self, name):
        """Return the first pod selected by the replica set, or ``None`` if it does not exist."""
        try:
            replica_set = self._get_replica_set(name)
        except NotFoundError:
            return None
        selector = (replica_set.get("spec", {}).get("selector") or {}).get("matchLabels") or {}
        try:
            pods = self.store.list("pods", self.namespace, selector)
        except ApiError as err:
            raise ERR_LISTING_PODS_FOR_REPLICA_SET.with_params(name).wrap(err) from err
        if not pods:
            raise ERR_NO_PODS_FOR_REPLICA_SET.with_params(name)
        self._ensure_active()
        return self.store.get("pods", self.namespace, pods[0]["metadata"]["name"])

    def replica_set_exists(self, name):
        try:
            self._get_replica_set(name)
        except NotFoundError:
            return False
        except (ApiError, KubeError) as err:
            raise ERR_GETTING_REPLICA_SET.with_params(name).wrap(err) from err
        return True

    def _get_replica_set(self, name):
        self._ensure_active()
        return self.store.get(_KIND, self.namespace, name)

    def _wait_for_replica_set_deletion(self, name):
        while True:
            time.sleep(self.retry_interval)
            try:
                exists = self.replica_set_exists(name)
            except (ApiError, KubeError) as err:
                raise ERR_CHECKING_REPLICA_SET_EXISTS.with_params(name).wrap(err) from err
            if not exists:
                return