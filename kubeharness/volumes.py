"""Persistent volume claims."""

from __future__ import annotations

from .base import ApiError, KubeBase, NotFoundError
from .errors import ERR_CREATING_PERSISTENT_VOLUME_CLAIM, ERR_DELETING_PERSISTENT_VOLUME_CLAIM
from .validate import validate_labels, validate_pvc_name, validate_pvc_size


class VolumeClaimOps(KubeBase):
    """Operations on persistent volume claims."""

    def create_persistent_volume_claim(self, name, labels, size):
        """Create a read-write-once claim requesting ``size`` of storage."""
        self._ensure_active()
        validate_pvc_name(name)
        validate_pvc_size(size)
        validate_labels(labels)
        claim = {
            "metadata": {"namespace": self.namespace, "name": name, "labels": dict(labels or {})},
            "spec": {
                "accessModes": ["ReadWriteOnce"],
                "resources": {"requests": {"storage": str(size)}},
            },
        }
        try:
            self.store.create("persistentvolumeclaims", self.namespace, claim)
        except ApiError as err:
            raise ERR_CREATING_PERSISTENT_VOLUME_CLAIM.with_params(name).wrap(err) from err
        self.logger.debug("persistent volume claim %s created", name)

    def delete_persistent_volume_claim(self, name):
        """Delete the claim; a claim that does not exist is not an error."""
        try:
            self.store.get("persistentvolumeclaims", self.namespace, name)
        except NotFoundError:
            return
        try:
            self.store.delete("persistentvolumeclaims", self.namespace, name)
        except ApiError as err:
            raise ERR_DELETING_PERSISTENT_VOLUME_CLAIM.with_params(name).wrap(err) from err
        self.logger.debug("persistent volume claim %s deleted", name)