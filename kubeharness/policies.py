"""Network policies, roles, role bindings and service accounts."""

from __future__ import annotations

from .base import ApiError, KubeBase, NotFoundError
from .errors import (
    ERR_CLUSTER_ROLE_ALREADY_EXISTS,
    ERR_CLUSTER_ROLE_BINDING_ALREADY_EXISTS,
    ERR_CREATING_NETWORK_POLICY,
    ERR_DELETING_NETWORK_POLICY,
    ERR_GETTING_NETWORK_POLICY,
    KubeError,
)
from .manifests import prepare_network_policy
from .validate import (
    validate_cluster_role_binding_name,
    validate_cluster_role_name,
    validate_labels,
    validate_network_policy_name,
    validate_policy_rules,
    validate_role_binding_name,
    validate_role_name,
    validate_selector_map,
    validate_service_account_name,
    validate_service_name,
)

RBAC_GROUP_NAME = "rbac.authorization.k8s.io"


def _rule_manifest(rule):
    return {
        "apiGroups": list(rule.api_groups),
        "resources": list(rule.resources),
        "resourceNames": list(rule.resource_names),
        "nonResourceURLs": list(rule.non_resource_urls),
        "verbs": list(rule.verbs),
    }


class PolicyOps(KubeBase):
    """Operations on access-control objects."""

    def create_network_policy(self, name, selector_map, ingress_selector_map=None, egress_selector_map=None):
        self._ensure_active()
        validate_network_policy_name(name)
        validate_selector_map(selector_map)
        policy = prepare_network_policy(
            self.namespace, name, selector_map, ingress_selector_map, egress_selector_map
        )
        try:
            self.store.create("networkpolicies", self.namespace, policy)
        except ApiError as err:
            raise ERR_CREATING_NETWORK_POLICY.with_params(name).wrap(err) from err

    def delete_network_policy(self, name):
        try:
            self.store.delete("networkpolicies", self.namespace, name)
        except ApiError as err:
            raise ERR_DELETING_NETWORK_POLICY.with_params(name).wrap(err) from err

    def get_network_policy(self, name):
        try:
            return self.store.get("networkpolicies", self.namespace, name)
        except ApiError as err:
            raise ERR_GETTING_NETWORK_POLICY.with_params(name).wrap(err) from err

    def network_policy_exists(self, name):
        try:
            self.get_network_policy(name)
        except KubeError as err:
            self.logger.debug("getting network policy %s: %s", name, err)
            return False
        return True

    def create_role(self, name, labels, policy_rules):
        self._ensure_active()
        validate_role_name(name)
        validate_labels(labels)
        validate_policy_rules(policy_rules)
        role = {
            "metadata": {"name": name, "namespace": self.namespace, "labels": dict(labels or {})},
            "rules": [_rule_manifest(rule) for rule in policy_rules or []],
        }
        self.store.create("roles", self.namespace, role)

    def delete_role(self, name):
        self.store.delete("roles", self.namespace, name)

    def create_cluster_role(self, name, labels, policy_rules):
        self._ensure_active()
        validate_cluster_role_name(name)
        validate_labels(labels)
        validate_policy_rules(policy_rules)
        try:
            self.store.get("clusterroles", None, name)
        except NotFoundError:
            pass
        except ApiError as err:
            raise ERR_CLUSTER_ROLE_ALREADY_EXISTS.with_params(name).wrap(err) from err
        else:
            raise ERR_CLUSTER_ROLE_ALREADY_EXISTS.with_params(name)

        role = {
            "metadata": {"name": name, "labels": dict(labels or {})},
            "rules": [_rule_manifest(rule) for rule in policy_rules or []],
        }
        self.store.create("clusterroles", None, role)

    def delete_cluster_role(self, name):
        self.store.delete("clusterroles", None, name)

    def create_role_binding(self, name, labels, role, service_account):
        self._ensure_active()
        validate_role_binding_name(name)
        validate_labels(labels)
        validate_role_name(role)
        validate_service_account_name(service_account)
        binding = {
            "metadata": {"name": name, "namespace": self.namespace, "labels": dict(labels or {})},
            "roleRef": {"kind": "Role", "name": role},
            "subjects": [
                {"kind": "ServiceAccount", "name": service_account, "namespace": self.namespace}
            ],
        }
        self.store.create("rolebindings", self.namespace, binding)

    def delete_role_binding(self, name):
        self.store.delete("rolebindings", self.namespace, name)

    def create_cluster_role_binding(self, name, labels, cluster_role, service_account):
        self._ensure_active()
        validate_cluster_role_binding_name(name)
        validate_labels(labels)
        validate_role_name(cluster_role)
        validate_service_account_name(service_account)
        try:
            self.store.get("clusterrolebindings", None, name)
        except NotFoundError:
            pass
        except ApiError as err:
            raise ERR_CLUSTER_ROLE_BINDING_ALREADY_EXISTS.with_params(name).wrap(err) from err
        else:
            raise ERR_CLUSTER_ROLE_BINDING_ALREADY_EXISTS.with_params(name)

        binding = {
            "metadata": {"name": name, "labels": dict(labels or {})},
            "roleRef": {"kind": "ClusterRole", "name": cluster_role, "apiGroup": RBAC_GROUP_NAME},
            "subjects": [
                {"kind": "ServiceAccount", "name": service_account, "namespace": self.namespace}
            ],
        }
        self.store.create("clusterrolebindings", None, binding)

    def delete_cluster_role_binding(self, name):
        self.store.delete("clusterrolebindings", None, name)

    def create_service_account(self, name, labels):
        self._ensure_active()
        validate_service_name(name)
        validate_labels(labels)
        account = {"metadata": {"name": name, "namespace": self.namespace, "labels": dict(labels or {})}}
        self.store.create("serviceaccounts", self.namespace, account)

    def delete_service_account(self, name):
        self._ensure_active()
        self.store.delete("serviceaccounts", self.namespace, name)