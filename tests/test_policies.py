import pytest

from kubeharness.base import ApiError, InMemoryStore, NotFoundError
from kubeharness.configs import PolicyRule
from kubeharness.errors import (
    ERR_CLIENT_TERMINATED,
    ERR_CLUSTER_ROLE_ALREADY_EXISTS,
    ERR_CLUSTER_ROLE_BINDING_ALREADY_EXISTS,
    ERR_CREATING_NETWORK_POLICY,
    ERR_DELETING_NETWORK_POLICY,
    ERR_GETTING_NETWORK_POLICY,
    ERR_INVALID_NETWORK_POLICY_NAME,
    ERR_POLICY_RULE_NO_VERBS,
    KubeError,
)
from kubeharness.policies import PolicyOps

NAMESPACE = "test"
RULES = [PolicyRule(api_groups=[""], verbs=["get", "list"], resources=["pods"])]


@pytest.fixture
def internal_error():
    return ApiError("internal server error")


@pytest.fixture
def store():
    return InMemoryStore()


@pytest.fixture
def ops(store):
    return PolicyOps(store, NAMESPACE)


def _raising(error):
    def handler(verb, kind, namespace, name, obj):
        raise error

    return handler


def _returning(result):
    def handler(verb, kind, namespace, name, obj):
        return True, result

    return handler


def test_create_network_policy_success(ops, store):
    ops.create_network_policy("test-np", {"app": "test"}, None, None)
    stored = store.get("networkpolicies", NAMESPACE, "test-np")
    assert stored["spec"]["podSelector"] == {"matchLabels": {"app": "test"}}
    assert stored["spec"]["ingress"] == []
    assert stored["spec"]["egress"] == []


def test_create_network_policy_client_error(ops, store, internal_error):
    store.reactors.insert(0, ("create", "networkpolicies", _raising(internal_error)))
    with pytest.raises(KubeError) as excinfo:
        ops.create_network_policy("error-np", {"app": "error"}, None, None)
    assert excinfo.value.matches(ERR_CREATING_NETWORK_POLICY)
    assert excinfo.value.matches(internal_error)


def test_create_network_policy_invalid_name(ops):
    with pytest.raises(KubeError) as excinfo:
        ops.create_network_policy("Bad_Name!", {"app": "x"}, None, None)
    assert excinfo.value.matches(ERR_INVALID_NETWORK_POLICY_NAME)


def test_create_network_policy_terminated(ops):
    ops.terminate()
    with pytest.raises(KubeError) as excinfo:
        ops.create_network_policy("test-np", {"app": "test"}, None, None)
    assert excinfo.value.matches(ERR_CLIENT_TERMINATED)


def test_delete_network_policy_success(ops, store):
    ops.create_network_policy("existing-np", {"app": "test"}, None, None)
    ops.delete_network_policy("existing-np")
    with pytest.raises(NotFoundError):
        store.get("networkpolicies", NAMESPACE, "existing-np")


def test_delete_network_policy_not_found(ops):
    with pytest.raises(KubeError) as excinfo:
        ops.delete_network_policy("non-existent-np")
    assert excinfo.value.matches(ERR_DELETING_NETWORK_POLICY)
    assert 'networkpolicies "non-existent-np" not found' in str(excinfo.value)


def test_delete_network_policy_client_error(ops, store, internal_error):
    store.reactors.insert(0, ("delete", "networkpolicies", _raising(internal_error)))
    with pytest.raises(KubeError) as excinfo:
        ops.delete_network_policy("error-np")
    assert excinfo.value.matches(ERR_DELETING_NETWORK_POLICY)
    assert excinfo.value.matches(internal_error)


def test_get_network_policy_success(ops):
    ops.create_network_policy("existing-np", {"app": "test"}, None, None)
    policy = ops.get_network_policy("existing-np")
    assert policy["metadata"]["name"] == "existing-np"
    assert policy["metadata"]["namespace"] == NAMESPACE


def test_get_network_policy_not_found(ops, store):
    missing = ApiError('networkpolicies "non-existent-np" not found')
    store.reactors.insert(0, ("get", "networkpolicies", _raising(missing)))
    with pytest.raises(KubeError) as excinfo:
        ops.get_network_policy("non-existent-np")
    assert excinfo.value.matches(ERR_GETTING_NETWORK_POLICY)
    assert excinfo.value.matches(missing)


def test_get_network_policy_client_error(ops, store, internal_error):
    store.reactors.insert(0, ("get", "networkpolicies", _raising(internal_error)))
    with pytest.raises(KubeError) as excinfo:
        ops.get_network_policy("error-np")
    assert excinfo.value.matches(ERR_GETTING_NETWORK_POLICY)
    assert excinfo.value.matches(internal_error)


def test_network_policy_exists(ops, store, internal_error):
    ops.create_network_policy("existing-np", {"app": "test"}, None, None)
    assert ops.network_policy_exists("existing-np") is True
    assert ops.network_policy_exists("non-existent-np") is False
    store.reactors.insert(0, ("get", "networkpolicies", _raising(internal_error)))
    assert ops.network_policy_exists("error-np") is False


def test_create_role_success(ops, store):
    ops.create_role("test-role", {"app": "test"}, RULES)
    role = store.get("roles", NAMESPACE, "test-role")
    assert role["rules"][0]["verbs"] == ["get", "list"]
    assert role["rules"][0]["resources"] == ["pods"]


def test_create_role_client_error(ops, store, internal_error):
    store.reactors.insert(0, ("create", "roles", _raising(internal_error)))
    with pytest.raises(ApiError) as excinfo:
        ops.create_role("error-role", {"app": "error"}, RULES)
    assert str(excinfo.value) == str(internal_error)


def test_create_role_rule_without_verbs(ops):
    with pytest.raises(KubeError) as excinfo:
        ops.create_role("test-role", {}, [PolicyRule(resources=["pods"])])
    assert excinfo.value.matches(ERR_POLICY_RULE_NO_VERBS)


def test_delete_role(ops, store, internal_error):
    store.reactors.insert(0, ("delete", "roles", _returning(None)))
    ops.delete_role("test-role")
    store.reactors.insert(0, ("delete", "roles", _raising(internal_error)))
    with pytest.raises(ApiError) as excinfo:
        ops.delete_role("error-role")
    assert str(excinfo.value) == str(internal_error)


def test_create_cluster_role_success(ops, store):
    ops.create_cluster_role("test-cluster-role", {"app": "test"}, RULES)
    assert store.get("clusterroles", None, "test-cluster-role")["metadata"]["labels"] == {"app": "test"}


def test_create_cluster_role_already_exists(ops, store, internal_error):
    store.reactors.insert(0, ("get", "clusterroles", _returning(None)))
    store.reactors.insert(0, ("create", "clusterroles", _raising(internal_error)))
    with pytest.raises(KubeError) as excinfo:
        ops.create_cluster_role("error-cluster-role", {"app": "error"}, RULES)
    assert excinfo.value.matches(ERR_CLUSTER_ROLE_ALREADY_EXISTS)
    assert str(excinfo.value) == str(ERR_CLUSTER_ROLE_ALREADY_EXISTS.with_params("error-cluster-role"))


def test_delete_cluster_role(ops, store, internal_error):
    store.reactors.insert(0, ("delete", "clusterroles", _returning(None)))
    ops.delete_cluster_role("test-cluster-role")
    store.reactors.insert(0, ("delete", "clusterroles", _raising(internal_error)))
    with pytest.raises(ApiError) as excinfo:
        ops.delete_cluster_role("error-cluster-role")
    assert str(excinfo.value) == str(internal_error)


def test_create_role_binding_success(ops, store):
    ops.create_role_binding("test-rolebinding", {"app": "test"}, "test-role", "test-sa")
    binding = store.get("rolebindings", NAMESPACE, "test-rolebinding")
    assert binding["roleRef"] == {"kind": "Role", "name": "test-role"}
    assert binding["subjects"] == [{"kind": "ServiceAccount", "name": "test-sa", "namespace": NAMESPACE}]


def test_create_role_binding_client_error(ops, store, internal_error):
    store.reactors.insert(0, ("create", "rolebindings", _raising(internal_error)))
    with pytest.raises(ApiError) as excinfo:
        ops.create_role_binding("error-rolebinding", {"app": "error"}, "error-role", "error-sa")
    assert str(excinfo.value) == str(internal_error)


def test_delete_role_binding(ops, store, internal_error):
    store.reactors.insert(0, ("delete", "rolebindings", _returning(None)))
    ops.delete_role_binding("test-rolebinding")
    store.reactors.insert(0, ("delete", "rolebindings", _raising(internal_error)))
    with pytest.raises(ApiError) as excinfo:
        ops.delete_role_binding("error-rolebinding")
    assert str(excinfo.value) == str(internal_error)


def test_create_cluster_role_binding_success(ops, store):
    ops.create_cluster_role_binding("test-clusterrolebinding", {"app": "test"}, "test-clusterrole", "test-sa")
    binding = store.get("clusterrolebindings", None, "test-clusterrolebinding")
    assert binding["roleRef"] == {
        "kind": "ClusterRole",
        "name": "test-clusterrole",
        "apiGroup": "rbac.authorization.k8s.io",
    }


def test_create_cluster_role_binding_already_exists(ops, store):
    store.reactors.insert(0, ("get", "clusterrolebindings", _returning({})))
    with pytest.raises(KubeError) as excinfo:
        ops.create_cluster_role_binding(
            "existing-clusterrolebinding", {"app": "existing"}, "existing-clusterrole", "existing-sa"
        )
    expected = ERR_CLUSTER_ROLE_BINDING_ALREADY_EXISTS.with_params("existing-clusterrolebinding")
    assert str(excinfo.value) == str(expected)


def test_create_cluster_role_binding_client_error(ops, store, internal_error):
    store.reactors.insert(0, ("get", "clusterrolebindings", _raising(internal_error)))
    with pytest.raises(KubeError) as excinfo:
        ops.create_cluster_role_binding(
            "error-clusterrolebinding", {"app": "error"}, "error-clusterrole", "error-sa"
        )
    expected = ERR_CLUSTER_ROLE_BINDING_ALREADY_EXISTS.with_params("error-clusterrolebinding").wrap(internal_error)
    assert str(excinfo.value) == str(expected)


def test_delete_cluster_role_binding(ops, store, internal_error):
    store.reactors.insert(0, ("delete", "clusterrolebindings", _returning(None)))
    ops.delete_cluster_role_binding("test-clusterrolebinding")
    store.reactors.insert(0, ("delete", "clusterrolebindings", _raising(internal_error)))
    with pytest.raises(ApiError) as excinfo:
        ops.delete_cluster_role_binding("error-clusterrolebinding")
    assert str(excinfo.value) == str(internal_error)


def test_create_service_account(ops, store, internal_error):
    ops.create_service_account("test-sa", {"app": "test"})
    assert store.get("serviceaccounts", NAMESPACE, "test-sa")["metadata"]["labels"] == {"app": "test"}
    store.reactors.insert(0, ("create", "serviceaccounts", _raising(internal_error)))
    with pytest.raises(ApiError) as excinfo:
        ops.create_service_account("error-sa", {"app": "error"})
    assert str(excinfo.value) == str(internal_error)


def test_delete_service_account(ops, store, internal_error):
    store.reactors.insert(0, ("delete", "serviceaccounts", _returning(None)))
    ops.delete_service_account("test-sa")
    store.reactors.insert(0, ("delete", "serviceaccounts", _raising(internal_error)))
    with pytest.raises(ApiError) as excinfo:
        ops.delete_service_account("error-sa")
    assert str(excinfo.value) == str(internal_error)


def test_delete_service_account_terminated(ops):
    ops.terminate()
    with pytest.raises(KubeError) as excinfo:
        ops.delete_service_account("test-sa")
    assert excinfo.value.matches(ERR_CLIENT_TERMINATED)