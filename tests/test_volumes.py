import pytest

from kubeharness.base import ApiError, InMemoryStore, NotFoundError
from kubeharness.errors import (
    ERR_CLIENT_TERMINATED,
    ERR_CREATING_PERSISTENT_VOLUME_CLAIM,
    ERR_DELETING_PERSISTENT_VOLUME_CLAIM,
    ERR_INVALID_PVC_NAME,
    ERR_PVC_SIZE_ZERO,
    KubeError,
)
from kubeharness.quantity import parse_quantity
from kubeharness.volumes import VolumeClaimOps

NAMESPACE = "test"


@pytest.fixture
def internal_error():
    return ApiError("internal server error")


@pytest.fixture
def store():
    return InMemoryStore()


@pytest.fixture
def ops(store):
    return VolumeClaimOps(store, NAMESPACE)


def _raising(error):
    def handler(verb, kind, namespace, name, obj):
        raise error

    return handler


def _claim(name):
    return {"metadata": {"namespace": NAMESPACE, "name": name}}


def test_create_success(ops, store):
    ops.create_persistent_volume_claim("test-pvc", {"app": "test"}, parse_quantity("1Gi"))
    claim = store.get("persistentvolumeclaims", NAMESPACE, "test-pvc")
    assert claim["spec"]["accessModes"] == ["ReadWriteOnce"]
    assert claim["spec"]["resources"]["requests"]["storage"] == "1Gi"
    assert claim["metadata"]["labels"] == {"app": "test"}


def test_create_client_error(ops, store, internal_error):
    store.reactors.insert(0, ("create", "persistentvolumeclaims", _raising(internal_error)))
    with pytest.raises(KubeError) as excinfo:
        ops.create_persistent_volume_claim("error-pvc", {"app": "error"}, parse_quantity("1Gi"))
    assert excinfo.value.matches(ERR_CREATING_PERSISTENT_VOLUME_CLAIM)
    assert excinfo.value.matches(internal_error)


def test_create_zero_size(ops):
    with pytest.raises(KubeError) as excinfo:
        ops.create_persistent_volume_claim("test-pvc", {}, parse_quantity("0Gi"))
    assert excinfo.value.matches(ERR_PVC_SIZE_ZERO)


def test_create_invalid_name(ops):
    with pytest.raises(KubeError) as excinfo:
        ops.create_persistent_volume_claim("Invalid_PVC!", {}, parse_quantity("1Gi"))
    assert excinfo.value.matches(ERR_INVALID_PVC_NAME)


def test_create_terminated(ops):
    ops.terminate()
    with pytest.raises(KubeError) as excinfo:
        ops.create_persistent_volume_claim("test-pvc", {}, parse_quantity("1Gi"))
    assert excinfo.value.matches(ERR_CLIENT_TERMINATED)


def test_delete_success_with_reactors(ops, store):
    calls = []

    def record_get(verb, kind, namespace, name, obj):
        calls.append((verb, namespace, name))
        return True, _claim(name)

    def record_delete(verb, kind, namespace, name, obj):
        calls.append((verb, namespace, name))
        return True, None

    store.reactors.insert(0, ("get", "persistentvolumeclaims", record_get))
    store.reactors.insert(0, ("delete", "persistentvolumeclaims", record_delete))
    result = ops.delete_persistent_volume_claim("test-pvc")
    assert result is None
    assert calls == [("get", NAMESPACE, "test-pvc"), ("delete", NAMESPACE, "test-pvc")]


def test_delete_removes_stored_claim(ops, store):
    ops.create_persistent_volume_claim("test-pvc", {}, parse_quantity("1Gi"))
    ops.delete_persistent_volume_claim("test-pvc")
    with pytest.raises(NotFoundError):
        store.get("persistentvolumeclaims", NAMESPACE, "test-pvc")


def test_delete_missing_is_not_an_error(ops, store):
    ops.delete_persistent_volume_claim("missing-pvc")
    assert store.list("persistentvolumeclaims", NAMESPACE) == []


def test_delete_client_error(ops, store, internal_error):
    store.reactors.insert(
        0, ("get", "persistentvolumeclaims", lambda *args: (True, _claim("error-pvc")))
    )
    store.reactors.insert(0, ("delete", "persistentvolumeclaims", _raising(internal_error)))
    with pytest.raises(KubeError) as excinfo:
        ops.delete_persistent_volume_claim("error-pvc")
    assert excinfo.value.matches(ERR_DELETING_PERSISTENT_VOLUME_CLAIM)
    assert excinfo.value.matches(internal_error)


def test_delete_get_error_propagates(ops, store, internal_error):
    store.reactors.insert(0, ("get", "persistentvolumeclaims", _raising(internal_error)))
    with pytest.raises(ApiError) as excinfo:
        ops.delete_persistent_volume_claim("error-pvc")
    assert excinfo.value is internal_error