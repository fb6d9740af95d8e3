from dataclasses import replace

import pytest

from kubeharness.configs import (
    ContainerConfig,
    File,
    GroupVersionResource,
    PodConfig,
    PolicyRule,
    ReplicaSetConfig,
    Volume,
)
from kubeharness.quantity import parse_quantity


def test_volume_defaults_to_zero_size():
    vol = Volume(path="/data")
    assert vol.size.value() == 0
    assert vol.owner == 0


def test_volume_keeps_values():
    size = parse_quantity("1Gi")
    vol = Volume("/data", size, 1000)
    assert vol.path == "/data"
    assert vol.size is size
    assert vol.owner == 1000


def test_file_fields():
    f = File("source", "dest")
    assert (f.source, f.dest) == ("source", "dest")


def test_container_config_defaults_are_independent():
    first = ContainerConfig(name="a")
    second = ContainerConfig(name="b")
    first.env["KEY"] = "value"
    first.volumes.append(Volume("/x"))
    assert second.env == {}
    assert second.volumes == []


def test_pod_config_nested_default():
    pod = PodConfig(name="pod")
    assert pod.container_config.name == ""
    assert pod.sidecar_configs == []
    assert pod.fs_group == 0


def test_replica_set_config_holds_pod_config():
    pod = PodConfig(name="pod", namespace="ns")
    rs = ReplicaSetConfig(name="rs", replicas=3, pod_config=pod)
    assert rs.pod_config.name == "pod"
    assert rs.replicas == 3


def test_replace_creates_modified_copy():
    rs = ReplicaSetConfig(name="rs", namespace="ns")
    other = replace(rs, namespace="other")
    assert rs.namespace == "ns"
    assert other.namespace == "other"
    assert other.name == rs.name


def test_policy_rule_defaults():
    rule = PolicyRule(verbs=["get"], resources=["pods"])
    assert rule.non_resource_urls == []
    assert rule.verbs == ["get"]


def test_group_version_resource_is_immutable_and_comparable():
    gvr = GroupVersionResource("group", "v1", "resource")
    assert gvr == GroupVersionResource("group", "v1", "resource")
    with pytest.raises(AttributeError):
        gvr.group = "other"