"""Validation of names, labels and configurations before they reach the API."""

from __future__ import annotations

import re

from .errors import (
    ERR_ANNOTATION_VALUE_TOO_LARGE,
    ERR_CONTAINER_IMAGE_EMPTY,
    ERR_CUSTOM_RESOURCE_OBJECT_NIL,
    ERR_CUSTOM_RESOURCE_OBJECT_NO_SPEC,
    ERR_EMPTY_COMMAND,
    ERR_FILE_SOURCE_DEST_EMPTY,
    ERR_INVALID_CLUSTER_ROLE_BINDING_NAME,
    ERR_INVALID_CLUSTER_ROLE_NAME,
    ERR_INVALID_CONFIG_MAP_KEY,
    ERR_INVALID_CONFIG_MAP_NAME,
    ERR_INVALID_CONTAINER_NAME,
    ERR_INVALID_CUSTOM_RESOURCE_NAME,
    ERR_INVALID_DAEMON_SET_NAME,
    ERR_INVALID_GROUP_VERSION_RESOURCE,
    ERR_INVALID_LABEL_KEY,
    ERR_INVALID_LABEL_VALUE,
    ERR_INVALID_NAMESPACE_NAME,
    ERR_INVALID_NETWORK_POLICY_NAME,
    ERR_INVALID_POD_ANNOTATION_KEY,
    ERR_INVALID_POD_NAME,
    ERR_INVALID_PORT,
    ERR_INVALID_PVC_NAME,
    ERR_INVALID_REPLICA_SET_NAME,
    ERR_INVALID_ROLE_BINDING_NAME,
    ERR_INVALID_ROLE_NAME,
    ERR_INVALID_SERVICE_ACCOUNT_NAME,
    ERR_INVALID_SERVICE_NAME,
    ERR_POLICY_RULE_NO_RESOURCES,
    ERR_POLICY_RULE_NO_VERBS,
    ERR_POLICY_RULE_VERB_EMPTY,
    ERR_PVC_SIZE_ZERO,
    ERR_REPLICA_SET_REPLICAS_NEGATIVE,
    ERR_VOLUME_PATH_EMPTY,
    ERR_VOLUME_SIZE_ZERO,
)

_DNS1123_LABEL_MAX = 63
_DNS1123_SUBDOMAIN_MAX = 253
_QUALIFIED_NAME_MAX = 63
_LABEL_VALUE_MAX = 63
_CONFIG_MAP_KEY_MAX = 253
_ANNOTATION_VALUE_MAX = 256000

_LABEL_PART = r"[a-z0-9](?:[-a-z0-9]*[a-z0-9])?"
_DNS1123_LABEL_RE = re.compile(_LABEL_PART)
_DNS1123_SUBDOMAIN_RE = re.compile(rf"{_LABEL_PART}(?:\.{_LABEL_PART})*")
_QUALIFIED_NAME_RE = re.compile(r"(?:[A-Za-z0-9][-A-Za-z0-9_.]*)?[A-Za-z0-9]")
_CONFIG_MAP_KEY_RE = re.compile(r"[-._a-zA-Z0-9]+")


def _dns1123_label_errors(value):
    errs = []
    if len(value) > _DNS1123_LABEL_MAX:
        errs.append(f"must be no more than {_DNS1123_LABEL_MAX} characters")
    if not _DNS1123_LABEL_RE.fullmatch(value):
        errs.append(
            "a lowercase RFC 1123 label must consist of lower case alphanumeric characters or '-', "
            "and must start and end with an alphanumeric character"
        )
    return errs


def _dns1123_subdomain_errors(value):
    errs = []
    if len(value) > _DNS1123_SUBDOMAIN_MAX:
        errs.append(f"must be no more than {_DNS1123_SUBDOMAIN_MAX} characters")
    if not _DNS1123_SUBDOMAIN_RE.fullmatch(value):
        errs.append(
            "a lowercase RFC 1123 subdomain must consist of lower case alphanumeric characters, "
            "'-' or '.', and must start and end with an alphanumeric character"
        )
    return errs


def _qualified_name_errors(value):
    parts = value.split("/")
    if len(parts) == 1:
        name = parts[0]
        errs = []
    elif len(parts) == 2:
        prefix, name = parts
        if not prefix:
            errs = ["prefix part must be non-empty"]
        else:
            errs = [f"prefix part {msg}" for msg in _dns1123_subdomain_errors(prefix)]
    else:
        return [
            "a qualified name must consist of alphanumeric characters, '-', '_' or '.', "
            "with an optional DNS subdomain prefix and '/'"
        ]

    if not name:
        errs.append("name part must be non-empty")
    elif len(name) > _QUALIFIED_NAME_MAX:
        errs.append(f"name part must be no more than {_QUALIFIED_NAME_MAX} characters")
    if name and not _QUALIFIED_NAME_RE.fullmatch(name):
        errs.append(
            "name part must consist of alphanumeric characters, '-', '_' or '.', "
            "and must start and end with an alphanumeric character"
        )
    return errs


def _label_value_errors(value):
    errs = []
    if len(value) > _LABEL_VALUE_MAX:
        errs.append(f"must be no more than {_LABEL_VALUE_MAX} characters")
    if value and not _QUALIFIED_NAME_RE.fullmatch(value):
        errs.append(
            "a valid label must be an empty string or consist of alphanumeric characters, "
            "'-', '_' or '.', and must start and end with an alphanumeric character"
        )
    return errs


def _config_map_key_errors(value):
    errs = []
    if len(value) > _CONFIG_MAP_KEY_MAX:
        errs.append(f"must be no more than {_CONFIG_MAP_KEY_MAX} characters")
    if not _CONFIG_MAP_KEY_RE.fullmatch(value):
        errs.append("a valid config key must consist of alphanumeric characters, '-', '_' or '.'")
    if value in (".", ".."):
        errs.append(f"must not be '{value}'")
    elif value.startswith(".."):
        errs.append("must not start with '..'")
    return errs


def validate_dns1123_label(name, error):
    """Raise ``error`` with details when ``name`` is not a DNS-1123 label."""
    errs = _dns1123_label_errors(name)
    if errs:
        raise error.with_params(name, errs)


def validate_dns1123_subdomain(name, error):
    """Raise ``error`` with details when ``name`` is not a DNS-1123 subdomain."""
    errs = _dns1123_subdomain_errors(name)
    if errs:
        raise error.with_params(name, errs)


def validate_namespace(name):
    validate_dns1123_label(name, ERR_INVALID_NAMESPACE_NAME)


def validate_config_map_name(name):
    validate_dns1123_subdomain(name, ERR_INVALID_CONFIG_MAP_NAME)


def validate_labels(labels):
    """Check every label key is a qualified name and every value a valid label value."""
    for key, value in (labels or {}).items():
        errs = _qualified_name_errors(key)
        if errs:
            raise ERR_INVALID_LABEL_KEY.with_params(key, errs)
        errs = _label_value_errors(value)
        if errs:
            raise ERR_INVALID_LABEL_VALUE.with_params(key, errs)


def validate_config_map_keys(data):
    for key in data or {}:
        errs = _config_map_key_errors(key)
        if errs:
            raise ERR_INVALID_CONFIG_MAP_KEY.with_params(key, errs)


def validate_custom_resource_name(name):
    validate_dns1123_subdomain(name, ERR_INVALID_CUSTOM_RESOURCE_NAME)


def validate_group_version_resource(gvr):
    if not gvr.group or not gvr.version or not gvr.resource:
        raise ERR_INVALID_GROUP_VERSION_RESOURCE.with_params(gvr.group, gvr.version, gvr.resource)


def validate_custom_resource_object(obj):
    if obj is None:
        raise ERR_CUSTOM_RESOURCE_OBJECT_NIL
    if "spec" not in obj:
        raise ERR_CUSTOM_RESOURCE_OBJECT_NO_SPEC.with_params(obj)


def validate_daemon_set_name(name):
    validate_dns1123_subdomain(name, ERR_INVALID_DAEMON_SET_NAME)


def validate_network_policy_name(name):
    validate_dns1123_subdomain(name, ERR_INVALID_NETWORK_POLICY_NAME)


def validate_selector_map(selector_map):
    validate_labels(selector_map)


def validate_pod_name(name):
    validate_dns1123_subdomain(name, ERR_INVALID_POD_NAME)


def validate_container_name(name):
    validate_dns1123_label(name, ERR_INVALID_CONTAINER_NAME)


def validate_command(cmd):
    if not cmd:
        raise ERR_EMPTY_COMMAND


def validate_port(port):
    if port < 1 or port > 65535:
        raise ERR_INVALID_PORT.with_params(port)


def validate_pod_annotations(annotations):
    for key, value in (annotations or {}).items():
        errs = _qualified_name_errors(key)
        if errs:
            raise ERR_INVALID_POD_ANNOTATION_KEY.with_params(key, errs)
        if len(value.encode("utf-8")) > _ANNOTATION_VALUE_MAX:
            raise ERR_ANNOTATION_VALUE_TOO_LARGE.with_params(key)


def validate_container_config(config):
    if not config.image:
        raise ERR_CONTAINER_IMAGE_EMPTY.with_params(config.name)
    for volume in config.volumes:
        validate_volume(volume)
    for file in config.files:
        validate_file(file)
    validate_container_name(config.name)


def validate_volume(volume):
    if not volume.path:
        raise ERR_VOLUME_PATH_EMPTY.with_params(volume.path)
    if volume.size.value() <= 0:
        raise ERR_VOLUME_SIZE_ZERO.with_params(volume.path)


def validate_file(file):
    if not file.source or not file.dest:
        raise ERR_FILE_SOURCE_DEST_EMPTY.with_params(file.source, file.dest)


def validate_pod_config(pod_config):
    validate_pod_name(pod_config.name)
    validate_namespace(pod_config.namespace)
    validate_labels(pod_config.labels)
    validate_pod_annotations(pod_config.annotations)
    validate_container_config(pod_config.container_config)
    for sidecar in pod_config.sidecar_configs:
        validate_container_config(sidecar)


def validate_pvc_name(name):
    validate_dns1123_subdomain(name, ERR_INVALID_PVC_NAME)


def validate_pvc_size(size):
    if size.value() <= 0:
        raise ERR_PVC_SIZE_ZERO.with_params(size)


def validate_replica_set_name(name):
    validate_dns1123_subdomain(name, ERR_INVALID_REPLICA_SET_NAME)


def validate_replica_set_config(rs_config):
    validate_replica_set_name(rs_config.name)
    validate_namespace(rs_config.namespace)
    validate_labels(rs_config.labels)
    if rs_config.replicas < 0:
        raise ERR_REPLICA_SET_REPLICAS_NEGATIVE.with_params(rs_config.replicas)
    validate_pod_config(rs_config.pod_config)


def validate_role_name(name):
    validate_dns1123_subdomain(name, ERR_INVALID_ROLE_NAME)


def validate_policy_rules(policy_rules):
    for rule in policy_rules or []:
        if not rule.verbs:
            raise ERR_POLICY_RULE_NO_VERBS
        if any(not verb for verb in rule.verbs):
            raise ERR_POLICY_RULE_VERB_EMPTY
        if not rule.resources and not rule.non_resource_urls:
            raise ERR_POLICY_RULE_NO_RESOURCES


def validate_cluster_role_name(name):
    validate_dns1123_subdomain(name, ERR_INVALID_CLUSTER_ROLE_NAME)


def validate_role_binding_name(name):
    validate_dns1123_subdomain(name, ERR_INVALID_ROLE_BINDING_NAME)


def validate_service_account_name(name):
    validate_dns1123_subdomain(name, ERR_INVALID_SERVICE_ACCOUNT_NAME)


def validate_cluster_role_binding_name(name):
    validate_dns1123_subdomain(name, ERR_INVALID_CLUSTER_ROLE_BINDING_NAME)


def validate_service_name(name):
    validate_dns1123_label(name, ERR_INVALID_SERVICE_NAME)


def validate_ports(ports):
    for port in ports:
        validate_port(port)


def validate_config_map(name, labels, data):
    validate_config_map_name(name)
    validate_labels(labels)
    validate_config_map_keys(data)