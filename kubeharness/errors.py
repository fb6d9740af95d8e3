"""Error type used throughout the package and the catalogue of known errors."""

from __future__ import annotations


class KubeError(Exception):
    """An error identified by a stable code, with optional parameters and cause.

    Instances are templates: ``with_params`` and ``wrap`` return new errors that
    keep the code, so ``matches`` can recognise them later.
    """

    def __init__(self, code, message, params=(), cause=None):
        super().__init__(code, message)
        self.code = code
        self.message = message
        self.params = tuple(params)
        self.cause = cause
        if cause is not None:
            self.__cause__ = cause

    def with_params(self, *args):
        """Return a copy of this error carrying the given parameters."""
        return KubeError(self.code, self.message, args, self.cause)

    def wrap(self, cause):
        """Return a copy of this error that wraps ``cause``."""
        return KubeError(self.code, self.message, self.params, cause)

    def matches(self, other):
        """Tell whether ``other`` is this error or appears in its chain of causes."""
        if isinstance(other, KubeError) and other.code == self.code:
            return True
        cause = self.cause
        if cause is None:
            return False
        if isinstance(cause, KubeError):
            return cause.matches(other)
        return cause is other or cause == other

    def __str__(self):
        text = self.message
        if self.params:
            try:
                text = self.message.format(*self.params)
            except (IndexError, KeyError):
                text = f"{self.message} {list(self.params)}"
        if self.cause is not None:
            return f"{text}: {self.cause}"
        return text

    def __repr__(self):
        return f"KubeError(code={self.code!r}, message={str(self)!r})"


def _define(code, message):
    return KubeError(code, message)


ERR_CLIENT_TERMINATED = _define("ClientTerminated", "terminated client, cannot perform any action")

ERR_CREATING_NETWORK_POLICY = _define("CreatingNetworkPolicy", "error creating network policy {}")
ERR_DELETING_NETWORK_POLICY = _define("DeletingNetworkPolicy", "error deleting network policy {}")
ERR_GETTING_NETWORK_POLICY = _define("GettingNetworkPolicy", "error getting network policy {}")

ERR_CREATING_POD = _define("CreatingPod", "error creating pod")
ERR_DELETING_POD = _define("DeletingPod", "error deleting pod")
ERR_DELETING_POD_FAILED = _define("DeletingPodFailed", "failed to delete pod {}")
ERR_WAITING_FOR_POD_DELETION = _define("WaitingForPodDeletion", "error waiting for pod {} to be deleted")
ERR_DEPLOYING_POD = _define("DeployingPod", "error deploying pod")
ERR_GETTING_POD = _define("GettingPod", "failed to get pod {}")
ERR_GETTING_K8S_CONFIG = _define("GettingK8sConfig", "failed to get k8s config")
ERR_CREATING_EXECUTOR = _define("CreatingExecutor", "failed to create executor")
ERR_EXECUTING_COMMAND = _define("ExecutingCommand", "failed to execute command, stdout: `{}`, stderr: `{}`")
ERR_COMMAND_EXECUTION = _define("CommandExecution", "error while executing command, stdout: `{}`, stderr: `{}`")
ERR_GETTING_CLUSTER_CONFIG = _define("GettingClusterConfig", "failed to get cluster config")
ERR_CREATING_ROUND_TRIPPER = _define("CreatingRoundTripper", "failed to create round tripper")
ERR_CREATING_PORT_FORWARDER = _define("CreatingPortForwarder", "failed to create port forwarder")
ERR_PORT_FORWARDING = _define("PortForwarding", "error forwarding port: {}")
ERR_FORWARDING_PORTS = _define("ForwardingPorts", "error forwarding ports")
ERR_PORT_FORWARDING_TIMEOUT = _define("PortForwardingTimeout", "timed out waiting for port forwarding to be ready")
ERR_LISTING_PODS = _define("ListingPods", "failed to list pods")
ERR_GET_POD_STATUS = _define("GetPodStatus", "failed to get status of pod {}")

ERR_CREATING_PERSISTENT_VOLUME_CLAIM = _define(
    "CreatingPersistentVolumeClaim", "error creating persistent volume claim {}"
)
ERR_DELETING_PERSISTENT_VOLUME_CLAIM = _define(
    "DeletingPersistentVolumeClaim", "error deleting persistent volume claim {}"
)

ERR_CREATING_REPLICA_SET = _define("CreatingReplicaSet", "error creating replica set")
ERR_DELETING_REPLICA_SET = _define("DeletingReplicaSet", "error deleting replica set")
ERR_WAITING_FOR_REPLICA_SET_DELETION = _define(
    "WaitingForReplicaSetDeletion", "error waiting for replica set {} to be deleted"
)
ERR_DEPLOYING_REPLICA_SET = _define("DeployingReplicaSet", "error deploying replica set")
ERR_CHECKING_REPLICA_SET_EXISTS = _define("CheckingReplicaSetExists", "error checking if replica set {} exists")
ERR_LISTING_PODS_FOR_REPLICA_SET = _define("ListingPodsForReplicaSet", "error listing pods for replica set {}")
ERR_NO_PODS_FOR_REPLICA_SET = _define("NoPodsForReplicaSet", "no pods found for replica set {}")
ERR_GETTING_REPLICA_SET = _define("GettingReplicaSet", "error getting replica set {}")

ERR_CLUSTER_ROLE_ALREADY_EXISTS = _define("ClusterRoleAlreadyExists", "cluster role {} already exists")
ERR_CLUSTER_ROLE_BINDING_ALREADY_EXISTS = _define(
    "ClusterRoleBindingAlreadyExists", "cluster role binding {} already exists"
)

ERR_PREPARING_SERVICE = _define("PreparingService", "error preparing service {}")
ERR_CREATING_SERVICE = _define("CreatingService", "error creating service {}")
ERR_PATCHING_SERVICE = _define("PatchingService", "error patching service {}")
ERR_GETTING_SERVICE = _define("GettingService", "error getting service {}")
ERR_DELETING_SERVICE = _define("DeletingService", "error deleting service {}")
ERR_TIMEOUT_WAITING_FOR_SERVICE_READY = _define(
    "TimeoutWaitingForServiceReady", "timed out waiting for service to be ready"
)
ERR_CHECKING_SERVICE_READY = _define("CheckingServiceReady", "error checking if service {} is ready")
ERR_GETTING_SERVICE_ENDPOINT = _define("GettingServiceEndpoint", "error getting endpoint of service {}")
ERR_LOAD_BALANCER_IP_NOT_AVAILABLE = _define("LoadBalancerIPNotAvailable", "load balancer IP not available")
ERR_GETTING_NODES = _define("GettingNodes", "error getting nodes")
ERR_NO_NODES_FOUND = _define("NoNodesFound", "no nodes found")
ERR_FAILED_TO_CONNECT = _define("FailedToConnect", "failed to connect to {}")
ERR_NAMESPACE_REQUIRED = _define("NamespaceRequired", "namespace is required")
ERR_SERVICE_NAME_REQUIRED = _define("ServiceNameRequired", "service name is required")
ERR_NO_PORTS_SPECIFIED = _define("NoPortsSpecified", "no ports specified for service {}")

ERR_INVALID_NAMESPACE_NAME = _define("InvalidNamespaceName", "invalid namespace name {}: {}")
ERR_INVALID_CONFIG_MAP_NAME = _define("InvalidConfigMapName", "invalid config map name {}: {}")
ERR_INVALID_LABEL_KEY = _define("InvalidLabelKey", "invalid label key {}: {}")
ERR_INVALID_LABEL_VALUE = _define("InvalidLabelValue", "invalid label value for key {}: {}")
ERR_INVALID_CONFIG_MAP_KEY = _define("InvalidConfigMapKey", "invalid config map key {}: {}")
ERR_INVALID_CUSTOM_RESOURCE_NAME = _define("InvalidCustomResourceName", "invalid custom resource name {}: {}")
ERR_INVALID_GROUP_VERSION_RESOURCE = _define(
    "InvalidGroupVersionResource", "invalid group version resource, group: {}, version: {}, resource: {}"
)
ERR_CUSTOM_RESOURCE_OBJECT_NIL = _define("CustomResourceObjectNil", "custom resource object cannot be nil")
ERR_CUSTOM_RESOURCE_OBJECT_NO_SPEC = _define(
    "CustomResourceObjectNoSpec", "custom resource object must have a spec field: {}"
)
ERR_INVALID_DAEMON_SET_NAME = _define("InvalidDaemonSetName", "invalid daemon set name {}: {}")
ERR_INVALID_NETWORK_POLICY_NAME = _define("InvalidNetworkPolicyName", "invalid network policy name {}: {}")
ERR_INVALID_POD_NAME = _define("InvalidPodName", "invalid pod name {}: {}")
ERR_INVALID_CONTAINER_NAME = _define("InvalidContainerName", "invalid container name {}: {}")
ERR_EMPTY_COMMAND = _define("EmptyCommand", "command cannot be empty")
ERR_INVALID_PORT = _define("InvalidPort", "invalid port {}")
ERR_INVALID_POD_ANNOTATION_KEY = _define("InvalidPodAnnotationKey", "invalid pod annotation key {}: {}")
ERR_ANNOTATION_VALUE_TOO_LARGE = _define("AnnotationValueTooLarge", "annotation value for key {} is too large")
ERR_CONTAINER_IMAGE_EMPTY = _define("ContainerImageEmpty", "image of container {} cannot be empty")
ERR_VOLUME_PATH_EMPTY = _define("VolumePathEmpty", "volume path cannot be empty: {}")
ERR_VOLUME_SIZE_ZERO = _define("VolumeSizeZero", "size of volume {} must be greater than zero")
ERR_FILE_SOURCE_DEST_EMPTY = _define(
    "FileSourceDestEmpty", "file source and destination cannot be empty, source: {}, dest: {}"
)
ERR_INVALID_PVC_NAME = _define("InvalidPVCName", "invalid persistent volume claim name {}: {}")
ERR_PVC_SIZE_ZERO = _define("PVCSizeZero", "persistent volume claim size must be greater than zero: {}")
ERR_INVALID_REPLICA_SET_NAME = _define("InvalidReplicaSetName", "invalid replica set name {}: {}")
ERR_REPLICA_SET_REPLICAS_NEGATIVE = _define("ReplicaSetReplicasNegative", "replica count cannot be negative: {}")
ERR_INVALID_ROLE_NAME = _define("InvalidRoleName", "invalid role name {}: {}")
ERR_POLICY_RULE_NO_VERBS = _define("PolicyRuleNoVerbs", "policy rule must have at least one verb")
ERR_POLICY_RULE_VERB_EMPTY = _define("PolicyRuleVerbEmpty", "policy rule verb cannot be empty")
ERR_POLICY_RULE_NO_RESOURCES = _define(
    "PolicyRuleNoResources", "policy rule must have at least one resource or non-resource URL"
)
ERR_INVALID_CLUSTER_ROLE_NAME = _define("InvalidClusterRoleName", "invalid cluster role name {}: {}")
ERR_INVALID_ROLE_BINDING_NAME = _define("InvalidRoleBindingName", "invalid role binding name {}: {}")
ERR_INVALID_SERVICE_ACCOUNT_NAME = _define("InvalidServiceAccountName", "invalid service account name {}: {}")
ERR_INVALID_CLUSTER_ROLE_BINDING_NAME = _define(
    "InvalidClusterRoleBindingName", "invalid cluster role binding name {}: {}"
)
ERR_INVALID_SERVICE_NAME = _define("InvalidServiceName", "invalid service name {}: {}")