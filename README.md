# kubeharness

Tools for driving Kubernetes-style resources from test harnesses. It covers
name sanitising, input validation, manifest building, and resource
operations against a pluggable resource store. The operations handle pods,
replica sets, services, persistent volume claims, network policies, roles,
role bindings and service accounts.

The package has no dependencies outside the standard library.

## Installation

```
pip install kubeharness
```

To run the test suite:

```
pip install "kubeharness[test]"
pytest
```

## Sanitising names

`kubeharness.naming.sanitize_name` turns an arbitrary string into a valid
DNS-1123 label:

- It lower-cases the string.
- It replaces each run of disallowed characters with a single hyphen.
- It strips leading and trailing hyphens.
- It cuts the result to 63 characters.

```python
from kubeharness.naming import sanitize_name

sanitize_name("Name_With_Invalid_Characters!")  # "name-with-invalid-characters"
```

If nothing is left, it raises `ValueError`.

## Errors

Failures are reported as `KubeError` (from `kubeharness.errors`). The module
defines a catalogue of base errors, such as `ERR_INVALID_PORT`,
`ERR_CREATING_POD` and `ERR_CLIENT_TERMINATED`.

- `with_params(*args)` returns a copy that carries parameters for the message.
- `wrap(cause)` returns a copy that wraps an underlying error.
- `matches(other)` tells whether an error has the same code as `other`, or has `other` in its chain of causes.

```python
from kubeharness.errors import ERR_INVALID_PORT, KubeError
from kubeharness.validate import validate_ports

validate_ports([80, 443])        # passes
try:
    validate_ports([0, 80])
except KubeError as err:
    assert err.matches(ERR_INVALID_PORT)
```

## Validation

`kubeharness.validate` checks names, labels, ports and policy rules before
anything is stored. It also checks whole configurations. A few of its
functions:

- `validate_labels`
- `validate_pod_config`
- `validate_replica_set_config`
- `validate_policy_rules`
- `validate_config_map`

Names are checked against the DNS-1123 label and subdomain rules. Label keys
are checked as qualified names.

## Quantities

`kubeharness.quantity.parse_quantity` parses resource sizes such as `"1Gi"`,
`"500m"` or `"1e3"` into a `Quantity`. The result keeps the exact amount and
the original text. `Quantity.value()` returns the amount as an integer,
rounded away from zero. A malformed string raises `ValueError`.

## Configurations and manifests

`kubeharness.configs` holds these dataclasses:

- `Volume`
- `File`
- `ContainerConfig`
- `PodConfig`
- `ReplicaSetConfig`
- `PolicyRule`
- `GroupVersionResource`

`kubeharness.manifests` turns them into plain dictionaries shaped like
cluster objects, through these functions:

- `prepare_pod`
- `prepare_replica_set`
- `prepare_service`
- `prepare_network_policy`

The smaller builders are also available:

- `build_env`
- `build_ports`
- `build_container_volumes`
- `build_init_container_command`

When `init` is set and a container has volumes, the pod gets an init
container. The init container copies the container's files and volume
contents into the shared `/knuu` volume.

## Working with resources

`kubeharness.client.Client` combines these operation groups:

- `PodOps`
- `ReplicaSetOps`
- `ServiceOps`
- `VolumeClaimOps`
- `PolicyOps`

It works in one namespace on top of a `ResourceStore`. Without a store, the
client keeps its objects in an `InMemoryStore` (from `kubeharness.base`).

```python
from kubeharness.base import InMemoryStore
from kubeharness.client import Client
from kubeharness.configs import ContainerConfig, PodConfig

with Client(InMemoryStore(), "test") as client:
    pod = client.deploy_pod(
        PodConfig(
            namespace="test",
            name="web",
            labels={"app": "web"},
            container_config=ContainerConfig(name="web", image="nginx"),
        ),
        False,
    )
    client.create_service("web", {"app": "web"}, {"app": "web"}, [80], [])
    client.is_pod_running("web")
    client.all_pods_statuses()   # list of PodStatus
    client.delete_pod("web")
```

Delete operations for pods, replica sets, services and persistent volume
claims treat a missing object as success.

`replace_pod` and `replace_replica_set` work in three steps:

1. Delete the object.
2. Poll until it is gone.
3. Create it again.

`wait_for_service(name, timeout)` polls until the service is ready and
accepts TCP connections. It raises `ERR_TIMEOUT_WAITING_FOR_SERVICE_READY`
once `timeout` seconds have passed.

`report_long_pending_pods` logs the pods that have been pending longer than
`max_pending_duration` seconds and returns their names.
`start_pending_pods_warning_monitor(stop_event)` runs that check in a
background thread until the given `threading.Event` is set.

`terminate()` marks the client as terminated. After that, creating
operations and lookups raise `ERR_CLIENT_TERMINATED`. Leaving the client's
`with` block calls `terminate()`.

### Injecting failures in tests

`InMemoryStore(reactors=[...])` takes `(verb, kind, handler)` entries.
`"*"` matches any verb or kind. The store consults them before its own data.

A handler is called as `handler(verb, kind, namespace, name, obj)`. It
returns `(handled, result)`, or raises to simulate an API failure.

```python
from kubeharness.base import ApiError, InMemoryStore

def fail(verb, kind, namespace, name, obj):
    raise ApiError("internal server error")

store = InMemoryStore(reactors=[("create", "pods", fail)])
```

## What the package does not do

The package ships no store that talks to a real cluster API server.
`InMemoryStore` is the only `ResourceStore` implementation. To reach a live
cluster, you would write your own implementation.

There is no support for the following:

- running commands inside pods
- port forwarding
- fetching logs
- config maps, daemon sets, namespaces or custom resources

The package also has no command-line interface.