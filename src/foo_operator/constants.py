"""Constants for the Foo Operator."""

# API Group
API_GROUP = "tutorial.my.domain"
API_VERSION = "v1"
API_GROUP_VERSION = f"{API_GROUP}/{API_VERSION}"

# Resource Kinds
KIND_FOO = "Foo"
KIND_DEPLOYMENT = "Deployment"
KIND_POD = "Pod"

# Plurals
PLURAL_FOO = "foos"

# Labels
LABEL_APP = "app"

# Annotations
ANNOTATION_LINKED_EVENT = f"{API_GROUP}/linked-event"

# Field Manager
FIELD_MANAGER = "foo-operator"
CONTROLLER_NAME = "foo-operator"

# Workload defaults
DEFAULT_WORKLOAD_NAME = "jack"
DEFAULT_WORKLOAD_NAMESPACE = "tnf"
DEFAULT_WORKLOAD_IMAGE = "quay.io/testnetworkfunction/cnf-test-partner:latest"
DEFAULT_IMAGE_PULL_POLICY = "IfNotPresent"
DEFAULT_CONTAINER_PORT = 8080
DEFAULT_CPU_REQUEST_MILLIS = 250
DEFAULT_CPU_LIMIT_MILLIS = 500
DEFAULT_REPLICAS = 1

# Kubernetes defaults a Deployment with no replica count
KUBERNETES_DEFAULT_REPLICAS = 1

# Owner lookup strategies
OWNER_LOOKUP_INDEX = "index"
OWNER_LOOKUP_SCAN = "scan"

# Event Reasons
EVENT_REASON_RECONCILE_FAILED = "ReconcileFailed"
EVENT_REASON_WORKLOAD_CREATED = "WorkloadCreated"
EVENT_REASON_REPLICAS_CORRECTED = "ReplicasCorrected"
EVENT_REASON_STATUS_UPDATED = "StatusUpdated"
