from .errors import AccessErrorType, DeprovisioningErrorType, ErrorType, ProvisioningErrorType


class ProvisioningError(Exception):
    error_type: ErrorType = ProvisioningErrorType.REQUEST_FAILED

    def __init__(self,
                 reason: str = "",
                 *,
                 source_name: str | None = None,
                 label: str | None = None,
                 original_exception: Exception | None = None,
                 original_exception_traceback: str | None = None):
        self.reason = reason or self.error_type.default_reason
        self.source_name = source_name
        self.label = label
        self.original_exception = original_exception
        self.original_exception_traceback = original_exception_traceback
        super().__init__(f"{self.error_type.value}: {self.reason}")


class ProvisionRequestError(ProvisioningError):
    """A capacity source failed to answer `can_provision` or `provision`."""

    error_type = ProvisioningErrorType.REQUEST_FAILED


class ProvisionCompletionError(ProvisioningError):
    """An accepted planned capacity resolved to a failure."""

    error_type = ProvisioningErrorType.COMPLETION_FAILED


class ProvisionTimeoutError(ProvisionCompletionError):
    """An accepted planned capacity did not resolve within the configured bound."""

    error_type = ProvisioningErrorType.COMPLETION_TIMEOUT


class ReleaseError(Exception):
    error_type = DeprovisioningErrorType.RELEASE_FAILED

    def __init__(self,
                 node_name: str,
                 source_name: str | None,
                 original_exception: Exception | None = None,
                 original_exception_traceback: str | None = None):
        self.node_name = node_name
        self.source_name = source_name
        self.reason = self.error_type.default_reason
        self.original_exception = original_exception
        self.original_exception_traceback = original_exception_traceback
        super().__init__(f"{self.error_type.value}: node {node_name} from {source_name}: {original_exception}")


class PermissionDeniedError(Exception):
    error_type = AccessErrorType.PERMISSION_DENIED

    def __init__(self, actor_name: str, permission_name: str, source_name: str):
        self.actor_name = actor_name
        self.permission_name = permission_name
        self.source_name = source_name
        super().__init__(f"{actor_name} is missing the {permission_name} permission on {source_name}")


class CapacitySourceNotFoundError(Exception):

    def __init__(self, source_name: str):
        super().__init__(f"Capacity source with name '{source_name}' not found.")

        self.source_name = source_name


class NodeNotFoundError(Exception):

    def __init__(self, node_name: str):
        super().__init__(f"Node with name '{node_name}' not found.")

        self.node_name = node_name
