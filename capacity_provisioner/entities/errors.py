import json
from enum import Enum

NEW_RELIC_ALERT_FLAG = '[New Relic Alert]'


class ErrorType(Enum):
    @property
    def default_reason(self):
        return DEFAULT_REASONS.get(self, "No specific reason provided.")


class ProvisioningErrorType(ErrorType):
    REQUEST_FAILED = "PROVISION_REQUEST_FAILED"
    COMPLETION_FAILED = "PROVISION_COMPLETION_FAILED"
    COMPLETION_TIMEOUT = "PROVISION_COMPLETION_TIMEOUT"


class DeprovisioningErrorType(ErrorType):
    RELEASE_FAILED = "RELEASE_FAILED"


class AccessErrorType(ErrorType):
    PERMISSION_DENIED = "PERMISSION_DENIED"


DEFAULT_REASONS = {
    ProvisioningErrorType.REQUEST_FAILED: "The capacity source failed to accept the provisioning request. It will be queried again on the next tick.",
    ProvisioningErrorType.COMPLETION_FAILED: "The node creation failed after the request was accepted. The demand will be re-evaluated on the next tick.",
    ProvisioningErrorType.COMPLETION_TIMEOUT: "The node creation did not complete in time. A late result will be discarded.",
    DeprovisioningErrorType.RELEASE_FAILED: "The node was removed from the cluster but its external resource could not be released. The resource may have leaked.",
    AccessErrorType.PERMISSION_DENIED: "The actor is not allowed to provision or remove capacity for this source.",
}


def serialize_error_type(error: ErrorType) -> str | None:
    if not error:
        return None

    return json.dumps({"type": type(error).__name__, "value": error.value})


def deserialize_error_type(serialized: str):
    if not serialized:
        return None

    try:
        payload = json.loads(serialized)
    except (TypeError, ValueError):
        return None

    enum_name = payload.get("type")
    raw_value = payload.get("value")
    if not enum_name:
        return None

    enum_cls = globals().get(enum_name)
    if not isinstance(enum_cls, type) or not issubclass(enum_cls, ErrorType):
        return None

    try:
        return enum_cls(raw_value)
    except (ValueError, TypeError):
        return None
