from .demand import Demand as Demand
from .errors import AccessErrorType as AccessErrorType
from .errors import DeprovisioningErrorType as DeprovisioningErrorType
from .errors import ErrorType as ErrorType
from .errors import ProvisioningErrorType as ProvisioningErrorType
from .exceptions import CapacitySourceNotFoundError as CapacitySourceNotFoundError
from .exceptions import NodeNotFoundError as NodeNotFoundError
from .exceptions import PermissionDeniedError as PermissionDeniedError
from .exceptions import ProvisionCompletionError as ProvisionCompletionError
from .exceptions import ProvisioningError as ProvisioningError
from .exceptions import ProvisionRequestError as ProvisionRequestError
from .exceptions import ProvisionTimeoutError as ProvisionTimeoutError
from .exceptions import ReleaseError as ReleaseError
from .failure import Failure as Failure
from .node import Node as Node
from .permission import Actor as Actor
from .permission import Permission as Permission
from .permission import PermissionGrant as PermissionGrant
from .planned_capacity import PlannedCapacity as PlannedCapacity
from .provisioning_event import ProvisioningEvent as ProvisioningEvent
from .retention_policy import AlwaysRetainPolicy as AlwaysRetainPolicy
from .retention_policy import IdleTimeoutRetentionPolicy as IdleTimeoutRetentionPolicy
from .retention_policy import RetentionPolicy as RetentionPolicy
from .retention_policy import create_retention_policy as create_retention_policy
