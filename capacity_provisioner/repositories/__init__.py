from .cluster_registry import ClusterRegistry as ClusterRegistry
from .demand_repository import DemandRepository as DemandRepository
from .provisioning_event_repository import ProvisioningEventRepository as ProvisioningEventRepository
