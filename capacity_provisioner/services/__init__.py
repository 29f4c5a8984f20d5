from .access_guard import AccessGuard as AccessGuard
from .capacity_source import CapacitySource as CapacitySource
from .retention_service import RetentionService as RetentionService
