from ._provisioning_event_repository import SQLiteProvisioningEventRepository as SQLiteProvisioningEventRepository
