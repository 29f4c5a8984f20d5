from .ledger import ProvisioningLedger as ProvisioningLedger
from .provisioning_loop import ProvisioningLoop as ProvisioningLoop
