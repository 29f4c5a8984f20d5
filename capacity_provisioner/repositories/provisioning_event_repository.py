import abc

from ..entities import ProvisioningEvent


class ProvisioningEventRepository(abc.ABC):
    """
    Append-only history of the provisioning decisions and their outcome.
    """

    @abc.abstractmethod
    def save_event(self, event: ProvisioningEvent) -> None:
        pass

    @abc.abstractmethod
    def load_recent(self, limit: int = 100) -> list[ProvisioningEvent]:
        """
        Loads the latest events, most recent first.
        """
        pass

    @abc.abstractmethod
    def load_failures(self, source_name: str | None = None) -> list[ProvisioningEvent]:
        pass
