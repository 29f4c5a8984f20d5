import abc

from ..entities import Demand


class DemandRepository(abc.ABC):
    """
    Provides the current demand, one entry per label, as computed by the job scheduler.
    """

    @abc.abstractmethod
    def load(self) -> list[Demand]:
        pass
