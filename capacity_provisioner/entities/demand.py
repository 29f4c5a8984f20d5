from dataclasses import dataclass


@dataclass(frozen=True)
class Demand:
    """
    Executor-equivalent workload that the current cluster cannot satisfy for a label.

    A `None` label stands for untagged, general purpose capacity.
    """

    label: str | None
    excess_workload: int

    def __post_init__(self):
        if self.excess_workload < 0:
            raise ValueError(f"Invalid excess_workload value: {self.excess_workload}")

    def is_unmet(self) -> bool:
        return self.excess_workload > 0
