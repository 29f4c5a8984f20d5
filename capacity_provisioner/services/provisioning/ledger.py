from collections import defaultdict

from ...entities import PlannedCapacity

LedgerKey = tuple[str, str | None]


class ProvisioningLedger:
    """
    Executors promised by the planned capacities still in flight, per (source, label).

    Each promise is kept individually so that the sum always matches the unresolved entries,
    and clearing the same promise twice is a no-op.
    Not thread safe, the provisioning loop serializes every access.
    """

    def __init__(self):
        self._promises: dict[LedgerKey, dict[str, int]] = defaultdict(dict)

    def record(self, planned: PlannedCapacity) -> bool:
        key = (planned.source_name, planned.label)
        promises = self._promises[key]
        if planned.id in promises:
            return False

        promises[planned.id] = planned.promised_executors
        return True

    def clear(self, planned: PlannedCapacity) -> bool:
        key = (planned.source_name, planned.label)
        promises = self._promises.get(key)
        if not promises or planned.id not in promises:
            return False

        del promises[planned.id]
        if not promises:
            del self._promises[key]
        return True

    def promised(self, source_name: str, label: str | None) -> int:
        return sum(self._promises.get((source_name, label), {}).values())

    def promised_for_label(self, label: str | None) -> int:
        return sum(
            sum(promises.values())
            for (_, promise_label), promises in self._promises.items()
            if promise_label == label
        )

    def snapshot(self) -> dict[LedgerKey, int]:
        return {
            key: sum(promises.values())
            for key, promises in self._promises.items()
        }

    def __len__(self) -> int:
        return sum(len(promises) for promises in self._promises.values())
