import datetime

import newrelic.agent

from ....entities import Failure, ProvisioningEvent
from ....entities.errors import deserialize_error_type, serialize_error_type
from ....repositories import ProvisioningEventRepository
from ._base import SQLiteRepository

TABLE_NAME = "provisioning_events"


class SQLiteProvisioningEventRepository(ProvisioningEventRepository, SQLiteRepository):

    def __init__(self, db_path: str):
        SQLiteRepository.__init__(self, db_path)

        self.create_table()

    @newrelic.agent.datastore_trace("sqlite", TABLE_NAME, "create")
    def create_table(self):
        """
        Creates the 'provisioning_events' table if it does not exist.
        """
        with self._open() as db:
            self._ensure_table(db, TABLE_NAME, {
                "id": int,
                "kind": str,
                "source": str,
                "label": str,
                "description": str,
                "executors": int,
                "node_name": str,
                "error_code": str,
                "reason": str,
                "exception": str,
                "traceback": str,
                "occurred_at": str,
            }, indexes=[["source"], ["error_code"]])

    @newrelic.agent.datastore_trace("sqlite", TABLE_NAME, "insert")
    def save_event(self, event: ProvisioningEvent) -> None:
        failure = event.failure
        event_data = {
            "kind": event.kind.value,
            "source": event.source_name,
            "label": event.label,
            "description": event.description,
            "executors": event.executors,
            "node_name": event.node_name,
            "error_code": serialize_error_type(failure.error_code) if failure else None,
            "reason": failure.reason if failure else None,
            "exception": str(failure.exception) if failure and failure.exception is not None else None,
            "traceback": failure.traceback if failure else None,
            "occurred_at": event.occurred_at.isoformat(),
        }

        with self._open() as db:
            table = db[TABLE_NAME].insert(event_data)
            event.id = table.last_pk

    @newrelic.agent.datastore_trace("sqlite", TABLE_NAME, "select")
    def load_recent(self, limit: int = 100) -> list[ProvisioningEvent]:
        with self._open() as db:
            rows = db[TABLE_NAME].rows_where(order_by="id desc", limit=limit)
            return [self.build_event_from_row(row) for row in rows]

    @newrelic.agent.datastore_trace("sqlite", TABLE_NAME, "select")
    def load_failures(self, source_name: str | None = None) -> list[ProvisioningEvent]:
        where = "error_code IS NOT NULL"
        where_args = []
        if source_name is not None:
            where += " AND source = ?"
            where_args.append(source_name)

        with self._open() as db:
            rows = db[TABLE_NAME].rows_where(where, where_args, order_by="id desc")
            return [self.build_event_from_row(row) for row in rows]

    def build_event_from_row(self, row) -> ProvisioningEvent:
        occurred_at = datetime.datetime.fromisoformat(row["occurred_at"]) if row["occurred_at"] else None

        failure = None
        if row["error_code"]:
            failure = Failure(
                source_name=row["source"],
                label=row["label"],
                error_code=deserialize_error_type(row["error_code"]),
                reason=row["reason"],
                exception=row["exception"],
                traceback=row["traceback"],
                description=row["description"],
                occurred_at=occurred_at,
            )

        return ProvisioningEvent(
            kind=ProvisioningEvent.Kind(row["kind"]),
            source_name=row["source"],
            label=row["label"],
            description=row["description"],
            executors=row["executors"],
            node_name=row["node_name"],
            failure=failure,
            occurred_at=occurred_at,
            id=row["id"],
        )
