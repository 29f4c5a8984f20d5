from contextlib import closing
from typing import Any, Iterable

import sqlite_utils

from ....utils.logging_utils import get_logger

logger = get_logger()


class SQLiteRepository:
    """
    Base of the repositories stored in SQLite with sqlite-utils.

    Each operation opens its own connection: the repositories are shared by the
    polling threads and the HTTP API.
    """

    def __init__(self, db_path: str, wal: bool = True):
        """
        db_path: path to the SQLite database file.
        Example: 'capacity-provisioner.sqlite'
        wal: readers do not block the writer in WAL mode.
        """

        self.db_path = db_path
        logger.debug(f"Initializing {self.__class__.__name__} with db_path: %s", self.db_path)

        if wal:
            with self._open() as db:
                db.enable_wal()

    def _open(self) -> "closing[sqlite_utils.Database]":
        return closing(sqlite_utils.Database(self.db_path))

    def _ensure_table(self, db: sqlite_utils.Database, table_name: str, columns: dict[str, Any], pk: str = "id", indexes: Iterable[list[str]] = ()):
        logger.debug("Creating table '%s' in %s", table_name, self.db_path)

        table = db[table_name]
        table.create(columns, pk=pk, if_not_exists=True)

        for column_name, column_type in columns.items():
            if column_name not in table.columns_dict:
                table.add_column(column_name, column_type)

        for index_columns in indexes:
            table.create_index(index_columns, if_not_exists=True)

        return table
