from typing import Iterable, Sequence

from sqlalchemy import Table, insert
from sqlalchemy.sql.dml import Insert


class BatchInsert:
    """Multi-row INSERT for a fixed set of columns.

    Rows are plain tuples whose length must equal the number of columns. The
    statement is built as a single ``INSERT ... VALUES (...), (...)`` with one
    bound parameter per cell, in the order the rows were added.
    """

    def __init__(self, table: Table, columns: Sequence[str]):
        if not columns:
            raise ValueError("BatchInsert needs at least one column.")
        unknown = [name for name in columns if name not in table.c]
        if unknown:
            raise ValueError(
                "Unknown column(s) for {}: {}".format(table.name, ", ".join(unknown))
            )
        self.table = table
        self.columns = tuple(columns)
        self._rows: list[tuple] = []

    @property
    def arity(self) -> int:
        return len(self.columns)

    def add(self, row: Sequence) -> "BatchInsert":
        if len(row) != self.arity:
            raise ValueError(
                "Expected {} value(s) per row for {}, got {}.".format(
                    self.arity, self.table.name, len(row)
                )
            )
        self._rows.append(tuple(row))
        return self

    def extend(self, rows: Iterable[Sequence]) -> "BatchInsert":
        for row in rows:
            self.add(row)
        return self

    def __len__(self) -> int:
        return len(self._rows)

    def statement(self) -> Insert:
        if not self._rows:
            raise ValueError("BatchInsert has no rows.")
        values = [dict(zip(self.columns, row)) for row in self._rows]
        return insert(self.table).values(values)

    def execute(self, db) -> int:
        """Run the insert on ``db`` (Session or Connection); no-op when empty."""
        if not self._rows:
            return 0
        db.execute(self.statement())
        return len(self._rows)


__all__ = ["BatchInsert"]
