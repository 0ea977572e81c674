"""Tabular store — row-oriented reads and writes over the SQL database.

Consistency contract:
  - One ``TabularStore`` wraps one ``AsyncSession``; everything written
    through it commits or rolls back together.
  - Reads return plain records (``dict``) in insertion order. Every record
    carries ``id`` and ``version``; ``RowRef.of(record)`` captures both.
  - Cell updates are conditional on the version captured at read time. If
    another writer got there first the update matches no row and
    ``StaleRowError`` is raised instead of silently overwriting.
  - Nothing is retried here; callers decide.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, AsyncIterator, Mapping, Optional, Sequence, Union

import sqlalchemy as sa
from sqlalchemy.ext.asyncio import AsyncSession

import hrms.models  # noqa: F401  (registers every table on Base)
from hrms.common.clock import to_reference_zone
from hrms.common.constants import Table
from hrms.common.exceptions import StaleRowError, StoreDisconnectedError
from hrms.database import Base

logger = logging.getLogger(__name__)

Record = dict[str, Any]
TableName = Union[Table, str]


@dataclass(frozen=True)
class RowRef:
    """Address of a row as of a particular version."""

    row_id: int
    version: int

    @classmethod
    def of(cls, record: Mapping[str, Any]) -> RowRef:
        return cls(row_id=record["id"], version=record["version"])


def _table_name(table: TableName) -> str:
    return table.value if isinstance(table, Table) else str(table)


def _model_for(name: str):
    for mapper in Base.registry.mappers:
        if getattr(mapper.class_, "__tablename__", None) == name:
            return mapper.class_
    return None


def _to_storage(values: Mapping[str, Any]) -> Record:
    """Datetimes are written as UTC; naive values are taken to be UTC already."""
    data: Record = {}
    for key, value in values.items():
        if isinstance(value, datetime) and value.tzinfo is not None:
            value = value.astimezone(timezone.utc)
        data[key] = value
    return data


def _normalise(row: Mapping[str, Any]) -> Record:
    record: Record = {}
    for key, value in row.items():
        if isinstance(value, datetime):
            value = to_reference_zone(value)
        record[key] = value
    return record


class TabularStore:
    """Async tabular store bound to a single database session."""

    def __init__(self, session: Optional[AsyncSession]) -> None:
        self._session = session

    @property
    def session(self) -> AsyncSession:
        if self._session is None:
            raise StoreDisconnectedError()
        return self._session

    @property
    def is_connected(self) -> bool:
        return self._session is not None

    # ── Helpers ─────────────────────────────────────────────────────

    @staticmethod
    def _columns(model, names) -> None:
        known = model.__table__.c
        unknown = [n for n in names if n not in known]
        if unknown:
            raise ValueError(
                f"Unknown column(s) for '{model.__tablename__}': {', '.join(unknown)}"
            )

    # ── Reads ───────────────────────────────────────────────────────

    async def read_table(self, table: TableName, **equals: Any) -> list[Record]:
        """Return every record of ``table``, optionally filtered by equality.

        A table that does not exist yields an empty list rather than an error.
        """
        session = self.session
        name = _table_name(table)
        model = _model_for(name)
        if model is None:
            logger.error("Missing table: %s", name)
            return []

        self._columns(model, equals)
        t = model.__table__
        stmt = sa.select(t).order_by(t.c.id)
        for column, value in equals.items():
            stmt = stmt.where(t.c[column] == value)

        result = await session.execute(stmt)
        return [_normalise(row) for row in result.mappings().all()]

    async def find_one(self, table: TableName, **equals: Any) -> Optional[Record]:
        """First record matching every equality, or ``None``."""
        rows = await self.read_table(table, **equals)
        return rows[0] if rows else None

    # ── Writes ──────────────────────────────────────────────────────

    async def append_row(
        self,
        table: TableName,
        values: Union[Sequence[Any], Mapping[str, Any]],
    ) -> Record:
        """Append one row and return it as stored.

        ``values`` is either a mapping of column → value or a sequence in
        the table's ``HEADERS`` order (trailing columns may be omitted).
        """
        session = self.session
        name = _table_name(table)
        model = _model_for(name)
        if model is None:
            raise ValueError(f"Cannot append to unknown table '{name}'")

        if isinstance(values, Mapping):
            data = dict(values)
        else:
            headers = model.HEADERS
            if len(values) > len(headers):
                raise ValueError(
                    f"'{name}' has {len(headers)} columns, got {len(values)} values"
                )
            data = dict(zip(headers, values))
        self._columns(model, data)

        t = model.__table__
        result = await session.execute(sa.insert(t).values(**_to_storage(data)))
        row_id = result.inserted_primary_key[0]
        stored = await session.execute(sa.select(t).where(t.c.id == row_id))
        return _normalise(stored.mappings().one())

    async def update_cells(
        self,
        table: TableName,
        ref: RowRef,
        values: Mapping[str, Any],
    ) -> RowRef:
        """Set several cells of one row; fails if the row moved past ``ref``."""
        session = self.session
        name = _table_name(table)
        model = _model_for(name)
        if model is None:
            raise ValueError(f"Cannot update unknown table '{name}'")
        self._columns(model, values)

        t = model.__table__
        new_version = ref.version + 1
        result = await session.execute(
            sa.update(t)
            .where(t.c.id == ref.row_id, t.c.version == ref.version)
            .values(**_to_storage(values), version=new_version)
        )
        if result.rowcount == 0:
            raise StaleRowError(name, ref.row_id)
        return RowRef(row_id=ref.row_id, version=new_version)

    async def update_cell(
        self,
        table: TableName,
        ref: RowRef,
        column: str,
        value: Any,
    ) -> RowRef:
        return await self.update_cells(table, ref, {column: value})

    # ── Unit of work ────────────────────────────────────────────────

    @asynccontextmanager
    async def savepoint(self) -> AsyncIterator[None]:
        """Run a block inside a SAVEPOINT.

        A failure in the block rolls back only the block and is re-raised;
        rows written before it stay in the unit of work and can still commit.
        """
        async with self.session.begin_nested():
            yield

    async def commit(self) -> None:
        await self.session.commit()

    async def rollback(self) -> None:
        await self.session.rollback()
