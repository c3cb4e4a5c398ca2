import asyncio
from collections.abc import Iterable
from decimal import Decimal
from typing import Any

import asyncpg

from flow_api.domain.errors import DatastoreError
from flow_api.domain.models import (
    U64_MODULUS,
    FlowIdentity,
    FlowMeasurement,
    FlowRecord,
    add_u64,
)

_DRIVER_ERRORS = (
    asyncpg.PostgresError,
    asyncpg.InterfaceError,
    OSError,
    asyncio.TimeoutError,
)

_UPSERT = f"""
    INSERT INTO flows (vpc_id, src_app, dest_app, hour, bytes_tx, bytes_rx)
    VALUES ($1, $2, $3, $4, $5, $6)
    ON CONFLICT (vpc_id, src_app, dest_app, hour) DO UPDATE SET
        bytes_tx = (flows.bytes_tx + EXCLUDED.bytes_tx) % {U64_MODULUS},
        bytes_rx = (flows.bytes_rx + EXCLUDED.bytes_rx) % {U64_MODULUS}
"""

_SELECT_ALL = """
    SELECT vpc_id, src_app, dest_app, hour, bytes_tx, bytes_rx
    FROM flows
"""

_SELECT_HOUR = """
    SELECT vpc_id, src_app, dest_app, hour, bytes_tx, bytes_rx
    FROM flows
    WHERE hour = $1
"""


def _fold_rows(records: Iterable[FlowRecord]) -> list[tuple[Any, ...]]:
    totals: dict[FlowIdentity, FlowMeasurement] = {}
    for record in records:
        key = record.identity()
        current = totals.get(key) or FlowMeasurement()
        totals[key] = FlowMeasurement(
            bytes_transmitted=add_u64(
                current.bytes_transmitted, record.bytes_transmitted
            ),
            bytes_received=add_u64(current.bytes_received, record.bytes_received),
        )
    # Upserts lock rows in key order so overlapping batches cannot deadlock.
    ordered = sorted(
        totals.items(),
        key=lambda item: (
            item[0].network_id,
            item[0].source_app,
            item[0].dest_app,
            item[0].hour,
        ),
    )
    return [
        (
            key.network_id,
            key.source_app,
            key.dest_app,
            Decimal(key.hour),
            Decimal(value.bytes_transmitted),
            Decimal(value.bytes_received),
        )
        for key, value in ordered
    ]


def _from_row(row: Any) -> FlowRecord:
    return FlowRecord(
        network_id=row["vpc_id"],
        source_app=row["src_app"],
        dest_app=row["dest_app"],
        hour=int(row["hour"]),
        bytes_transmitted=int(row["bytes_tx"]),
        bytes_received=int(row["bytes_rx"]),
    )


class PostgresFlowStore:
    """Durable FlowStore backed by the ``flows`` table.

    Each merge runs in one transaction, so a failed batch rolls back and
    row locks serialize concurrent merges to the same identity.
    """

    def __init__(self, pool: asyncpg.Pool) -> None:
        self._pool = pool

    async def merge(self, records: Iterable[FlowRecord]) -> None:
        rows = _fold_rows(records)
        if not rows:
            return
        try:
            async with self._pool.acquire() as conn:
                async with conn.transaction():
                    await conn.executemany(_UPSERT, rows)
        except _DRIVER_ERRORS as exc:
            raise DatastoreError("failed to merge flows") from exc

    async def query_all(self) -> list[FlowRecord]:
        try:
            async with self._pool.acquire() as conn:
                rows = await conn.fetch(_SELECT_ALL)
        except _DRIVER_ERRORS as exc:
            raise DatastoreError("failed to read flows") from exc
        return [_from_row(row) for row in rows]

    async def query_by_hour(self, hour: int) -> list[FlowRecord]:
        try:
            async with self._pool.acquire() as conn:
                rows = await conn.fetch(_SELECT_HOUR, Decimal(hour))
        except _DRIVER_ERRORS as exc:
            raise DatastoreError(f"failed to read flows for hour {hour}") from exc
        return [_from_row(row) for row in rows]
