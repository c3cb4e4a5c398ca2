from collections.abc import Iterable

from flow_api.api.schemas import FlowPayload
from flow_api.domain.models import FlowRecord
from flow_api.domain.store import FlowStore


def to_record(payload: FlowPayload) -> FlowRecord:
    return FlowRecord(
        network_id=payload.vpc_id,
        source_app=payload.src_app,
        dest_app=payload.dest_app,
        hour=payload.hour,
        bytes_transmitted=payload.bytes_tx,
        bytes_received=payload.bytes_rx,
    )


def to_payload(record: FlowRecord) -> FlowPayload:
    return FlowPayload(
        vpc_id=record.network_id,
        src_app=record.source_app,
        dest_app=record.dest_app,
        hour=record.hour,
        bytes_tx=record.bytes_transmitted,
        bytes_rx=record.bytes_received,
    )


async def merge_flows(store: FlowStore, payloads: Iterable[FlowPayload]) -> int:
    records = [to_record(payload) for payload in payloads]
    await store.merge(records)
    return len(records)


async def fetch_hour(store: FlowStore, hour: int) -> list[FlowPayload]:
    records = await store.query_by_hour(hour)
    return [to_payload(record) for record in records]


async def fetch_all(store: FlowStore) -> list[FlowPayload]:
    records = await store.query_all()
    return [to_payload(record) for record in records]
