import threading
from collections.abc import Iterable
from typing import Protocol

from flow_api.domain.models import FlowIdentity, FlowMeasurement, FlowRecord, add_u64


class FlowStore(Protocol):
    """Aggregation store contract shared by every backend.

    merge applies a whole batch or nothing. Queries return snapshots and
    never expose a partially merged aggregate. Backends that can fail raise
    DatastoreError.
    """

    async def merge(self, records: Iterable[FlowRecord]) -> None: ...

    async def query_all(self) -> list[FlowRecord]: ...

    async def query_by_hour(self, hour: int) -> list[FlowRecord]: ...


class MemoryFlowStore:
    """In-process store keyed by flow identity.

    A single threading.Lock guards the mapping. It is never held across an
    await, so callers on different threads or event loops are serialized too.
    """

    def __init__(self) -> None:
        self._data: dict[FlowIdentity, FlowMeasurement] = {}
        self._lock = threading.Lock()

    async def merge(self, records: Iterable[FlowRecord]) -> None:
        with self._lock:
            # Stage the batch first so a failure mid-way leaves _data untouched.
            staged: dict[FlowIdentity, FlowMeasurement] = {}
            for record in records:
                key = record.identity()
                current = staged.get(key) or self._data.get(key) or FlowMeasurement()
                staged[key] = FlowMeasurement(
                    bytes_transmitted=add_u64(
                        current.bytes_transmitted, record.bytes_transmitted
                    ),
                    bytes_received=add_u64(
                        current.bytes_received, record.bytes_received
                    ),
                )
            self._data.update(staged)

    async def query_all(self) -> list[FlowRecord]:
        with self._lock:
            items = list(self._data.items())
        return [FlowRecord.from_parts(key, value) for key, value in items]

    async def query_by_hour(self, hour: int) -> list[FlowRecord]:
        with self._lock:
            items = [(key, value) for key, value in self._data.items() if key.hour == hour]
        return [FlowRecord.from_parts(key, value) for key, value in items]

    def __len__(self) -> int:
        with self._lock:
            return len(self._data)
