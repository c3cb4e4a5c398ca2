from dataclasses import dataclass

U64_MAX = 2**64 - 1
U64_MODULUS = 2**64


def add_u64(left: int, right: int) -> int:
    return (left + right) % U64_MODULUS


@dataclass(frozen=True)
class FlowIdentity:
    """Fields that decide whether two flows aggregate together.

    Compared structurally; no case-folding or trimming is applied.
    """

    network_id: str
    source_app: str
    dest_app: str
    hour: int


@dataclass(frozen=True)
class FlowMeasurement:
    bytes_transmitted: int = 0
    bytes_received: int = 0


@dataclass(frozen=True)
class FlowRecord:
    """One observed flow, or the running aggregate for one identity.

    Observations and aggregates share a shape so the store can hand its
    aggregates back as plain records.
    """

    network_id: str
    source_app: str
    dest_app: str
    hour: int
    bytes_transmitted: int = 0
    bytes_received: int = 0

    def identity(self) -> FlowIdentity:
        return FlowIdentity(
            network_id=self.network_id,
            source_app=self.source_app,
            dest_app=self.dest_app,
            hour=self.hour,
        )

    def measurement(self) -> FlowMeasurement:
        return FlowMeasurement(
            bytes_transmitted=self.bytes_transmitted,
            bytes_received=self.bytes_received,
        )

    @classmethod
    def from_parts(
        cls, identity: FlowIdentity, measurement: FlowMeasurement
    ) -> "FlowRecord":
        return cls(
            network_id=identity.network_id,
            source_app=identity.source_app,
            dest_app=identity.dest_app,
            hour=identity.hour,
            bytes_transmitted=measurement.bytes_transmitted,
            bytes_received=measurement.bytes_received,
        )


def new_flow(
    network_id: str,
    source_app: str,
    dest_app: str,
    hour: int,
    bytes_tx: int,
    bytes_rx: int,
) -> FlowRecord:
    return FlowRecord(
        network_id=network_id,
        source_app=source_app,
        dest_app=dest_app,
        hour=hour,
        bytes_transmitted=bytes_tx,
        bytes_received=bytes_rx,
    )
