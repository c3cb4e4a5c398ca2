from flow_api.domain.models import (
    U64_MAX,
    FlowIdentity,
    FlowMeasurement,
    FlowRecord,
    add_u64,
    new_flow,
)


def test_new_flow_keeps_every_argument() -> None:
    flow = new_flow("vpc-0", "foo", "bar", 1, 100, 300)
    assert flow.network_id == "vpc-0"
    assert flow.source_app == "foo"
    assert flow.dest_app == "bar"
    assert flow.hour == 1
    assert flow.bytes_transmitted == 100
    assert flow.bytes_received == 300


def test_new_flow_accepts_edge_values() -> None:
    flow = new_flow("", "", "", 0, 0, U64_MAX)
    assert flow.identity() == FlowIdentity("", "", "", 0)
    assert flow.measurement() == FlowMeasurement(0, U64_MAX)


def test_identity_ignores_counters() -> None:
    a = new_flow("vpc-0", "foo", "bar", 1, 100, 500)
    b = new_flow("vpc-0", "foo", "bar", 1, 7, 9)
    assert a.identity() == b.identity()
    assert hash(a.identity()) == hash(b.identity())


def test_identity_is_case_sensitive() -> None:
    a = new_flow("vpc-0", "foo", "bar", 1, 1, 1)
    b = new_flow("VPC-0", "foo", "bar", 1, 1, 1)
    c = new_flow("vpc-0", "foo ", "bar", 1, 1, 1)
    assert a.identity() != b.identity()
    assert a.identity() != c.identity()


def test_from_parts_rebuilds_record() -> None:
    flow = new_flow("vpc-1", "baz", "qux", 2, 10, 20)
    assert FlowRecord.from_parts(flow.identity(), flow.measurement()) == flow


def test_add_u64_wraps() -> None:
    assert add_u64(1, 2) == 3
    assert add_u64(U64_MAX, 1) == 0
    assert add_u64(U64_MAX, U64_MAX) == U64_MAX - 1
