from __future__ import annotations

from pathlib import Path

from token_ledger.state.events import (EventSink, InMemoryEventSink,
                                       JsonlEventSink, NullEventSink)
from token_ledger.types.events import (ApprovalEvent, TransferEvent,
                                       event_from_dict)

A = b"a"
B = b"b"
C = b"c"

EVENTS = [
    TransferEvent(A, B, 300),
    ApprovalEvent(B, C, 100),
    TransferEvent(B, C, 2**127),
]


def test_sinks_satisfy_protocol(tmp_path: Path) -> None:
    jsonl = JsonlEventSink(tmp_path / "events.jsonl")
    try:
        for sink in (InMemoryEventSink(), jsonl, NullEventSink()):
            assert isinstance(sink, EventSink)
    finally:
        jsonl.close()


def test_memory_sink_filters() -> None:
    sink = InMemoryEventSink()
    recs = sink.extend(EVENTS)
    assert [r.seq for r in recs] == [0, 1, 2]
    assert [r.seq for r in sink.records(name="Transfer")] == [0, 2]
    assert [r.seq for r in sink.records(account=C)] == [1, 2]
    assert [r.seq for r in sink.records(account=A, name="Approval")] == []
    assert [r.seq for r in sink.records(limit=2)] == [0, 1]


def test_event_dict_form() -> None:
    d = EVENTS[1].to_dict()
    assert d == {"event": "Approval", "owner": "0x62", "spender": "0x63", "amount": "100"}
    for ev in EVENTS:
        assert event_from_dict(ev.to_dict()) == ev


def test_jsonl_sink_persists_and_resumes(tmp_path: Path) -> None:
    path = tmp_path / "log" / "events.jsonl"
    sink = JsonlEventSink(path)
    sink.extend(EVENTS[:2])
    sink.flush()
    sink.close()

    reopened = JsonlEventSink(path)
    rec = reopened.append(EVENTS[2])
    assert rec.seq == 2
    got = list(reopened.records())
    reopened.close()
    assert [r.event for r in got] == EVENTS
    assert got[2].event.amount == 2**127
    assert len(path.read_text().splitlines()) == 3


def test_jsonl_sink_skips_malformed_lines(tmp_path: Path) -> None:
    path = tmp_path / "events.jsonl"
    sink = JsonlEventSink(path)
    sink.append(EVENTS[0])
    sink.close()
    with open(path, "a", encoding="utf-8") as fh:
        fh.write("not json\n")

    sink = JsonlEventSink(path)
    rec = sink.append(EVENTS[1])
    assert rec.seq == 1
    assert [r.seq for r in sink.records()] == [0, 1]
    assert [r.seq for r in sink.records(name="Approval")] == [1]
    sink.close()


def test_null_sink_drops() -> None:
    sink = NullEventSink()
    recs = sink.extend(EVENTS)
    assert [r.seq for r in recs] == [0, 1, 2]
    assert list(sink.records()) == []


def test_jsonl_sink_skips_lines_with_bad_fields(tmp_path: Path) -> None:
    path = tmp_path / "events.jsonl"
    path.write_text(
        '{"seq":0,"event":"Transfer","from":"0x","to":"0x62","amount":"1"}\n'
        '{"seq":null,"event":"Transfer","from":"0x61","to":"0x62","amount":"1"}\n'
        '{"seq":1,"event":"Approval","owner":"0x61","spender":"0x62","amount":"many"}\n'
        "[1, 2]\n"
        '{"seq":2,"event":"Transfer","from":"0x61","to":"0x62","amount":"5"}\n',
        encoding="utf-8",
    )
    sink = JsonlEventSink(path)
    assert sink.append(EVENTS[1]).seq == 3
    assert [(r.seq, r.event) for r in sink.records()] == [
        (2, TransferEvent(A, B, 5)),
        (3, EVENTS[1]),
    ]
    sink.close()
