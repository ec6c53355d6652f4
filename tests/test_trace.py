"""Tests for the JSONL trace store."""

from mrmm.trace import EventType, JsonlTraceStore, load_events, new_event


def test_append_and_iterate(tmp_path):
    path = tmp_path / "nested" / "events.jsonl"

    with JsonlTraceStore(path) as store:
        store.append(new_event(EventType.BATCH_START, {"command": "close"}))
        store.append(new_event(EventType.BATCH_END, {"total": 0}))
        events = list(store.iter_events())

    assert [e.type for e in events] == ["batch_start", "batch_end"]
    assert events[0].payload == {"command": "close"}


def test_appends_across_runs(tmp_path):
    path = tmp_path / "events.jsonl"
    for _ in range(2):
        with JsonlTraceStore(path) as store:
            store.append(new_event(EventType.BATCH_START, {}))

    assert len(load_events(path)) == 2


def test_malformed_lines_are_skipped(tmp_path):
    path = tmp_path / "events.jsonl"
    with JsonlTraceStore(path) as store:
        store.append(new_event(EventType.BATCH_END, {"total": 1}))
    with open(path, "a", encoding="utf-8") as f:
        f.write("not json\n\n")
        f.write('{"type": "unknown", "ts": "x", "payload": {}}\n')

    events = load_events(path)

    assert len(events) == 1
    assert events[0].payload == {"total": 1}


def test_missing_file_has_no_events(tmp_path):
    assert load_events(tmp_path / "absent.jsonl") == []
