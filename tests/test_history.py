"""Tests for undo/redo history and the recording log."""

from poseforge.engine.history import HistoryStore
from poseforge.models import HistorySnapshot, LogEntry, Pose, Proportions


def _snap(waist: float) -> HistorySnapshot:
    return HistorySnapshot(pose=Pose(waist=waist), proportions=Proportions())


def test_undo_redo_are_complementary():
    store = HistoryStore()
    store.save(_snap(0.0))
    current = _snap(10.0)

    previous = store.undo(current)
    assert previous is not None
    assert previous.pose.waist == 0.0
    assert store.can_redo

    following = store.redo(previous)
    assert following == current
    assert store.can_undo
    assert not store.can_redo


def test_undo_on_empty_stack():
    store = HistoryStore()
    assert store.undo(_snap(1.0)) is None
    assert store.redo(_snap(1.0)) is None


def test_new_save_clears_redo():
    store = HistoryStore()
    store.save(_snap(0.0))
    store.undo(_snap(5.0))
    assert store.redo_depth == 1
    store.save(_snap(7.0))
    assert store.redo_depth == 0


def test_undo_limit_drops_oldest():
    store = HistoryStore(limit=3)
    for i in range(5):
        store.save(_snap(float(i)))
    assert store.undo_depth == 3
    restored = [store.undo(_snap(99.0)) for _ in range(3)]
    assert [s.pose.waist for s in restored if s is not None] == [4.0, 3.0, 2.0]
    assert store.undo(_snap(99.0)) is None


def test_log_record_and_lookup():
    store = HistoryStore()
    entry = store.record(LogEntry(label="START_DRAG_l_knee", pose=Pose()))
    store.record(LogEntry(label="PIN ADDED: l_foot"))
    assert store.entry(0) is entry
    assert store.entry(2) is None
    assert store.entry(-1) is None
    assert len(store.log) == 2


def test_recent_respects_display_limit():
    store = HistoryStore(display_limit=3)
    for i in range(10):
        store.record(LogEntry(label=f"e{i}"))
    assert [e.label for e in store.recent()] == ["e7", "e8", "e9"]
    assert [e.label for e in store.recent(1)] == ["e9"]
    assert store.recent(0) == []


def test_delete_and_clear_log():
    store = HistoryStore()
    store.record(LogEntry(label="a"))
    store.record(LogEntry(label="b"))
    removed = store.delete_entry(0)
    assert removed is not None
    assert removed.label == "a"
    assert store.delete_entry(5) is None
    store.clear_log()
    assert store.log == []


def test_export_records_omits_missing_pose():
    store = HistoryStore()
    store.record(LogEntry(label="UNDO"))
    store.record(LogEntry(label="END_DRAG_neck", pose=Pose(neck=4.0), proportions=Proportions()))
    records = store.export_records()
    assert set(records[0]) == {"timestamp", "label"}
    assert records[1]["pose"]["neck"] == 4.0
    assert records[1]["proportions"]["head"] == {"w": 1.0, "h": 1.0}
