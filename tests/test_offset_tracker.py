import pytest

import blob_log_tailer


def test_offset_tracker_defaults_to_zero():
    offset_tracker = blob_log_tailer.OffsetTracker()

    assert offset_tracker.offset_for(identity="app/a.log") == 0
    assert "app/a.log" not in offset_tracker
    assert len(offset_tracker) == 0


def test_offset_tracker_is_non_decreasing():
    offset_tracker = blob_log_tailer.OffsetTracker()

    previous_offset = 0
    for offset in [0, 10, 10, 250, 4096]:
        offset_tracker.record(identity="app/a.log", offset=offset)
        current_offset = offset_tracker.offset_for(identity="app/a.log")
        assert current_offset >= previous_offset
        previous_offset = current_offset

    assert offset_tracker.offset_for(identity="app/a.log") == 4096


def test_offset_tracker_rejects_decrease():
    offset_tracker = blob_log_tailer.OffsetTracker(initial_offsets={"app/a.log": 100})

    with pytest.raises(ValueError) as error_info:
        offset_tracker.record(identity="app/a.log", offset=99)

    expected_message = (
        "Offset for 'app/a.log' may not decrease or be negative! Current offset is 100, attempted to record 99."
    )
    assert str(error_info.value) == expected_message
    assert offset_tracker.offset_for(identity="app/a.log") == 100


def test_offset_tracker_rejects_negative_initial_offset():
    with pytest.raises(ValueError):
        blob_log_tailer.OffsetTracker(initial_offsets={"app/a.log": -1})


def test_offset_tracker_as_dict_is_a_copy():
    offset_tracker = blob_log_tailer.OffsetTracker(initial_offsets={"app/a.log": 5, "app/b.log": 7})

    offsets = offset_tracker.as_dict()
    offsets["app/a.log"] = 0

    assert offset_tracker.as_dict() == {"app/a.log": 5, "app/b.log": 7}
