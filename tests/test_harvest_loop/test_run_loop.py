import datetime

import blob_log_tailer
from blob_log_tailer.testing import CollectingEventSink, InMemoryObjectStore

NOW = datetime.datetime(2024, 1, 1, 0, 10, 0, tzinfo=datetime.timezone.utc)
LINE = b"2024-01-01 00:00:01 site1 GET /first - 80 - 1.2.3.4 - - - host 200 0 0 100 50 10\n"


def test_run_stops_after_max_cycles():
    saved_checkpoints = list()
    harvest_loop = blob_log_tailer.HarvestLoop(
        object_store=InMemoryObjectStore(),
        event_sink=CollectingEventSink(),
        base_prefix="app",
        poll_interval_in_seconds=0.0,
        checkpoint_saver=saved_checkpoints.append,
        clock=lambda: NOW,
    )

    harvest_loop.run(max_cycles=3)

    assert len(saved_checkpoints) == 3


def test_run_after_cancel_runs_no_cycle():
    object_store = InMemoryObjectStore()
    harvest_loop = blob_log_tailer.HarvestLoop(
        object_store=object_store, event_sink=CollectingEventSink(), base_prefix="app", clock=lambda: NOW
    )

    harvest_loop.cancel()
    harvest_loop.run()

    assert harvest_loop.is_cancelled is True
    assert object_store.listing_calls == []


def test_cancel_takes_effect_between_cycles():
    """A cancellation requested during a cycle lets that cycle finish and prevents the next one."""
    object_store = InMemoryObjectStore()
    object_store.put_object(
        identity="app/2024/01/01/00/a.log",
        content=LINE,
        modified=datetime.datetime(2024, 1, 1, 0, 0, 1, tzinfo=datetime.timezone.utc),
    )
    event_sink = CollectingEventSink()

    saved_checkpoints = list()

    def cancel_on_save(checkpoint: blob_log_tailer.HarvestCheckpoint) -> None:
        saved_checkpoints.append(checkpoint)
        harvest_loop.cancel()

    harvest_loop = blob_log_tailer.HarvestLoop(
        object_store=object_store,
        event_sink=event_sink,
        base_prefix="app",
        poll_interval_in_seconds=3600.0,
        checkpoint_saver=cancel_on_save,
        clock=lambda: NOW,
    )
    harvest_loop.run()

    assert len(saved_checkpoints) == 1
    assert len(event_sink.events) == 1
    assert saved_checkpoints[0].per_object_offsets == {"app/2024/01/01/00/a.log": len(LINE)}


def test_run_continues_when_saving_the_checkpoint_fails():
    object_store = InMemoryObjectStore()
    save_attempts = list()

    def failing_saver(checkpoint: blob_log_tailer.HarvestCheckpoint) -> None:
        save_attempts.append(checkpoint)
        raise OSError("No space left on device")

    harvest_loop = blob_log_tailer.HarvestLoop(
        object_store=object_store,
        event_sink=CollectingEventSink(),
        base_prefix="app",
        poll_interval_in_seconds=0.0,
        checkpoint_saver=failing_saver,
        clock=lambda: NOW,
    )

    harvest_loop.run(max_cycles=2)

    assert len(save_attempts) == 2
    assert len(object_store.listing_calls) == 2

    report = harvest_loop.run_cycle()

    assert len(report.warnings) == 1
    assert "Saving the checkpoint failed" in report.warnings[0]
    assert "No space left on device" in report.warnings[0]
