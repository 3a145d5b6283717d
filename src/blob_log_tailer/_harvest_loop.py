"""
The timer-driven cycle that turns newly appended bytes of remote log segments into events.

Each cycle:

1) Plans the prefixes to list from the current watermark.
2) Lists and orders every object modified after the watermark.
3) For each object, oldest first, fetches only the bytes past its recorded offset, splits them into lines, filters and
   parses each line, and pushes the resulting events to the sink in file order.
4) Records the new offset after each delivered chunk and advances the watermark past every fully processed object.

The offset tracker and the watermark are owned by the loop alone; cycles never overlap, so no locking is needed.
"""

import dataclasses
import datetime
import itertools
import logging
import threading
import time
import uuid
from collections.abc import Callable

import tqdm

from ._config import DEFAULT_MAXIMUM_BUFFER_SIZE_IN_BYTES, DEFAULT_POLL_INTERVAL_IN_SECONDS
from ._error_collection import _collect_error
from ._event_sinks import EventSink
from ._exceptions import MalformedRecordError, SinkDeliveryError, TransientStoreError
from ._incremental_fetcher import fetch_new_bytes
from ._line_splitter import split_lines
from ._models import Event, HarvestCheckpoint, ObjectRef
from ._object_scanner import scan_objects
from ._object_store import ObjectStore
from ._offset_tracker import OffsetTracker
from ._prefix_planner import _as_utc, plan_prefixes
from ._record_filter import filter_record
from ._w3c_log_line_parser import parse_w3c_log_line

logger = logging.getLogger(__name__)


@dataclasses.dataclass
class CycleReport:
    """Summary of a single harvest cycle, including every non-fatal warning raised along the way."""

    prefixes: list[str]
    watermark: datetime.datetime
    number_of_candidates: int = 0
    number_of_events: int = 0
    processed_identities: list[str] = dataclasses.field(default_factory=list)
    skipped_identities: list[str] = dataclasses.field(default_factory=list)
    warnings: list[str] = dataclasses.field(default_factory=list)
    listing_failed: bool = False


class HarvestLoop:
    def __init__(
        self,
        *,
        object_store: ObjectStore,
        event_sink: EventSink,
        base_prefix: str,
        poll_interval_in_seconds: float = DEFAULT_POLL_INTERVAL_IN_SECONDS,
        checkpoint: HarvestCheckpoint | None = None,
        skip_until: datetime.datetime | None = None,
        checkpoint_saver: Callable[[HarvestCheckpoint], None] | None = None,
        line_parser: Callable[..., Event] = parse_w3c_log_line,
        maximum_buffer_size_in_bytes: int = DEFAULT_MAXIMUM_BUFFER_SIZE_IN_BYTES,
        clock: Callable[[], datetime.datetime] | None = None,
        candidate_tqdm_kwargs: dict | None = None,
    ):
        """
        Incrementally discover and read log segments that are continuously appended to in an object store.

        Parameters
        ----------
        object_store : ObjectStore
            The store holding the log segments.
        event_sink : EventSink
            Receives every event, in file order per object.
        base_prefix : str
            The prefix under which the time-bucketed log segments reside.
        poll_interval_in_seconds : float, default: 30
            The period between the starts of two consecutive cycles.
            A cycle that runs longer than this defers the next one rather than overlapping with it.
        checkpoint : HarvestCheckpoint, optional
            The state to resume from; both the watermark and the per-object offsets are restored.
        skip_until : datetime.datetime, optional
            Objects modified at or before this time are ignored.
            When combined with a checkpoint, the later of the two watermarks is used.
        checkpoint_saver : callable, optional
            Called with the current checkpoint at the end of every cycle.
        line_parser : callable, default: parse_w3c_log_line
            Maps a filtered line onto an Event; called as `line_parser(line=..., source=...)` and expected to raise
            `MalformedRecordError` for lines it cannot map.
        maximum_buffer_size_in_bytes : int, default: 4 MB
            The maximum size of a single range read.
        clock : callable, optional
            Returns the current time; defaults to the current UTC time.
        candidate_tqdm_kwargs : dict, optional
            Keyword arguments passed to the tqdm progress bar over the objects of a cycle (disabled by default).
        """
        self.object_store = object_store
        self.event_sink = event_sink
        self.base_prefix = base_prefix
        self.poll_interval_in_seconds = poll_interval_in_seconds
        self.checkpoint_saver = checkpoint_saver
        self.line_parser = line_parser
        self.maximum_buffer_size_in_bytes = maximum_buffer_size_in_bytes
        self.clock = clock or (lambda: datetime.datetime.now(tz=datetime.timezone.utc))

        default_tqdm_kwargs = {"desc": "Harvesting new log bytes...", "leave": False, "disable": True}
        self.resolved_tqdm_kwargs = {**default_tqdm_kwargs}
        self.resolved_tqdm_kwargs.update(candidate_tqdm_kwargs or dict())

        checkpoint = checkpoint or HarvestCheckpoint()
        self.watermark = checkpoint.watermark
        if skip_until is not None:
            self.watermark = max(self.watermark, _as_utc(skip_until))
        self.offset_tracker = OffsetTracker(initial_offsets=checkpoint.per_object_offsets)

        self._fragment_by_identity: dict[str, bytes] = dict()
        self._cancelled = threading.Event()
        self.task_id = str(uuid.uuid4())[:5]

    @property
    def checkpoint(self) -> HarvestCheckpoint:
        """
        The exact resume point of this loop.

        Pending fragments are not persisted; instead the offset of an object with a pending fragment is rewound to the
        start of that incomplete line, which is then read again after a restart.
        """
        per_object_offsets = {
            identity: offset - len(self._fragment_by_identity.get(identity, b""))
            for identity, offset in self.offset_tracker.as_dict().items()
        }
        return HarvestCheckpoint(watermark=self.watermark, per_object_offsets=per_object_offsets)

    @property
    def is_cancelled(self) -> bool:
        return self._cancelled.is_set()

    def cancel(self) -> None:
        """Stop the loop; takes effect between cycles, never in the middle of reading an object."""
        self._cancelled.set()

    def run(self, *, max_cycles: int | None = None) -> None:
        """Run cycles back to back on the poll interval, starting immediately, until cancelled."""
        number_of_cycles = 0
        while not self._cancelled.is_set():
            cycle_start = time.monotonic()
            self.run_cycle()
            number_of_cycles += 1

            if max_cycles is not None and number_of_cycles >= max_cycles:
                break

            elapsed_in_seconds = time.monotonic() - cycle_start
            self._cancelled.wait(timeout=max(0.0, self.poll_interval_in_seconds - elapsed_in_seconds))

    def run_cycle(self, *, now: datetime.datetime | None = None) -> CycleReport:
        now = now or self.clock()

        prefixes = plan_prefixes(base_prefix=self.base_prefix, watermark=self.watermark, now=now)
        report = CycleReport(prefixes=prefixes, watermark=self.watermark)

        try:
            candidates = scan_objects(object_store=self.object_store, prefixes=prefixes, watermark=self.watermark)
        except TransientStoreError as exception:
            message = f"Listing of prefixes {prefixes} failed; retrying on the next cycle. {exception}"
            self._warn(message=message, error_type="cycle", report=report)
            report.listing_failed = True

            return report
        report.number_of_candidates = len(candidates)

        # Once an object fails, the watermark may not move past it or it would never be listed again
        # Objects sharing a modification time are settled together for the same reason
        is_watermark_frozen = False
        with tqdm.tqdm(total=len(candidates), **self.resolved_tqdm_kwargs) as progress_bar:
            for modified, object_refs in itertools.groupby(candidates, key=lambda object_ref: object_ref.modified):
                for object_ref in object_refs:
                    progress_bar.update(1)
                    try:
                        report.number_of_events += self._process_object(object_ref=object_ref, report=report)
                    except Exception as exception:
                        message = (
                            f"Skipping '{object_ref.identity}' until the next cycle.\n\n"
                            f"{type(exception).__name__}: {exception}"
                        )
                        if not isinstance(exception, (TransientStoreError, SinkDeliveryError)):
                            logger.exception("Unexpected error while processing '%s'.", object_ref.identity)
                        self._warn(message=message, error_type="object", report=report, identity=object_ref.identity)
                        report.skipped_identities.append(object_ref.identity)
                        is_watermark_frozen = True

                        continue

                    report.processed_identities.append(object_ref.identity)

                if not is_watermark_frozen:
                    self.watermark = max(self.watermark, modified)

        report.watermark = self.watermark
        logger.info(
            "Harvested %d events from %d of %d objects; watermark is now %s.",
            report.number_of_events,
            len(report.processed_identities),
            report.number_of_candidates,
            self.watermark.isoformat(),
        )

        if self.checkpoint_saver is not None:
            try:
                self.checkpoint_saver(self.checkpoint)
            except Exception as exception:
                message = (
                    "Saving the checkpoint failed; retrying after the next cycle.\n\n"
                    f"{type(exception).__name__}: {exception}"
                )
                self._warn(message=message, error_type="cycle", report=report)

        return report

    def _process_object(self, *, object_ref: ObjectRef, report: CycleReport) -> int:
        identity = object_ref.identity

        number_of_events = 0
        chunk_start = self.offset_tracker.offset_for(identity=identity)
        for intermediate_bytes in fetch_new_bytes(
            object_store=self.object_store,
            object_ref=object_ref,
            from_offset=chunk_start,
            maximum_buffer_size_in_bytes=self.maximum_buffer_size_in_bytes,
        ):
            previous_fragment = self._fragment_by_identity.get(identity, b"")
            lines, fragment = split_lines(previous_fragment=previous_fragment, new_bytes=intermediate_bytes)

            # Absolute position just past the last line that was handed to the sink (or dropped)
            consumed_through = chunk_start - len(previous_fragment)
            for raw_line in lines:
                try:
                    event = self._parse_line(raw_line=raw_line, identity=identity, report=report)
                    if event is not None:
                        self._push(event=event)
                        number_of_events += 1
                except Exception:
                    self._commit_delivered_lines(identity=identity, consumed_through=consumed_through)
                    raise
                consumed_through += len(raw_line)

            chunk_start += len(intermediate_bytes)
            self.offset_tracker.record(identity=identity, offset=chunk_start)
            self._fragment_by_identity[identity] = fragment

        # Objects without new bytes (including empty ones) are still tracked from here on
        self.offset_tracker.record(identity=identity, offset=chunk_start)

        return number_of_events

    def _commit_delivered_lines(self, *, identity: str, consumed_through: int) -> None:
        """Keep the lines delivered before a sink failure so that only undelivered lines are read again."""
        if consumed_through <= self.offset_tracker.offset_for(identity=identity):
            return None

        self.offset_tracker.record(identity=identity, offset=consumed_through)
        self._fragment_by_identity[identity] = b""

        return None

    def _parse_line(self, *, raw_line: bytes, identity: str, report: CycleReport) -> Event | None:
        line = filter_record(raw_line=raw_line)
        if line is None:
            return None

        try:
            return self.line_parser(line=line, source=identity)
        except MalformedRecordError as exception:
            message = f"Dropped a malformed line from '{identity}'. {exception}"
            self._warn(message=message, error_type="line", report=report, identity=identity)

            return None

    def _push(self, *, event: Event) -> None:
        try:
            self.event_sink.push(event)
        except SinkDeliveryError:
            raise
        except Exception as exception:
            raise SinkDeliveryError(f"{type(exception).__name__}: {exception}") from exception

    def _warn(self, *, message: str, error_type: str, report: CycleReport, identity: str | None = None) -> None:
        logger.warning(message)
        report.warnings.append(message)
        _collect_error(
            message=message,
            error_type=error_type,
            task_id=self.task_id,
            identity=identity,
            watermark=self.watermark,
        )
