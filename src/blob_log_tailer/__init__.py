"""
Blob log tailer
===============

Incremental discovery and reading of web server log files that are continuously appended to inside a remote,
prefix-addressable object store.

Log segments are written under time-bucketed keys (`<application>/yyyy/mm/dd/HH/...`) and grow every 30 seconds or so.
On every poll cycle the tailer:

- Lists only the prefixes that can hold objects modified since the last cycle.
- Reads only the bytes appended since the last read of each object.
- Turns every newly completed line into a structured event and hands it to a sink.

The watermark and per-object byte offsets form a checkpoint that reproduces the exact resume point after a restart.
"""

from ._config import BEGINNING_OF_TIME, BLOB_LOG_TAILER_BASE_FOLDER_PATH
from ._models import Event, HarvestCheckpoint, ObjectRef
from ._exceptions import BlobLogTailerError, MalformedRecordError, SinkDeliveryError, TransientStoreError
from ._object_store import ObjectStore
from ._prefix_planner import plan_prefixes
from ._object_scanner import scan_objects
from ._offset_tracker import OffsetTracker
from ._incremental_fetcher import fetch_new_bytes
from ._line_splitter import split_lines
from ._record_filter import filter_record
from ._w3c_log_line_parser import parse_w3c_log_line
from ._event_sinks import EventSink, JsonLinesEventSink
from ._checkpoint import load_checkpoint, save_checkpoint
from ._harvest_loop import CycleReport, HarvestLoop
from ._s3_object_store import S3ObjectStore

__all__ = [
    "BEGINNING_OF_TIME",
    "BLOB_LOG_TAILER_BASE_FOLDER_PATH",
    "Event",
    "HarvestCheckpoint",
    "ObjectRef",
    "BlobLogTailerError",
    "MalformedRecordError",
    "SinkDeliveryError",
    "TransientStoreError",
    "ObjectStore",
    "plan_prefixes",
    "scan_objects",
    "OffsetTracker",
    "fetch_new_bytes",
    "split_lines",
    "filter_record",
    "parse_w3c_log_line",
    "EventSink",
    "JsonLinesEventSink",
    "load_checkpoint",
    "save_checkpoint",
    "CycleReport",
    "HarvestLoop",
    "S3ObjectStore",
]
