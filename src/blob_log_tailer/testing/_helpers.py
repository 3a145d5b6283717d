"""Collection of in-memory collaborators for testing the harvest loop without a remote object store."""

import collections
import datetime

from .._exceptions import SinkDeliveryError, TransientStoreError
from .._models import Event, ObjectRef


class InMemoryObjectStore:
    """
    A dictionary-backed object store that counts every listing and range read.

    Failures can be injected per prefix (for listings) or per identity (for reads) to exercise the transient error
    handling of the harvest loop.
    """

    def __init__(self):
        self.content_by_identity: dict[str, bytes] = dict()
        self.modified_by_identity: dict[str, datetime.datetime | None] = dict()

        self.failing_prefixes: set[str] = set()
        self.failing_identities: set[str] = set()

        self.listing_calls: list[str] = list()
        self.read_calls: list[tuple[str, int, int]] = list()

    def put_object(self, *, identity: str, content: bytes, modified: datetime.datetime | None) -> None:
        self.content_by_identity[identity] = content
        self.modified_by_identity[identity] = modified

    def append_object(self, *, identity: str, content: bytes, modified: datetime.datetime) -> None:
        self.put_object(
            identity=identity, content=self.content_by_identity.get(identity, b"") + content, modified=modified
        )

    def list_objects(self, prefix: str, recursive: bool = True) -> list[ObjectRef]:
        self.listing_calls.append(prefix)
        if prefix in self.failing_prefixes:
            raise TransientStoreError(f"Simulated listing failure for prefix '{prefix}'.")

        object_refs = list()
        for identity, content in self.content_by_identity.items():
            if not identity.startswith(prefix):
                continue
            if recursive is False and "/" in identity[len(prefix) :].lstrip("/"):
                continue

            object_refs.append(
                ObjectRef(identity=identity, modified=self.modified_by_identity[identity], size=len(content))
            )

        return object_refs

    def read_range(self, identity: str, offset: int, length: int) -> bytes:
        self.read_calls.append((identity, offset, length))
        if identity in self.failing_identities:
            raise TransientStoreError(f"Simulated read failure for '{identity}'.")

        return self.content_by_identity[identity][offset : offset + length]


class CollectingEventSink:
    """Keep every pushed event in memory, optionally failing once a given number of events has been accepted."""

    def __init__(self, *, fail_after: int | None = None):
        self.events: list[Event] = list()
        self.fail_after = fail_after

    def push(self, event: Event) -> None:
        if self.fail_after is not None and len(self.events) >= self.fail_after:
            raise SinkDeliveryError(f"Simulated delivery failure after {self.fail_after} events.")

        self.events.append(event)

    def events_by_source(self) -> dict[str, list[Event]]:
        events_by_source = collections.defaultdict(list)
        for event in self.events:
            events_by_source[event.source].append(event)

        return dict(events_by_source)
