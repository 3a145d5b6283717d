"""The immutable records passed between the components of the harvest loop."""

import collections
import datetime

import pydantic

from ._config import BEGINNING_OF_TIME

ObjectRef = collections.namedtuple("ObjectRef", ["identity", "modified", "size"])
ObjectRef.__doc__ = """
Snapshot of one remote log segment as seen by a single listing call.

A later listing of the same identity produces a new ObjectRef with an updated size and modification time.
"""


class Event(pydantic.BaseModel):
    """One structured, schema-tagged record derived from a single log line."""

    model_config = pydantic.ConfigDict(frozen=True)

    schema_version: str
    timestamp: pydantic.AwareDatetime
    field_values: dict[str, str | int | None]
    source: str = ""

    def to_json(self) -> str:
        return self.model_dump_json()


class HarvestCheckpoint(pydantic.BaseModel):
    """
    The resumable state of a harvest loop.

    Supplying a checkpoint to a new HarvestLoop reproduces the exact resume point: objects modified at or before the
    watermark are never listed again, and every object in `per_object_offsets` continues from its recorded byte.
    """

    watermark: pydantic.AwareDatetime = BEGINNING_OF_TIME
    per_object_offsets: dict[str, pydantic.NonNegativeInt] = pydantic.Field(default_factory=dict)

    @pydantic.field_validator("watermark", mode="before")
    @classmethod
    def _assume_utc(cls, value):
        if isinstance(value, str):
            value = datetime.datetime.fromisoformat(value)
        if isinstance(value, datetime.datetime) and value.tzinfo is None:
            return value.replace(tzinfo=datetime.timezone.utc)
        return value
