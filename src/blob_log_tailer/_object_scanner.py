import datetime
import logging
from collections.abc import Iterable

from ._config import BEGINNING_OF_TIME
from ._models import ObjectRef
from ._object_store import ObjectStore
from ._prefix_planner import _as_utc

logger = logging.getLogger(__name__)


def scan_objects(
    *,
    object_store: ObjectStore,
    prefixes: Iterable[str],
    watermark: datetime.datetime | None,
) -> list[ObjectRef]:
    """
    List all objects modified strictly after the watermark under each prefix, ordered by modification time.

    Objects with an unknown modification time are discarded, as are objects modified exactly at the watermark (those
    were already fully processed). The same identity may appear under overlapping prefixes; only its most recently
    modified snapshot is kept. The sort is stable, so objects sharing a modification time keep the order in which the
    store returned them.

    Any `TransientStoreError` raised while listing a prefix propagates and fails the whole scan; returning partial
    results could let the watermark advance past objects that were never listed.
    """
    watermark = _as_utc(watermark) if watermark is not None else BEGINNING_OF_TIME

    object_ref_by_identity: dict[str, ObjectRef] = dict()
    for prefix in prefixes:
        number_of_listed_objects = 0
        for object_ref in object_store.list_objects(prefix, recursive=True):
            number_of_listed_objects += 1
            if object_ref.modified is None:
                continue

            modified = _as_utc(object_ref.modified)
            if modified <= watermark:
                continue

            previous_object_ref = object_ref_by_identity.get(object_ref.identity, None)
            if previous_object_ref is not None and previous_object_ref.modified >= modified:
                continue
            object_ref_by_identity[object_ref.identity] = object_ref._replace(modified=modified)

        logger.debug("Listed %d objects under prefix '%s'.", number_of_listed_objects, prefix)

    candidates = sorted(object_ref_by_identity.values(), key=lambda object_ref: object_ref.modified)

    return candidates
