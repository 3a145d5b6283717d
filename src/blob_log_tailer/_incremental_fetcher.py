from collections.abc import Iterator

from ._config import DEFAULT_MAXIMUM_BUFFER_SIZE_IN_BYTES
from ._exceptions import TransientStoreError
from ._models import ObjectRef
from ._object_store import ObjectStore


def fetch_new_bytes(
    *,
    object_store: ObjectStore,
    object_ref: ObjectRef,
    from_offset: int,
    maximum_buffer_size_in_bytes: int = DEFAULT_MAXIMUM_BUFFER_SIZE_IN_BYTES,
) -> Iterator[bytes]:
    """
    Lazily read the bytes of an object in the range [from_offset, object_ref.size) using bounded range reads.

    If the object has not grown since it was last read, nothing is yielded and the store is never called.
    The offset tracker is not touched; the caller records progress once the bytes have been delivered.

    Parameters
    ----------
    object_store : ObjectStore
        The store to issue range reads against.
    object_ref : ObjectRef
        The listing snapshot of the object; its size is the upper bound of the read.
    from_offset : int
        The first byte not yet consumed.
    maximum_buffer_size_in_bytes : int, default: 4 MB
        The maximum number of bytes requested by a single range read.
    """
    offset = from_offset
    while offset < object_ref.size:
        length = min(maximum_buffer_size_in_bytes, object_ref.size - offset)
        intermediate_bytes = object_store.read_range(object_ref.identity, offset, length)

        # The listing promised more bytes than the store is willing to serve
        if len(intermediate_bytes) == 0:
            raise TransientStoreError(
                f"Range read of '{object_ref.identity}' at offset {offset} returned no bytes, "
                f"but the listed size is {object_ref.size}."
            )

        intermediate_bytes = intermediate_bytes[:length]
        offset += len(intermediate_bytes)

        yield intermediate_bytes
