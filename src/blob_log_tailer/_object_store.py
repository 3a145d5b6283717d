from collections.abc import Iterable
from typing import Protocol

from ._models import ObjectRef


class ObjectStore(Protocol):
    """
    The capabilities consumed from a remote, prefix-addressable object store.

    Implementations must raise `TransientStoreError` for any listing or read failure (including timeouts) so that the
    harvest loop can abandon the affected scope and retry on the next cycle.
    """

    def list_objects(self, prefix: str, recursive: bool = True) -> Iterable[ObjectRef]:
        """List every object whose identity starts with `prefix`."""
        ...

    def read_range(self, identity: str, offset: int, length: int) -> bytes:
        """Read `length` bytes of the object `identity` starting at byte `offset`."""
        ...
