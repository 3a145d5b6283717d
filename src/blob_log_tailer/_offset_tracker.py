from collections.abc import Mapping


class OffsetTracker:
    def __init__(self, *, initial_offsets: Mapping[str, int] | None = None):
        """
        Track, per object identity, how many bytes have already been consumed by this process.

        Offsets are never inferred from object sizes; they only reflect what was actually read and delivered.
        Entries are never removed since objects are append-only and never shrink.

        Parameters
        ----------
        initial_offsets : mapping of str to int, optional
            Offsets restored from a checkpoint.
        """
        self._offset_by_identity: dict[str, int] = dict()
        for identity, offset in (initial_offsets or dict()).items():
            self.record(identity=identity, offset=offset)

    def __len__(self) -> int:
        return len(self._offset_by_identity)

    def __contains__(self, identity: str) -> bool:
        return identity in self._offset_by_identity

    def offset_for(self, *, identity: str) -> int:
        """Return the number of bytes already consumed; objects seen for the first time start at 0."""
        return self._offset_by_identity.get(identity, 0)

    def record(self, *, identity: str, offset: int) -> None:
        current_offset = self.offset_for(identity=identity)
        if offset < 0 or offset < current_offset:
            raise ValueError(
                f"Offset for '{identity}' may not decrease or be negative! Current offset is {current_offset}, "
                f"attempted to record {offset}."
            )
        self._offset_by_identity[identity] = offset

    def as_dict(self) -> dict[str, int]:
        return dict(self._offset_by_identity)
