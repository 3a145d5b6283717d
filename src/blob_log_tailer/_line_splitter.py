_LINE_TERMINATOR = b"\n"


def split_lines(*, previous_fragment: bytes, new_bytes: bytes) -> tuple[list[bytes], bytes]:
    """
    Split freshly read bytes into complete lines, carrying over any incomplete trailing line.

    A range read may end in the middle of a line, so the leftover of the previous read of the same object is prepended
    before splitting. Lines keep their terminator; joining the returned lines and fragment reproduces
    `previous_fragment + new_bytes` exactly.

    Returns
    -------
    lines : list of bytes
        The complete lines, in file order.
    fragment : bytes
        The trailing bytes after the last line terminator (possibly empty), to be passed back on the next read.
    """
    buffer = previous_fragment + new_bytes

    last_terminator_index = buffer.rfind(_LINE_TERMINATOR)
    if last_terminator_index == -1:
        return [], buffer

    complete_bytes = buffer[: last_terminator_index + 1]
    fragment = buffer[last_terminator_index + 1 :]
    lines = [line + _LINE_TERMINATOR for line in complete_bytes[:-1].split(_LINE_TERMINATOR)]

    return lines, fragment
