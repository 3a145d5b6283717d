from ._globals import _COMMENT_MARKER, _ESCAPED_SEQUENCE, _UNESCAPED_CHARACTER


def filter_record(*, raw_line: bytes | str) -> str | None:
    """
    Drop comment and header lines and restore characters the write side escaped.

    Header lines (`#Software: ...`, `#Fields: ...`) recur at the top of every log segment, so they are silently
    discarded rather than treated as errors. Blank lines are discarded the same way.
    """
    if isinstance(raw_line, bytes):
        raw_line = raw_line.decode("utf-8", errors="replace")

    line = raw_line.rstrip("\r\n")
    if line == "" or line.startswith(_COMMENT_MARKER):
        return None

    return line.replace(_ESCAPED_SEQUENCE, _UNESCAPED_CHARACTER)
