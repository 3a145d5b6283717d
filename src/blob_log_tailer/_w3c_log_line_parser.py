"""
Parse a single line of a W3C extended web server access log into an Event.

The layout is the fixed, space-delimited set of columns written by IIS on Azure App Service:

1) The first two columns (date and time) combine into the UTC timestamp of the event.
2) The remaining columns map positionally onto the known field names.
3) The port column and every column from the status code onward are emitted as integers ('-' meaning absent);
   all other columns are strings, with embedded double quotes replaced by single quotes.
"""

import datetime

from ._exceptions import MalformedRecordError
from ._globals import (
    _IS_W3C_COLUMN_NUMERIC,
    _NUMBER_OF_W3C_FIELDS,
    _W3C_FIELD_NAMES,
    _W3C_SCHEMA_VERSION,
    _W3C_TIMESTAMP_FORMAT,
)
from ._models import Event


def parse_w3c_log_line(*, line: str, source: str = "") -> Event:
    """
    Map the columns of a W3C log line onto an Event.

    Parameters
    ----------
    line : str
        A single filtered log line, without its line terminator.
    source : str, optional
        The identity of the object the line was read from.

    Raises
    ------
    MalformedRecordError
        If the number of columns does not match the field names, the timestamp cannot be parsed, or a numeric column
        does not hold an integer.
    """
    columns = line.split(" ")

    number_of_columns = len(columns)
    if number_of_columns != _NUMBER_OF_W3C_FIELDS:
        raise MalformedRecordError(
            f"Unexpected number of columns: {number_of_columns} (expected {_NUMBER_OF_W3C_FIELDS}). Line: '{line}'"
        )

    try:
        timestamp = datetime.datetime.strptime(f"{columns[0]} {columns[1]}", _W3C_TIMESTAMP_FORMAT)
    except ValueError as exception:
        raise MalformedRecordError(f"Unparseable timestamp in line: '{line}'") from exception

    field_values = dict()
    for column_index in range(2, number_of_columns):
        field_name = _W3C_FIELD_NAMES[column_index]
        value = columns[column_index]

        if _IS_W3C_COLUMN_NUMERIC[column_index] is False:
            field_values[field_name] = value.replace('"', "'")
        elif value == "-":
            field_values[field_name] = None
        # str.isdigit also accepts non-ASCII digits such as superscripts, which int() rejects
        elif value.isascii() and value.isdigit():
            field_values[field_name] = int(value)
        else:
            raise MalformedRecordError(f"Unexpected non-numeric value '{value}' for field '{field_name}': '{line}'")

    event = Event(
        schema_version=_W3C_SCHEMA_VERSION,
        timestamp=timestamp.replace(tzinfo=datetime.timezone.utc),
        field_values=field_values,
        source=source,
    )

    return event
