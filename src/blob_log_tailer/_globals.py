import collections

_COMMENT_MARKER = "#"

# The write side substitutes '/' with '~1' to keep values path-safe
_ESCAPED_SEQUENCE = "~1"
_UNESCAPED_CHARACTER = "/"

_W3C_SCHEMA_VERSION = "w3c-iis/1"

_W3C_TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"

_W3C_FIELD_NAMES = [
    "date",
    "time",
    "s-sitename",
    "cs-method",
    "cs-uri-stem",
    "cs-uri-query",
    "s-port",
    "cs-username",
    "c-ip",
    "cs(User-Agent)",
    "cs(Cookie)",
    "cs(Referer)",
    "cs-host",
    "sc-status",
    "sc-substatus",
    "sc-win32-status",
    "sc-bytes",
    "cs-bytes",
    "time-taken",
]
_NUMBER_OF_W3C_FIELDS = len(_W3C_FIELD_NAMES)

# Column indices (into the full line) emitted as numbers rather than strings
_W3C_PORT_COLUMN_INDEX = _W3C_FIELD_NAMES.index("s-port")
_W3C_FIRST_TRAILING_NUMERIC_COLUMN_INDEX = _W3C_FIELD_NAMES.index("sc-status")

_IS_W3C_COLUMN_NUMERIC = collections.defaultdict(bool)
_IS_W3C_COLUMN_NUMERIC[_W3C_PORT_COLUMN_INDEX] = True
for column_index in range(_W3C_FIRST_TRAILING_NUMERIC_COLUMN_INDEX, _NUMBER_OF_W3C_FIELDS):
    _IS_W3C_COLUMN_NUMERIC[column_index] = True
