import datetime
import pathlib

BLOB_LOG_TAILER_BASE_FOLDER_PATH = pathlib.Path.home() / ".blob_log_tailer"
BLOB_LOG_TAILER_BASE_FOLDER_PATH.mkdir(exist_ok=True)

# Web server logs are only published to storage once every 30 seconds
DEFAULT_POLL_INTERVAL_IN_SECONDS = 30.0

DEFAULT_MAXIMUM_BUFFER_SIZE_IN_BYTES = 4 * 10**6

# Beyond this window a single listing of the base prefix is cheaper than one listing per day
DAILY_PREFIX_LOOKBACK = datetime.timedelta(days=7)

BEGINNING_OF_TIME = datetime.datetime.min.replace(tzinfo=datetime.timezone.utc)
