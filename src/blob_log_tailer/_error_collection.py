"""Append every non-fatal harvest error to a daily YAML file, so that dropped lines and skipped objects can be replayed."""

import datetime
import importlib.metadata

import yaml

from ._config import BLOB_LOG_TAILER_BASE_FOLDER_PATH


def _collect_error(
    *,
    message: str,
    error_type: str,
    task_id: str | None = None,
    identity: str | None = None,
    watermark: datetime.datetime | None = None,
) -> None:
    """
    Append a single error record, as its own YAML document, to the error file of the day.

    Parameters
    ----------
    message : str
        The warning raised by the harvest loop.
    error_type : str
        One of "line" (a dropped malformed line), "object" (an object skipped for the rest of a cycle),
        or "cycle" (a failed listing or checkpoint save).
        Added as an identifying tag on the error collection file name.
    task_id : str, optional
        The identifier of the harvest loop that raised the error.
        Added as an identifying tag on the error collection file name.
    identity : str, optional
        The object the error was raised for; absent for cycle-level errors.
    watermark : datetime.datetime, optional
        The watermark of the loop when the error was raised, i.e., the point from which the object will be listed again.
    """
    errors_folder_path = BLOB_LOG_TAILER_BASE_FOLDER_PATH / "errors"
    errors_folder_path.mkdir(exist_ok=True)

    collected_at = datetime.datetime.now(tz=datetime.timezone.utc)
    error_collection_file_name = f"{collected_at.strftime('%y%m%d')}_{error_type}_errors"
    if task_id is not None:
        error_collection_file_name += f"_{task_id}"
    error_collection_file_path = errors_folder_path / f"{error_collection_file_name}.yaml"

    record = {
        "collected_at": collected_at.isoformat(),
        "version": importlib.metadata.version(distribution_name="blob_log_tailer"),
        "identity": identity,
        "watermark": watermark.isoformat() if watermark is not None else None,
        "message": message,
    }
    with open(file=error_collection_file_path, mode="a") as io:
        yaml.safe_dump(data=record, stream=io, explicit_start=True, sort_keys=False)

    return None
