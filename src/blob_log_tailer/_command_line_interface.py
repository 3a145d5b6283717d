"""Call the blob log tailer from the command line."""

import datetime
import functools
import logging
import pathlib
import sys

import click

from ._checkpoint import load_checkpoint, save_checkpoint
from ._config import DEFAULT_POLL_INTERVAL_IN_SECONDS
from ._event_sinks import JsonLinesEventSink
from ._harvest_loop import HarvestLoop
from ._s3_object_store import S3ObjectStore


@click.command(name="tail_blob_logs")
@click.option(
    "--bucket",
    help="The name of the bucket containing the log segments.",
    required=True,
    type=str,
    envvar="BLOB_LOG_TAILER_BUCKET",
)
@click.option(
    "--base_prefix",
    help="The key prefix under which the time-bucketed log segments reside (for example, the application name).",
    required=True,
    type=str,
)
@click.option(
    "--poll_interval_in_seconds",
    help="The period between the starts of two consecutive polling cycles.",
    required=False,
    type=click.FloatRange(min=0.0),
    default=DEFAULT_POLL_INTERVAL_IN_SECONDS,
)
@click.option(
    "--skip_until",
    help="Ignore log segments last modified at or before this date or time (interpreted as UTC).",
    required=False,
    type=click.DateTime(formats=["%Y-%m-%d", "%Y-%m-%dT%H:%M:%S", "%Y-%m-%d %H:%M:%S"]),
    default=None,
)
@click.option(
    "--checkpoint_file_path",
    help=(
        "The path to a YAML file holding the watermark and per-object offsets. "
        "Resumed from if it exists, and rewritten at the end of every cycle."
    ),
    required=False,
    type=click.Path(writable=True, dir_okay=False, path_type=pathlib.Path),
    default=None,
)
@click.option(
    "--output_file_path",
    help="The path to append events to as JSON lines. Events are written to stdout when omitted.",
    required=False,
    type=click.Path(writable=True, dir_okay=False, path_type=pathlib.Path),
    default=None,
)
@click.option(
    "--endpoint_url",
    help="A custom endpoint for S3-compatible stores (MinIO, LocalStack, ...).",
    required=False,
    type=str,
    default=None,
    envvar="AWS_ENDPOINT_URL",
)
@click.option(
    "--maximum_buffer_size_in_mb",
    help="The maximum amount of data (in MB) requested by a single range read.",
    required=False,
    type=click.IntRange(min=1),
    default=4,
)
@click.option(
    "--max_cycles",
    help=(
        "Stop after this many polling cycles (for example, 1 to poll once from a scheduler). "
        "Runs until interrupted when omitted."
    ),
    required=False,
    type=click.IntRange(min=1),
    default=None,
)
@click.option(
    "--progress",
    help="Display a progress bar over the objects of each cycle.",
    is_flag=True,
    default=False,
)
def _tail_blob_logs_cli(
    bucket: str,
    base_prefix: str,
    poll_interval_in_seconds: float,
    skip_until: datetime.datetime | None,
    checkpoint_file_path: pathlib.Path | None,
    output_file_path: pathlib.Path | None,
    endpoint_url: str | None,
    maximum_buffer_size_in_mb: int,
    max_cycles: int | None,
    progress: bool,
) -> None:
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(name)s %(levelname)s %(message)s")

    checkpoint = None
    checkpoint_saver = None
    if checkpoint_file_path is not None:
        checkpoint = load_checkpoint(checkpoint_file_path=checkpoint_file_path)
        checkpoint_saver = functools.partial(_save_checkpoint_to_file, checkpoint_file_path=checkpoint_file_path)

    object_store = S3ObjectStore(bucket=bucket, endpoint_url=endpoint_url)

    io = open(file=output_file_path, mode="a") if output_file_path is not None else sys.stdout
    try:
        harvest_loop = HarvestLoop(
            object_store=object_store,
            event_sink=JsonLinesEventSink(io=io),
            base_prefix=base_prefix,
            poll_interval_in_seconds=poll_interval_in_seconds,
            checkpoint=checkpoint,
            skip_until=skip_until,
            checkpoint_saver=checkpoint_saver,
            maximum_buffer_size_in_bytes=maximum_buffer_size_in_mb * 10**6,
            candidate_tqdm_kwargs=dict(disable=not progress),
        )
        harvest_loop.run(max_cycles=max_cycles)
    except KeyboardInterrupt:
        click.echo("Interrupted; the last checkpoint was written at the end of the previous cycle.", err=True)
    finally:
        if io is not sys.stdout:
            io.close()

    return None


def _save_checkpoint_to_file(checkpoint, *, checkpoint_file_path: pathlib.Path) -> None:
    save_checkpoint(checkpoint=checkpoint, checkpoint_file_path=checkpoint_file_path)
