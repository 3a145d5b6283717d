"""Default file-backed load and save hooks for the resumable state of a harvest loop."""

import pathlib

import yaml
from pydantic import validate_call

from ._models import HarvestCheckpoint


@validate_call
def load_checkpoint(*, checkpoint_file_path: pathlib.Path) -> HarvestCheckpoint | None:
    """Load a checkpoint previously written by `save_checkpoint`, or None if the file does not exist yet."""
    if not checkpoint_file_path.exists():
        return None

    with open(file=checkpoint_file_path) as stream:
        content = yaml.load(stream=stream, Loader=yaml.SafeLoader) or dict()

    return HarvestCheckpoint.model_validate(content)


@validate_call
def save_checkpoint(*, checkpoint: HarvestCheckpoint, checkpoint_file_path: pathlib.Path) -> None:
    """
    Write a checkpoint to a YAML file.

    The content is first written to a sibling temporary file and then moved into place, so an interrupted write never
    leaves a truncated checkpoint behind.
    """
    checkpoint_file_path.parent.mkdir(parents=True, exist_ok=True)
    temporary_file_path = checkpoint_file_path.with_suffix(checkpoint_file_path.suffix + ".tmp")

    with open(file=temporary_file_path, mode="w") as stream:
        yaml.dump(data=checkpoint.model_dump(mode="json"), stream=stream)
    temporary_file_path.replace(checkpoint_file_path)

    return None
