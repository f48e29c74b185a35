"""Writes rendered artifacts to disk."""

from pathlib import Path
from typing import Iterable, List, Union

from ..logging_config import get_logger
from .core.generator import Artifact

logger = get_logger(__name__)


def write_artifacts(artifacts: Iterable[Artifact], output_dir: Union[str, Path]) -> List[Path]:
    """
    Write every artifact into ``output_dir``, creating it if needed.

    Args:
        artifacts: Complete list of rendered artifacts
        output_dir: Target directory

    Returns:
        Paths of the written files, in artifact order
    """
    directory = Path(output_dir)
    directory.mkdir(parents=True, exist_ok=True)

    written = []
    for artifact in artifacts:
        path = directory / artifact.name
        path.write_text(artifact.content, encoding="utf-8")
        logger.debug("Wrote %s", path)
        written.append(path)

    return written
