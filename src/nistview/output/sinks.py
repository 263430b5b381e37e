"""Output sinks: deliver a serialized export to the user."""

import sys
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional, TextIO

from ..api.models import ExportArtifact
from ..utils.logging import get_logger

logger = get_logger(__name__)


class OutputSink(ABC):
    """Abstract destination for export artifacts."""

    @abstractmethod
    def deliver(self, artifact: ExportArtifact) -> str:
        """
        Deliver the artifact.

        Returns:
            Human-readable description of where the artifact went
        """
        pass


class DirectorySink(OutputSink):
    """Writes artifacts as named files into a directory."""

    def __init__(self, out_dir: Path):
        self.out_dir = Path(out_dir)

    def deliver(self, artifact: ExportArtifact) -> str:
        self.out_dir.mkdir(parents=True, exist_ok=True)
        target = self.out_dir / artifact.filename
        target.write_bytes(artifact.to_bytes())
        logger.info(f"Wrote {artifact.record_count} controls to {target} ({artifact.media_type})")
        return f"Exported to {target}"


class StreamSink(OutputSink):
    """Writes artifact content to a text stream (stdout by default)."""

    def __init__(self, stream: Optional[TextIO] = None):
        self.stream = stream

    def deliver(self, artifact: ExportArtifact) -> str:
        stream = self.stream if self.stream is not None else sys.stdout
        stream.write(artifact.content)
        if not artifact.content.endswith("\n"):
            stream.write("\n")
        return f"Exported {artifact.record_count} controls as {artifact.filename}"
