"""Persist compiled documents where the serving layer expects them.

Documents are keyed by experience id (``{id}.html``). Writing always
replaces the previous document in place; there is no versioning. Callers
must serialize writes for the same experience id.
"""

from __future__ import annotations

import logging
from pathlib import Path

from ..core.config import OutputParams
from ..core.errors import InvalidExperienceIdError
from ..scene.models import Experience
from .assembler import DocumentAssembler

logger = logging.getLogger(__name__)


class ExperienceWriter:
    """Writes experience documents into the experiences directory."""

    def __init__(self, output: OutputParams | None = None):
        """Initialize writer.

        Args:
            output: Output directory and URL prefix (defaults if None)
        """
        self.output = output or OutputParams()
        self.experiences_dir = Path(self.output.experiences_dir)

    def _ensure_dir(self) -> None:
        """Ensure experiences directory exists."""
        self.experiences_dir.mkdir(parents=True, exist_ok=True)

    def experience_path(self, experience_id: str) -> Path:
        """Get the path of an experience's document.

        Args:
            experience_id: Experience identifier

        Returns:
            Path to the HTML file

        Raises:
            InvalidExperienceIdError: If the id is not a plain file name
        """
        if not experience_id or experience_id in (".", "..") or Path(experience_id).name != experience_id:
            raise InvalidExperienceIdError(f"Invalid experience id for a document file name: {experience_id!r}")
        return self.experiences_dir / f"{experience_id}.html"

    def url_for(self, experience_id: str) -> str:
        """Public URL the serving layer exposes the document at."""
        return f"{self.output.url_prefix.rstrip('/')}/{experience_id}.html"

    def save(self, experience_id: str, document: str) -> Path:
        """Write a document, replacing any previous one.

        Args:
            experience_id: Experience identifier
            document: Markup text

        Returns:
            Path where the document was saved
        """
        path = self.experience_path(experience_id)
        self._ensure_dir()

        # Write atomically by writing to temp file first
        temp_path = path.with_suffix(".tmp")
        try:
            with open(temp_path, "w", encoding="utf-8") as f:
                f.write(document)

            # Atomic rename
            temp_path.replace(path)
        except BaseException:
            temp_path.unlink(missing_ok=True)
            raise

        logger.info(f"Experience document saved: {path.name}")
        return path

    def publish(self, experience: Experience, assembler: DocumentAssembler) -> str:
        """Compile and save an experience.

        Args:
            experience: Normalized experience
            assembler: Assembler carrying the compile policy

        Returns:
            Public URL of the saved document

        Raises:
            ExperienceCompileError: If the experience cannot be compiled
        """
        document = assembler.assemble(experience)
        self.save(experience.id, document)
        return self.url_for(experience.id)

    def delete(self, experience_id: str) -> bool:
        """Delete an experience's document.

        Args:
            experience_id: Experience identifier

        Returns:
            True if deleted, False if not found
        """
        path = self.experience_path(experience_id)
        if path.exists():
            path.unlink()
            logger.info(f"Deleted experience document: {path}")
            return True
        return False

    def list_documents(self) -> list[Path]:
        """All saved documents, sorted by name."""
        if not self.experiences_dir.exists():
            return []
        return sorted(self.experiences_dir.glob("*.html"))
