"""Reading content documents from a campaign directory.

Each campaign is a directory of YAML documents. ``DocumentReader`` turns
one named document into a decoded mapping, or raises one of the
``DocumentReadError`` subclasses. Deciding whether a failure is fatal is
the loader's job.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml

from questkeeper.core.exceptions import (
    DocumentDecodeError,
    DocumentNotFoundError,
    EmptyDocumentError,
)
from questkeeper.core.logging import get_logger


logger = get_logger(__name__)


class DocumentReader:
    """Reads and decodes YAML documents under a content root.

    Example:
        >>> reader = DocumentReader(Path("campaigns/muddlebrook"))
        >>> reader.read("campaign.yaml")["name"]
        'The Muddlebrook Mysteries'
    """

    def __init__(self, root: Path | str, *, encoding: str = "utf-8") -> None:
        """Initialize the reader.

        Args:
            root: Campaign content directory.
            encoding: Text encoding of the documents.
        """
        self._root = Path(root)
        self._encoding = encoding

    @property
    def root(self) -> Path:
        return self._root

    def path_for(self, name: str) -> Path:
        return self._root / name

    def exists(self, name: str) -> bool:
        """Whether the named document exists as a file."""
        return self.path_for(name).is_file()

    def read(self, name: str) -> dict[str, Any]:
        """Read and decode a document.

        Args:
            name: Document file name relative to the content root.

        Returns:
            The decoded top-level mapping.

        Raises:
            DocumentNotFoundError: If the document does not exist.
            EmptyDocumentError: If the document decodes to nothing.
            DocumentDecodeError: If the document cannot be read, is not
                valid YAML, or its top level is not a mapping.
        """
        path = self.path_for(name)
        if not path.is_file():
            raise DocumentNotFoundError(f"{name} not found", source_file=name)

        try:
            text = path.read_text(encoding=self._encoding)
        except (OSError, UnicodeDecodeError) as exc:
            raise DocumentDecodeError(f"Error reading {name}: {exc}", source_file=name) from exc

        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError as exc:
            raise DocumentDecodeError(f"Error parsing {name}: {exc}", source_file=name) from exc

        if data is None:
            raise EmptyDocumentError(f"{name} is empty", source_file=name)
        if not isinstance(data, dict):
            raise DocumentDecodeError(
                f"{name} must contain a mapping at the top level, got {type(data).__name__}",
                source_file=name,
            )

        logger.debug("Document read", document=name, keys=len(data))
        return data


__all__ = [
    "DocumentReader",
]
