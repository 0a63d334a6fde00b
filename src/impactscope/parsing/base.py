"""Base parser interface for declaration extraction."""

from abc import ABC, abstractmethod
from pathlib import Path

from impactscope.analysis.models import DeclaredMember


class DeclarationParser(ABC):
    """Abstract base class for language-specific declaration parsers."""

    @property
    @abstractmethod
    def supported_extensions(self) -> list[str]:
        """List of file extensions this parser supports."""
        ...

    @property
    @abstractmethod
    def language(self) -> str:
        """Language name for this parser."""
        ...

    @abstractmethod
    def extract_members(self, content: str, file_id: str | None = None) -> list[DeclaredMember]:
        """
        Parse a file and extract its member declarations.

        Args:
            content: File content as string
            file_id: Identifier used in error messages

        Returns:
            Members in source order; names may repeat (overloads)

        Raises:
            UnparsableSource: If the content has syntax errors
        """
        ...

    def can_parse(self, file_path: Path) -> bool:
        """Check if this parser can handle the given file."""
        return file_path.suffix.lower() in self.supported_extensions
