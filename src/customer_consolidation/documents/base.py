"""Abstract document host interfaces."""

from abc import ABC, abstractmethod


class Document(ABC):
    """
    A flat, ordered list of paragraphs with bold and hyperlink styling.
    Character offsets passed to styling methods are Python string offsets
    into the paragraph text; `end` is exclusive.
    """

    @property
    @abstractmethod
    def id(self) -> str:
        pass

    @abstractmethod
    def paragraphs(self) -> list[str]:
        """Paragraph texts, top to bottom."""
        pass

    @abstractmethod
    def insert_paragraph(self, index: int, text: str) -> None:
        """Insert a paragraph so that it ends up at position `index`."""
        pass

    def insert_paragraphs(self, index: int, lines: list[str]) -> None:
        """Insert consecutive paragraphs starting at `index`, preserving order."""
        for offset, line in enumerate(lines):
            self.insert_paragraph(index + offset, line)

    @abstractmethod
    def clear(self) -> None:
        """Remove all content."""
        pass

    @abstractmethod
    def set_bold(self, index: int, start: int, end: int) -> None:
        pass

    @abstractmethod
    def set_link(self, index: int, start: int, end: int, url: str) -> None:
        pass


class DocumentStore(ABC):
    """Opens and creates documents on a document host."""

    @abstractmethod
    def open(self, handle: str) -> Document:
        """Open by handle. Raises DocumentResolutionError when it cannot."""
        pass

    @abstractmethod
    def create(self, name: str) -> Document:
        """Create an empty document. Raises DocumentResolutionError on failure."""
        pass
