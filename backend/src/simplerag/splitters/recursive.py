from langchain_text_splitters import RecursiveCharacterTextSplitter

from simplerag.config import DEFAULT_CHUNK_OVERLAP, DEFAULT_CHUNK_SIZE
from simplerag.models import Chunk, Document
from .base import BaseTextSplitter

# Ordered from coarsest to finest boundary.
DEFAULT_SEPARATORS = [
    "\n\n",
    "\n",
    ". ",
    "! ",
    "? ",
    "; ",
    ", ",
    " ",
    "",
]


class RecursiveTextSplitter(BaseTextSplitter):
    """Character-based splitter that prefers the coarsest boundary that fits.

    Sizes are measured in characters. Separators stay attached to the end of
    the piece they terminate, so sentences keep their punctuation.
    """

    def __init__(
        self,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        chunk_overlap: int = DEFAULT_CHUNK_OVERLAP,
        separators: list[str] | None = None,
    ):
        if not 0 <= chunk_overlap < chunk_size:
            raise ValueError(
                f"chunk_overlap ({chunk_overlap}) must be non-negative "
                f"and smaller than chunk_size ({chunk_size})"
            )
        self.chunk_size = chunk_size
        self.chunk_overlap = chunk_overlap
        self.separators = list(separators or DEFAULT_SEPARATORS)
        self.splitter = RecursiveCharacterTextSplitter(
            chunk_size=chunk_size,
            chunk_overlap=chunk_overlap,
            separators=self.separators,
            keep_separator="end",
            length_function=len,
        )

    def split_documents(self, documents: list[Document]) -> list[Chunk]:
        """Split documents into chunks, copying each parent's metadata."""
        chunks = []
        for document in documents:
            for index, text in enumerate(self.split_text(document.content)):
                chunks.append(
                    Chunk(
                        content=text,
                        metadata=dict(document.metadata),
                        chunk_index=index,
                    )
                )
        return chunks

    def split_text(self, text: str) -> list[str]:
        return self.splitter.split_text(text)
