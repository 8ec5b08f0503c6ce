from pathlib import Path
from typing import Callable

from llama_index.core import SimpleDirectoryReader
from llama_index.core.readers.base import BaseReader
from llama_index.core.schema import Document as LlamaDocument
from llama_index.readers.file import CSVReader, DocxReader, FlatReader, PDFReader
from llama_index.readers.json import JSONReader

from simplerag.models import Document
from .base import BaseDocumentLoader, DocumentLoadError

LOADED_FROM = "local_folder"

ReaderFactory = Callable[[], BaseReader]

_READER_REGISTRY: dict[str, ReaderFactory] = {
    ".txt": FlatReader,
    ".md": FlatReader,
    ".pdf": PDFReader,
    ".csv": lambda: CSVReader(concat_rows=False),
    ".docx": DocxReader,
    ".json": JSONReader,
}


def register_reader(extension: str, factory: ReaderFactory) -> None:
    """Register a reader factory for a file extension (e.g. ".html")."""
    if not extension.startswith("."):
        extension = f".{extension}"
    _READER_REGISTRY[extension.lower()] = factory


def list_supported_extensions() -> list[str]:
    return sorted(_READER_REGISTRY)


class FolderLoader(BaseDocumentLoader):
    """Loads every supported file under a folder using llama-index readers.

    The reader is picked by file extension; files with no registered reader
    are skipped.
    """

    def __init__(self, readers: dict[str, ReaderFactory] | None = None):
        self._readers = dict(readers) if readers is not None else None

    @property
    def readers(self) -> dict[str, ReaderFactory]:
        return self._readers if self._readers is not None else _READER_REGISTRY

    def discover_files(self, folder: Path) -> list[Path]:
        """Recursively list non-hidden files that have a registered reader."""
        files = []
        for path in folder.rglob("*"):
            relative = path.relative_to(folder)
            if any(part.startswith(".") for part in relative.parts):
                continue
            if path.is_file() and path.suffix.lower() in self.readers:
                files.append(path)
        return sorted(files)

    def _read(self, files: list[Path]) -> list[LlamaDocument]:
        file_extractor = {
            suffix: self.readers[suffix]()
            for suffix in {f.suffix.lower() for f in files}
        }
        reader = SimpleDirectoryReader(
            input_files=[str(f) for f in files],
            file_extractor=file_extractor,
            raise_on_error=True,
        )
        return reader.load_data()

    def load_file(self, file_path: Path | str) -> list[Document]:
        file_path = Path(file_path)
        if file_path.suffix.lower() not in self.readers:
            raise ValueError(f"No reader available for file type: {file_path.suffix}")
        return [_to_document(doc) for doc in self._read([file_path])]

    def load_documents(self, folder_path: Path | str) -> list[Document]:
        folder = Path(folder_path)
        try:
            if not folder.is_dir():
                raise FileNotFoundError(f"Directory not found: {folder}")

            files = self.discover_files(folder)
            llama_documents = self._read(files) if files else []
        except Exception as e:
            raise DocumentLoadError(
                f"Failed to load documents for folder {folder_path}: {e}"
            ) from e

        documents = [
            _to_document(
                doc,
                loaded_from=LOADED_FROM,
                folder_path=str(folder_path),
            )
            for doc in llama_documents
        ]
        return documents


def _to_document(doc: LlamaDocument, **extra_metadata: str) -> Document:
    metadata = dict(doc.metadata) if doc.metadata else {}
    if not metadata.get("source") and metadata.get("file_path"):
        metadata["source"] = metadata["file_path"]
    metadata.update(extra_metadata)
    return Document(content=doc.text, metadata=metadata)
