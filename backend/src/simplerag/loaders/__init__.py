from .base import BaseDocumentLoader, DocumentLoadError
from .directory import (
    FolderLoader,
    list_supported_extensions,
    register_reader,
)

DocumentLoader = FolderLoader

__all__ = [
    "BaseDocumentLoader",
    "DocumentLoadError",
    "DocumentLoader",
    "FolderLoader",
    "list_supported_extensions",
    "register_reader",
]
