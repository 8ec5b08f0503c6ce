"""SimpleRAG: index a folder into a vector store and answer questions from it."""

__version__ = "0.1.0"
