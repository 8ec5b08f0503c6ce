from .document import Chunk, Document, QueryResult, ScoredDocument

__all__ = ["Chunk", "Document", "QueryResult", "ScoredDocument"]
