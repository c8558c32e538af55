"""Retrieval — lexical relevance index over the loaded manual."""

from manual_rag.retrieval.relevance_index import RelevanceIndex, tokenize_query
from manual_rag.retrieval.schemas import IndexedChunk, SearchHit

__all__ = ["IndexedChunk", "RelevanceIndex", "SearchHit", "tokenize_query"]
