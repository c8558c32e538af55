"""Sentence-aware, overlapping text chunking."""

from manual_rag.chunking.base import BaseChunker
from manual_rag.chunking.schemas import Chunk
from manual_rag.chunking.sentence_chunker import SentenceChunker

__all__ = ["BaseChunker", "Chunk", "SentenceChunker"]
