"""Technical-manual ingestion, summarization and lexical question answering."""

__version__ = "0.1.0"
