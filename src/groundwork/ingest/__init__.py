"""Groundwork ingest pipeline — text extraction, chunking, embedding writer."""

from groundwork.ingest.chunker import PageChunker
from groundwork.ingest.embedding_writer import EmbeddingConfig, EmbeddingWriter
from groundwork.ingest.extractor import blocks_to_text, extract_text, page_title

__all__ = [
    "EmbeddingConfig",
    "EmbeddingWriter",
    "PageChunker",
    "blocks_to_text",
    "extract_text",
    "page_title",
]
