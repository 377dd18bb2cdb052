"""Deterministic extractive summarization."""

from .summarizer import split_sentences, summarize

__all__ = ["summarize", "split_sentences"]
