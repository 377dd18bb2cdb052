"""
Extractive summarization.

A summary is the first few sentence-like units of the article that are
neither fragments nor run-ons and do not just repeat the headline. The
transform is pure: identical input always gives identical output.
"""

from __future__ import annotations

import re


# Sentence-terminal punctuation (ASCII and full-width) followed by whitespace
_SENTENCE_BOUNDARY = re.compile(r"(?<=[.!?。！？])\s+")

SUMMARY_SENTENCES = 3
MIN_SENTENCE_CHARS = 10
MAX_SENTENCE_CHARS = 200


def split_sentences(text: str) -> list[str]:
    return _SENTENCE_BOUNDARY.split(text)


def summarize(raw_text: str, title: str) -> str:
    """Build a short extractive summary.

    Args:
        raw_text: Extracted article text
        title: Article headline; sentences containing it verbatim are skipped

    Returns:
        Up to three sentences joined by spaces. Short texts with fewer
        than three sentences are returned whole.
    """
    sentences = split_sentences(raw_text)
    if len(sentences) < SUMMARY_SENTENCES:
        return " ".join(sentences)

    valid = [
        sentence
        for sentence in sentences
        if MIN_SENTENCE_CHARS < len(sentence) < MAX_SENTENCE_CHARS and title not in sentence
    ]
    return " ".join(valid[:SUMMARY_SENTENCES])
