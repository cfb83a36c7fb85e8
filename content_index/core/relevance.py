"""
Query-relevant passage extraction.

Long chunks are cut down to the fixed-size window that mentions the most
query words before they are handed to the prompt assembler.

Dependencies: re (stdlib)
System role: Relevance windowing for retrieval results
"""

import re

_WORD_PATTERN = re.compile(r"\w+")


def query_terms(query: str, min_length: int = 3) -> list[str]:
    """
    Lower-cased distinct query words of at least min_length characters.

    Args:
        query: Free-text user query
        min_length: Shortest word kept (default drops words of 2 chars or less)

    Returns:
        list[str]: Terms in first-seen order
    """
    terms: list[str] = []
    for word in _WORD_PATTERN.findall(query.lower()):
        if len(word) >= min_length and word not in terms:
            terms.append(word)
    return terms


def _window_starts(length: int, window: int, stride: int) -> list[int]:
    last_start = length - window
    starts = list(range(0, last_start + 1, stride))
    if starts[-1] != last_start:
        starts.append(last_start)
    return starts


def extract_relevant_window(
    content: str,
    query: str,
    window: int = 1500,
    stride: int = 100,
) -> str:
    """
    Return the window of content that contains the most query terms.

    Windows start every stride characters, plus one aligned to the end of
    the content. Matching is case-insensitive substring matching; the first
    window with the highest count wins.

    Args:
        content: Full entity content
        query: User query
        window: Window size in characters
        stride: Step between window starts

    Returns:
        str: content unchanged when it fits in one window
    """
    if len(content) <= window:
        return content

    terms = query_terms(query)
    best_start = 0
    best_count = -1

    for start in _window_starts(len(content), window, stride):
        candidate = content[start:start + window].lower()
        count = sum(1 for term in terms if term in candidate)
        if count > best_count:
            best_start = start
            best_count = count

    return content[best_start:best_start + window]
