from __future__ import annotations
from typing import List

DEFAULT_MAX_WORDS = 500

def chunk_content(content: str, max_words: int = DEFAULT_MAX_WORDS) -> List[str]:
    """
    Split content into whitespace-delimited word groups of at most max_words.
    Blank content comes back as a single chunk equal to the input.
    """
    size = max(1, int(max_words))
    words = content.split()
    chunks = [" ".join(words[i : i + size]) for i in range(0, len(words), size)]
    return chunks or [content]
