"""
Splits a long document into line-aligned chunks for the refinement service,
cutting at question boundaries where possible.
"""
from typing import List

from core.patterns import looks_like_question_start

DEFAULT_CHUNK_SIZE = 1500
# A chunk is force-closed once it would pass this multiple of the target
OVERFLOW_FACTOR = 1.5


def chunk_text(text: str, chunk_size: int = DEFAULT_CHUNK_SIZE) -> List[str]:
    """
    Split text into chunks of roughly chunk_size characters.
    Lines are never split. Once a chunk reaches the target size it is closed
    before the next numbered question, or before any line once it would grow
    past 1.5x the target; otherwise it keeps growing so a question body is
    not severed.
    """
    chunks = []
    current = ""
    for line in text.split("\n"):
        prospective = f"{current}\n{line}" if current else line

        if len(prospective) < chunk_size:
            current = prospective
            continue

        if looks_like_question_start(line) or len(prospective) > chunk_size * OVERFLOW_FACTOR:
            if current.strip():
                chunks.append(current)
            current = line
        else:
            current = prospective

    if current.strip():
        chunks.append(current)
    return chunks
