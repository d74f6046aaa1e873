"""Tests for the question-aware chunker."""
import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from core.chunker import chunk_text


def _bank(n: int, body_len: int = 60) -> str:
    return "\n".join(f"{i}. 题目{i}" + "字" * body_len + "\nA. 甲\nB. 乙\n答案：A" for i in range(1, n + 1))


def test_chunk_basic():
    chunks = chunk_text(_bank(40), chunk_size=300)
    assert len(chunks) > 1
    assert all(isinstance(c, str) for c in chunks)


def test_chunks_start_at_question_boundaries():
    chunks = chunk_text(_bank(40), chunk_size=300)
    for chunk in chunks:
        first_line = chunk.split("\n")[0]
        assert first_line[0].isdigit()


def test_chunks_stay_under_overflow_bound():
    chunks = chunk_text(_bank(40), chunk_size=300)
    assert all(len(c) <= 450 for c in chunks)


def test_chunks_preserve_all_lines_in_order():
    text = _bank(25)
    chunks = chunk_text(text, chunk_size=200)
    assert "\n".join(chunks) == text


def test_long_unnumbered_text_is_force_split():
    text = "\n".join("这是一行没有题号的长文本" * 3 for _ in range(60))
    chunks = chunk_text(text, chunk_size=200)
    assert len(chunks) > 1
    assert all(len(c) <= 300 for c in chunks)


def test_single_oversized_line_becomes_its_own_chunk():
    long_line = "1. " + "长" * 1000
    chunks = chunk_text(f"{long_line}\n2. 短题", chunk_size=100)
    assert chunks == [long_line, "2. 短题"]


def test_chunk_short_text():
    text = "1. 很短的题目\nA. 是\nB. 否"
    chunks = chunk_text(text, chunk_size=1500)
    assert chunks == [text]


def test_trailing_blank_content_is_dropped():
    assert chunk_text("\n\n   \n", chunk_size=10) == []


if __name__ == "__main__":
    test_chunk_basic()
    test_chunks_start_at_question_boundaries()
    test_chunk_short_text()
    print("All chunker tests passed!")
