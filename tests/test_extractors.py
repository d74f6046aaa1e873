"""Tests for the extraction strategies."""
import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest

from core.config import AIConfig
from core.errors import CompletionError, ConfigError, EmptyInputError
from core.extractors import (
    AIExtractor,
    FallbackExtractor,
    HeuristicExtractor,
    extract_questions,
    get_extractor,
)
from core.models import QuestionType
from core.orchestrator import ChunkOrchestrator
from core.refinement import RefinementClient

TEXT = "1. HTML是什么？\nA. 超文本标记语言\nB. 编程语言\n答案：A"


class StaticClient:
    def __init__(self, batch):
        self.batch = batch

    def refine(self, chunk):
        return self.batch


def _ai(batch, api_key="sk-test"):
    config = AIConfig(api_key=api_key)
    orchestrator = ChunkOrchestrator(StaticClient(batch), retry_delay=0, chunk_delay=0)
    return AIExtractor(config, orchestrator=orchestrator)


def test_heuristic_extractor_reports_progress():
    progress = []
    questions = HeuristicExtractor().extract(TEXT, lambda p, m: progress.append(p))
    assert [q.answer for q in questions] == ["A"]
    assert progress == [0, 100]


def test_ai_extractor_uses_orchestrator():
    questions = _ai([{"title": "由模型整理", "type": "简答题", "answer": "答"}]).extract(TEXT)
    assert [(q.title, q.type) for q in questions] == [("由模型整理", QuestionType.SHORT_ANSWER)]


def test_ai_extractor_requires_api_key():
    with pytest.raises(ConfigError):
        _ai([], api_key="").extract(TEXT)


def test_fallback_on_missing_key():
    extractor = FallbackExtractor(_ai([], api_key=""), HeuristicExtractor())
    questions = extractor.extract(TEXT)
    assert [q.title for q in questions] == ["HTML是什么？"]


def test_fallback_on_empty_result():
    extractor = FallbackExtractor(_ai([]), HeuristicExtractor())
    progress = []
    questions = extractor.extract(TEXT, lambda p, m: progress.append(p))
    assert len(questions) == 1
    assert progress == sorted(progress)


def test_fallback_when_every_chunk_failed():
    def rejected(messages, config, temperature, max_tokens):
        raise CompletionError("API request failed (401)")

    config = AIConfig(api_key="sk-test")
    orchestrator = ChunkOrchestrator(
        RefinementClient(config, complete=rejected), retry_delay=0, chunk_delay=0, sleep=lambda s: None
    )
    extractor = FallbackExtractor(AIExtractor(config, orchestrator=orchestrator), HeuristicExtractor())
    progress = []
    questions = extractor.extract(TEXT, lambda p, m: progress.append(p))
    assert [q.title for q in questions] == ["HTML是什么？"]
    assert progress == sorted(progress)


def test_primary_result_is_kept():
    extractor = FallbackExtractor(_ai([{"title": "模型题", "answer": "对"}]), HeuristicExtractor())
    [q] = extractor.extract(TEXT)
    assert (q.title, q.type, q.answer) == ("模型题", QuestionType.JUDGMENT, "正确")


def test_empty_input_is_not_retried_by_fallback():
    with pytest.raises(EmptyInputError):
        FallbackExtractor(_ai([]), HeuristicExtractor()).extract("  ")


def test_get_extractor_by_name():
    config = AIConfig(api_key="k")
    assert isinstance(get_extractor("heuristic"), HeuristicExtractor)
    assert isinstance(get_extractor("ai", config), AIExtractor)
    assert isinstance(get_extractor("auto", config), FallbackExtractor)
    with pytest.raises(ValueError):
        get_extractor("magic", config)


def test_extract_questions_defaults_to_rules():
    [q] = extract_questions(TEXT)
    assert q.type == QuestionType.SINGLE_CHOICE
