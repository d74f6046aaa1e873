"""
Interchangeable extraction strategies: rule-based, AI-assisted, and an
AI-first combination that falls back to the rules.
"""
import logging
from abc import ABC, abstractmethod
from typing import List, Optional

from core.config import AIConfig, load_config
from core.errors import EmptyInputError, QuizParseError
from core.heuristic_parser import parse_text
from core.models import Question
from core.orchestrator import ChunkOrchestrator, ChunkRun, ProgressFn
from core.refinement import RefinementClient

log = logging.getLogger(__name__)


class QuestionExtractor(ABC):
    name = "base"

    @abstractmethod
    def extract(self, text: str, on_progress: Optional[ProgressFn] = None) -> List[Question]:
        """Return the questions found in text, in document order."""

    def extract_detailed(self, text: str, on_progress: Optional[ProgressFn] = None) -> ChunkRun:
        """Like extract, with a count of degraded chunks for strategies that chunk."""
        return ChunkRun(questions=self.extract(text, on_progress))


class HeuristicExtractor(QuestionExtractor):
    name = "heuristic"

    def extract(self, text, on_progress=None):
        if on_progress:
            on_progress(0, "正在按规则解析题目...")
        questions = parse_text(text)
        if on_progress:
            on_progress(100, f"解析完成，共 {len(questions)} 道题")
        return questions


class AIExtractor(QuestionExtractor):
    name = "ai"

    def __init__(
        self,
        config: AIConfig,
        orchestrator: Optional[ChunkOrchestrator] = None,
        low: int = 0,
        high: int = 100,
    ):
        self.config = config
        self.orchestrator = orchestrator or ChunkOrchestrator(
            RefinementClient(config), chunk_size=config.chunk_size
        )
        self.low = low
        self.high = high

    def extract(self, text, on_progress=None):
        return self.extract_detailed(text, on_progress).questions

    def extract_detailed(self, text, on_progress=None):
        if not text or not text.strip():
            raise EmptyInputError("Document text is empty.")
        self.config.require_api_key()
        return self.orchestrator.run_detailed(text, on_progress, low=self.low, high=self.high)


def _monotonic(on_progress: Optional[ProgressFn]) -> Optional[ProgressFn]:
    """Wrap a progress callback so the reported percent never goes backwards."""
    if on_progress is None:
        return None
    highest = [0]

    def report(percent: int, message: str) -> None:
        highest[0] = max(highest[0], percent)
        on_progress(highest[0], message)

    return report


class FallbackExtractor(QuestionExtractor):
    name = "auto"

    def __init__(self, primary: QuestionExtractor, fallback: QuestionExtractor):
        self.primary = primary
        self.fallback = fallback

    def extract(self, text, on_progress=None):
        on_progress = _monotonic(on_progress)
        try:
            run = self.primary.extract_detailed(text, on_progress)
        except EmptyInputError:
            raise
        except QuizParseError as e:
            log.warning("%s extractor failed (%s), falling back to %s",
                        self.primary.name, e, self.fallback.name)
        else:
            if run.all_failed:
                log.warning("%s extractor failed on all %d chunks, falling back to %s",
                            self.primary.name, run.total_chunks, self.fallback.name)
            elif run.questions:
                return run.questions
            else:
                log.warning("%s extractor found no questions, falling back to %s",
                            self.primary.name, self.fallback.name)
        return self.fallback.extract(text, on_progress)


def get_extractor(strategy: str = "heuristic", config: Optional[AIConfig] = None) -> QuestionExtractor:
    """
    strategy: 'heuristic', 'ai', or 'auto' (AI first, rules as fallback)
    """
    if strategy == "heuristic":
        return HeuristicExtractor()
    config = config or load_config()
    if strategy == "ai":
        return AIExtractor(config)
    elif strategy == "auto":
        return FallbackExtractor(AIExtractor(config), HeuristicExtractor())
    else:
        raise ValueError(f"Unsupported extraction strategy: {strategy}")


def extract_questions(
    text: str,
    strategy: str = "heuristic",
    on_progress: Optional[ProgressFn] = None,
    config: Optional[AIConfig] = None,
) -> List[Question]:
    return get_extractor(strategy, config).extract(text, on_progress)
