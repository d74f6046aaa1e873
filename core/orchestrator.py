"""
Runs the AI path over a whole document: chunk, refine each chunk in order
with one retry, degrade failed chunks to placeholder questions, and report
progress along the way.
"""
import logging
import time
from dataclasses import dataclass, field
from typing import Callable, List, Optional

from core.chunker import DEFAULT_CHUNK_SIZE, chunk_text
from core.errors import EmptyInputError, QuizParseError, RefinementError
from core.models import Question, QuestionType
from core.normalize import normalize_batch
from core.refinement import RefinementClient

log = logging.getLogger(__name__)

ProgressFn = Callable[[int, str], None]

RETRY_DELAY = 2.0
CHUNK_DELAY = 0.8

FAILED_TITLE_PREFIX = "【解析失败片段】"
FAILED_ANSWER_PREFIX = "AI 解析失败，请手动检查原始内容：\n"
FAILED_EXPLANATION = "系统错误"


def failed_chunk_question(chunk: str) -> Question:
    """Placeholder that keeps the text of a chunk the service could not handle."""
    return Question(
        title=f"{FAILED_TITLE_PREFIX}{chunk.strip()[:50]}...",
        type=QuestionType.SHORT_ANSWER,
        answer=FAILED_ANSWER_PREFIX + chunk,
        explanation=FAILED_EXPLANATION,
    )


@dataclass
class ChunkRun:
    total_chunks: int = 0
    failed_chunks: int = 0
    questions: List[Question] = field(default_factory=list)

    @property
    def all_failed(self) -> bool:
        return self.total_chunks > 0 and self.failed_chunks == self.total_chunks


class ChunkOrchestrator:
    def __init__(
        self,
        client: RefinementClient,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        retry_delay: float = RETRY_DELAY,
        chunk_delay: float = CHUNK_DELAY,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.client = client
        self.chunk_size = chunk_size
        self.retry_delay = retry_delay
        self.chunk_delay = chunk_delay
        self.sleep = sleep

    def run(
        self,
        text: str,
        on_progress: Optional[ProgressFn] = None,
        low: int = 0,
        high: int = 100,
    ) -> List[Question]:
        """Extract questions from the whole document, chunk by chunk."""
        return self.run_detailed(text, on_progress, low=low, high=high).questions

    def run_detailed(
        self,
        text: str,
        on_progress: Optional[ProgressFn] = None,
        low: int = 0,
        high: int = 100,
    ) -> ChunkRun:
        """
        Like run, but also reports how many chunks were degraded.
        Progress is reported within [low, high]. Only empty input raises.
        """
        if not text or not text.strip():
            raise EmptyInputError("Document text is empty.")

        def report(fraction: float, message: str) -> None:
            if on_progress:
                on_progress(low + round((high - low) * fraction), message)

        chunks = chunk_text(text, self.chunk_size)
        total = len(chunks)
        log.info("Split document into %d chunks (target %d chars)", total, self.chunk_size)

        result = ChunkRun(total_chunks=total)
        questions = result.questions
        for i, chunk in enumerate(chunks):
            report(i / total, f"正在 AI 深度解析第 {i + 1}/{total} 部分...")

            try:
                parsed = self._process_chunk(chunk, i, total, report)
            except RefinementError as e:
                log.error("Chunk %d/%d failed after retry: %s", i + 1, total, e)
                questions.append(failed_chunk_question(chunk))
                result.failed_chunks += 1
                report((i + 1) / total, f"第 {i + 1}/{total} 部分解析失败，已保留原文")
            else:
                questions.extend(parsed)
                report((i + 1) / total, f"第 {i + 1}/{total} 部分完成，识别 {len(parsed)} 道题")

            if i < total - 1:
                self.sleep(self.chunk_delay)

        report(1.0, "所有题目解析完成")
        log.info("AI path extracted %d questions from %d chunks (%d failed)",
                 len(questions), total, result.failed_chunks)
        return result

    def _process_chunk(self, chunk: str, index: int, total: int, report) -> List[Question]:
        batch = self._refine_with_retry(chunk, index, total, report)
        try:
            return normalize_batch(batch)
        except Exception as e:
            log.exception("Could not normalize model output for chunk %d/%d", index + 1, total)
            raise RefinementError(f"Could not normalize model output: {e}") from e

    def _refine_once(self, chunk: str) -> List[dict]:
        try:
            return self.client.refine(chunk)
        except QuizParseError:
            raise
        except Exception as e:
            log.exception("Unexpected failure while refining a chunk")
            raise RefinementError(f"Unexpected refinement failure: {e}") from e

    def _refine_with_retry(self, chunk: str, index: int, total: int, report) -> List[dict]:
        try:
            return self._refine_once(chunk)
        except RefinementError as e:
            log.warning("Chunk %d/%d failed (%s), retrying...", index + 1, total, e)
            report(index / total, f"第 {index + 1}/{total} 部分解析失败，正在重试...")
            self.sleep(self.retry_delay)
        return self._refine_once(chunk)
