"""
Decides the final type of a question and normalizes its answer.
Shared by the heuristic parser and the refinement normalizer.
"""
import re
from typing import Optional

from core import patterns
from core.models import ANSWER_FALSE, ANSWER_TRUE, QuestionDraft, QuestionType

JUDGMENT_SYMBOL_RE = re.compile(r"^[√×✓✗]$")
JUDGMENT_WORD_RE = re.compile(r"^(?:正确|错误|对|错|是|否|T|F|True|False)$", re.IGNORECASE)
TRUE_ANSWER_RE = re.compile(r"^(?:√|✓|正确|对|是|T|True)$", re.IGNORECASE)

MULTI_LETTERS_RE = re.compile(r"^[A-F]{2,}$", re.IGNORECASE)
SINGLE_LETTER_RE = re.compile(r"^[A-F]$", re.IGNORECASE)

# Answers longer than this read as free text
SHORT_TEXT_LIMIT = 10


def canonical_judgment(answer: str) -> Optional[str]:
    """Map a judgment answer onto 正确/错误, or None if it is not one."""
    ans = (answer or "").strip()
    if not (JUDGMENT_SYMBOL_RE.match(ans) or JUDGMENT_WORD_RE.match(ans)):
        return None
    return ANSWER_TRUE if TRUE_ANSWER_RE.match(ans) else ANSWER_FALSE


def infer_question_type(q: QuestionDraft) -> None:
    """Resolve q.type from its answer and options unless a type is already set."""
    if q.type != QuestionType.UNKNOWN:
        return

    ans = q.answer or ""

    judgment = canonical_judgment(ans)
    if judgment is not None:
        q.type = QuestionType.JUDGMENT
        q.answer = judgment
        return

    if MULTI_LETTERS_RE.match(ans):
        q.type = QuestionType.MULTI_CHOICE
        q.answer = ans.upper()
        return

    if SINGLE_LETTER_RE.match(ans):
        q.type = QuestionType.SINGLE_CHOICE
        q.answer = ans.upper()
        return

    if len(ans) > SHORT_TEXT_LIMIT or (not q.options and ans):
        q.type = QuestionType.SHORT_ANSWER
        return

    q.type = QuestionType.SINGLE_CHOICE if q.options else QuestionType.SHORT_ANSWER


def normalize_answer(q: QuestionDraft) -> None:
    """Bring an explicitly typed question's answer into its canonical form."""
    if q.type == QuestionType.JUDGMENT:
        q.answer = canonical_judgment(q.answer) or q.answer
    elif q.type in (QuestionType.SINGLE_CHOICE, QuestionType.MULTI_CHOICE):
        q.answer = (q.answer or "").upper()


def extract_judgment_answer(q: QuestionDraft) -> None:
    """
    For a judgment question without an answer, take the answer from a
    trailing mark on the title ("地球是平的(×)") and strip the mark.
    """
    if q.type != QuestionType.JUDGMENT or q.answer:
        return

    symbol = patterns.judgment_mark(q.title)
    if symbol is None:
        return
    q.answer = ANSWER_TRUE if patterns.mark_is_true(symbol) else ANSWER_FALSE
    q.title = patterns.strip_judgment_mark(q.title)
