"""
Coerces loosely-shaped question objects from the refinement service into
Question records.
"""
import logging
import re
from typing import Iterable, List, Optional

from core import patterns
from core.models import Question, QuestionDraft, QuestionType
from core.type_inference import extract_judgment_answer, infer_question_type, normalize_answer

log = logging.getLogger(__name__)

TYPE_ALIASES = {
    "单选题": QuestionType.SINGLE_CHOICE,
    "单选": QuestionType.SINGLE_CHOICE,
    "single": QuestionType.SINGLE_CHOICE,
    "single_choice": QuestionType.SINGLE_CHOICE,
    "多选题": QuestionType.MULTI_CHOICE,
    "多选": QuestionType.MULTI_CHOICE,
    "multiple": QuestionType.MULTI_CHOICE,
    "multi_choice": QuestionType.MULTI_CHOICE,
    "判断题": QuestionType.JUDGMENT,
    "判断": QuestionType.JUDGMENT,
    "judgment": QuestionType.JUDGMENT,
    "true_false": QuestionType.JUDGMENT,
    "简答题": QuestionType.SHORT_ANSWER,
    "简答": QuestionType.SHORT_ANSWER,
    "short_answer": QuestionType.SHORT_ANSWER,
}

OPTION_LABEL_RE = re.compile(r"^[A-F]$")


def _text(value) -> str:
    if value is None:
        return ""
    if isinstance(value, list):
        return "".join(str(v) for v in value)
    return str(value).strip()


def _parse_type(value) -> QuestionType:
    key = _text(value).lower().replace("-", "_").replace(" ", "_")
    return TYPE_ALIASES.get(key, QuestionType.UNKNOWN)


def _add_options(draft: QuestionDraft, raw) -> None:
    if isinstance(raw, dict):
        raw = [{"label": k, "content": v} for k, v in raw.items()]
    if not isinstance(raw, list):
        return
    for item in raw:
        if not isinstance(item, dict):
            continue
        label = _text(item.get("label"))[:1].upper()
        if not OPTION_LABEL_RE.match(label):
            continue
        draft.add_option(label, _text(item.get("content")))


def coerce_question(raw) -> Optional[Question]:
    """Build a Question from one model-produced object, or None if unusable."""
    if not isinstance(raw, dict):
        log.warning("Skipping non-object item in model output: %r", raw)
        return None

    title = _text(raw.get("title"))
    if patterns.has_question_number(title):
        title = patterns.strip_question_number(title)
    _, title = patterns.match_type_label(title)

    draft = QuestionDraft(
        title=title,
        type=_parse_type(raw.get("type")),
        answer=_text(raw.get("answer")),
        explanation=_text(raw.get("explanation")),
    )
    _add_options(draft, raw.get("options"))

    infer_question_type(draft)
    normalize_answer(draft)
    if draft.type == QuestionType.JUDGMENT:
        extract_judgment_answer(draft)
        draft.title = patterns.strip_judgment_mark(draft.title)

    question = draft.build()
    if not question.title:
        log.warning("Skipping model item with empty title: %r", raw)
        return None
    return question


def normalize_batch(batch: Iterable) -> List[Question]:
    questions = []
    for raw in batch:
        question = coerce_question(raw)
        if question is not None:
            questions.append(question)
    return questions
