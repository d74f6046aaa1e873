"""
Rule-based question extraction: a line-by-line finite state machine over
the recognizers in core.patterns.

Each line is classified as exactly one of noise, answer, option, the start
of a new question, or a continuation of the current title. Nothing here
raises on malformed input; unrecognized lines become continuations.
"""
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, List, Optional

from core import patterns
from core.errors import EmptyInputError
from core.models import Question, QuestionDraft, QuestionType
from core.type_inference import extract_judgment_answer, infer_question_type, normalize_answer

log = logging.getLogger(__name__)


class LineState(Enum):
    QUESTION = "QUESTION"
    OPTION = "OPTION"
    ANSWER = "ANSWER"
    UNKNOWN = "UNKNOWN"


class LineKind(Enum):
    NOISE = "noise"
    ANSWER = "answer"
    OPTION = "option"
    NEW_QUESTION = "new_question"
    CONTINUATION = "continuation"


@dataclass
class ParserState:
    last: LineState = LineState.UNKNOWN
    current: Optional[QuestionDraft] = None
    last_had_mark: bool = False
    questions: List[Question] = field(default_factory=list)


def classify_line(state: ParserState, line: str) -> LineKind:
    """Decide what a line is, given the state left by the previous lines."""
    if patterns.is_section_heading(line):
        return LineKind.NOISE
    if patterns.match_answer(line) is not None:
        return LineKind.ANSWER
    if patterns.is_option_line(line):
        return LineKind.OPTION

    starts_new = (
        patterns.has_question_number(line)
        or state.last == LineState.ANSWER
        or (patterns.has_judgment_mark(line) and state.last_had_mark)
        or state.current is None
    )
    return LineKind.NEW_QUESTION if starts_new else LineKind.CONTINUATION


def finalize(state: ParserState) -> None:
    """Type, clean and emit the question under construction, if any."""
    q = state.current
    state.current = None
    if q is None:
        return

    infer_question_type(q)
    normalize_answer(q)
    extract_judgment_answer(q)
    question = q.build()
    if not question.title:
        log.warning("Dropping question with empty title (answer=%r)", question.answer)
        return
    state.questions.append(question)


def _start_question(line: str) -> QuestionDraft:
    title = patterns.strip_question_number(line) if patterns.has_question_number(line) else line
    qtype, title = patterns.match_type_label(title)
    if qtype is None:
        qtype = QuestionType.JUDGMENT if patterns.has_judgment_mark(line) else QuestionType.UNKNOWN
    return QuestionDraft(title=title, type=qtype)


def feed_line(state: ParserState, line: str) -> LineKind:
    """Apply one trimmed, non-empty line to the state. Returns its classification."""
    kind = classify_line(state, line)

    if kind == LineKind.NOISE:
        return kind

    if kind == LineKind.ANSWER:
        if state.current is not None:
            state.current.answer = patterns.match_answer(line)
        state.last = LineState.ANSWER
        state.last_had_mark = False
        return kind

    if kind == LineKind.OPTION:
        if state.current is not None:
            for label, content in patterns.split_options(line):
                state.current.add_option(label, content)
        else:
            log.debug("Option line before any question: %r", line)
        state.last = LineState.OPTION
        state.last_had_mark = False
        return kind

    has_mark = patterns.has_judgment_mark(line)

    if kind == LineKind.NEW_QUESTION:
        finalize(state)
        state.current = _start_question(line)
        state.last = LineState.QUESTION
        state.last_had_mark = has_mark
        return kind

    # continuation of the current title
    state.current.title = f"{state.current.title} {line}".strip()
    if has_mark:
        state.current.type = QuestionType.JUDGMENT
    state.last_had_mark = has_mark
    return kind


def parse_lines(lines: Iterable[str]) -> List[Question]:
    state = ParserState()
    for line in lines:
        feed_line(state, line)
    finalize(state)
    return state.questions


def split_lines(text: str) -> List[str]:
    return [line.strip() for line in text.split("\n") if line.strip()]


def parse_text(text: str) -> List[Question]:
    """Extract questions from a whole document using the line rules."""
    if not text or not text.strip():
        raise EmptyInputError("Document text is empty.")
    questions = parse_lines(split_lines(text))
    log.info("Rule parser extracted %d questions", len(questions))
    return questions
