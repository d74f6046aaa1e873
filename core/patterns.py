"""
Line recognizers for question banks: question numbers, options, answers,
judgment marks, section headings and type labels.

Every function takes a single trimmed line and keeps no state.
"""
import re
from typing import List, Optional, Tuple

from core.models import QuestionType

# Bullet glyphs that may precede an option letter ("• A. xxx", "o B xxx")
BULLETS = "o•·*◦▪▫■□●○◆◇★☆"

# 1. / 1、 / 1) / 1） / "1 xxx"
QUESTION_NUMBER_RE = re.compile(r"^(\d+)[.、\)）\s]")

# Stricter form used when choosing chunk boundaries: whitespace does not count
QUESTION_START_RE = re.compile(r"^(\d+)[.、\)）]")

OPTION_START_RE = re.compile(rf"^(?:[{BULLETS}]\s*)?([A-F])[.、\)）:：\s]", re.IGNORECASE)
OPTION_MARKER_RE = re.compile(rf"(?:^|\s)(?:[{BULLETS}]\s*)?([A-F])([.、\)）:：\s])", re.IGNORECASE)
OPTION_PREFIX_RE = re.compile(rf"^(?:[{BULLETS}]\s*)?[A-F][.、\)）:：\s]+", re.IGNORECASE)

ANSWER_RE = re.compile(r"^(?:正确答案|答案|Answer(?![A-Za-z])|答)[:：\s]*(.*)$", re.IGNORECASE)

# Trailing (√) / （×） / (T) ...
JUDGMENT_MARK_RE = re.compile(r"[\(（]\s*([√×✓✗TFtf对错是否YyNn])\s*[\)）]\s*$")
TRUE_MARKS = "√✓TtYy对是"

SECTION_HEADING_RE = re.compile(
    r"^(?:第[一二三四五六七八九十百\d]+章|[一二三四五六七八九十]+、|第[一二三四五六七八九十\d]+节)"
)

TYPE_LABELS = [
    (QuestionType.JUDGMENT, re.compile(r"^(?:判断题|判断|是非题)[：:、\s]*")),
    (QuestionType.MULTI_CHOICE, re.compile(r"^(?:多选题|多选|多项选择题)[：:、\s]*")),
    (QuestionType.SINGLE_CHOICE, re.compile(r"^(?:单选题|单选|选择题)[：:、\s]*")),
    (QuestionType.SHORT_ANSWER, re.compile(r"^(?:简答题|问答题|填空题)[：:、\s]*")),
]


def has_question_number(line: str) -> bool:
    return QUESTION_NUMBER_RE.match(line) is not None


def strip_question_number(line: str) -> str:
    return QUESTION_NUMBER_RE.sub("", line, count=1).strip()


def looks_like_question_start(line: str) -> bool:
    return QUESTION_START_RE.match(line.strip()) is not None


def is_option_line(line: str) -> bool:
    return OPTION_START_RE.match(line) is not None


def split_options(line: str) -> List[Tuple[str, str]]:
    """
    Split an option line into (label, content) pairs, one per marker.

    "A. 红 B. 蓝 C. 绿" -> [("A", "红"), ("B", "蓝"), ("C", "绿")]

    A marker after the first must either use an uppercase letter or a
    punctuation separator; a lowercase letter followed by a space ("a cat")
    stays part of the previous option's text.
    """
    markers = []
    for m in OPTION_MARKER_RE.finditer(line):
        if markers and m.group(1).islower() and m.group(2).isspace():
            continue
        markers.append(m)

    if not markers:
        return []

    pairs = []
    for i, m in enumerate(markers):
        end = markers[i + 1].start() if i + 1 < len(markers) else len(line)
        segment = line[m.start():end].strip()
        content = OPTION_PREFIX_RE.sub("", segment, count=1).strip()
        pairs.append((m.group(1).upper(), content))
    return pairs


def match_answer(line: str) -> Optional[str]:
    """Return the raw answer text of an answer line, or None."""
    m = ANSWER_RE.match(line)
    if m is None:
        return None
    return m.group(1).strip()


def judgment_mark(text: str) -> Optional[str]:
    """Return the symbol of a trailing judgment mark, or None."""
    m = JUDGMENT_MARK_RE.search(text)
    return m.group(1) if m else None


def has_judgment_mark(text: str) -> bool:
    return JUDGMENT_MARK_RE.search(text) is not None


def strip_judgment_mark(text: str) -> str:
    return JUDGMENT_MARK_RE.sub("", text).strip()


def mark_is_true(symbol: str) -> bool:
    return symbol in TRUE_MARKS


def is_section_heading(line: str) -> bool:
    return SECTION_HEADING_RE.match(line) is not None


def match_type_label(title: str) -> Tuple[Optional[QuestionType], str]:
    """
    Detect an explicit type label at the start of a title.
    Returns (type, title without the label); type is None when absent.
    """
    for qtype, pattern in TYPE_LABELS:
        if pattern.match(title):
            return qtype, pattern.sub("", title, count=1)
    return None, title
