"""
Question records produced by both extraction paths.
"""
import json
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Tuple


class QuestionType(str, Enum):
    """Question kinds, valued by the labels the rest of the system stores."""
    SINGLE_CHOICE = "单选题"
    MULTI_CHOICE = "多选题"
    JUDGMENT = "判断题"
    SHORT_ANSWER = "简答题"
    UNKNOWN = "未知"


# Types whose questions never carry options
OPTIONLESS_TYPES = (QuestionType.JUDGMENT, QuestionType.SHORT_ANSWER)

ANSWER_TRUE = "正确"
ANSWER_FALSE = "错误"


@dataclass(frozen=True)
class Option:
    label: str      # single uppercase letter A-F
    content: str

    def to_dict(self) -> dict:
        return {"label": self.label, "content": self.content}


@dataclass(frozen=True)
class Question:
    """A finished question. Created once by the path that extracted it."""
    title: str
    type: QuestionType
    options: Tuple[Option, ...] = ()
    answer: str = ""
    explanation: str = ""

    def to_dict(self) -> dict:
        return {
            "title": self.title,
            "type": self.type.value,
            "options": [o.to_dict() for o in self.options],
            "answer": self.answer,
            "explanation": self.explanation,
        }


@dataclass
class QuestionDraft:
    """Mutable question under construction, owned by a single parser run."""
    title: str = ""
    type: QuestionType = QuestionType.UNKNOWN
    options: List[Option] = field(default_factory=list)
    answer: str = ""
    explanation: str = ""

    def add_option(self, label: str, content: str) -> None:
        """
        Append an option. A repeated label extends the existing option
        instead of creating a second one, so labels stay unique.
        """
        label = label.upper()
        content = content.strip()
        for i, existing in enumerate(self.options):
            if existing.label == label:
                merged = f"{existing.content} {content}".strip()
                self.options[i] = Option(label=label, content=merged)
                return
        self.options.append(Option(label=label, content=content))

    def build(self) -> Question:
        options = () if self.type in OPTIONLESS_TYPES else tuple(self.options)
        return Question(
            title=self.title.strip(),
            type=self.type,
            options=options,
            answer=(self.answer or "").strip(),
            explanation=(self.explanation or "").strip(),
        )


def questions_to_json(questions: List[Question], indent: int = 2) -> str:
    """Serialize an ordered question list for the persistence layer."""
    return json.dumps([q.to_dict() for q in questions], ensure_ascii=False, indent=indent)
