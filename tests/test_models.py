"""Tests for question records and their JSON form."""
import json
import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from core.models import Option, QuestionDraft, QuestionType, questions_to_json


def test_build_trims_and_freezes():
    draft = QuestionDraft(title="  HTML是什么？ ", type=QuestionType.SINGLE_CHOICE, answer=" A ")
    draft.add_option("a", " 超文本标记语言 ")
    q = draft.build()
    assert q.title == "HTML是什么？"
    assert q.answer == "A"
    assert q.options == (Option("A", "超文本标记语言"),)


def test_json_output_uses_type_labels():
    q = QuestionDraft(title="地球是平的", type=QuestionType.JUDGMENT, answer="错误").build()
    data = json.loads(questions_to_json([q]))
    assert data == [{"title": "地球是平的", "type": "判断题", "options": [], "answer": "错误", "explanation": ""}]
