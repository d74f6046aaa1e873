"""
Practice-mode helpers: grade a user's answer against an extracted question
and ask the completion service to explain it.
"""
from typing import Optional

from core.completion_client import chat_completion
from core.config import AIConfig
from core.models import Question, QuestionType
from core.type_inference import canonical_judgment

TUTOR_PROMPT = "你是一位耐心、专业的辅导老师。请用通俗易懂的语言解析题目。"

CHOICE_TYPES = (QuestionType.SINGLE_CHOICE, QuestionType.MULTI_CHOICE)


def _letters(answer: str) -> set:
    return {c for c in answer.upper() if "A" <= c <= "F"}


def check_answer(question: Question, user_answer: str) -> tuple:
    """
    Returns (is_correct: bool, explanation: str)
    """
    user_answer = (user_answer or "").strip()
    correct = question.answer

    if question.type in CHOICE_TYPES:
        is_correct = bool(_letters(correct)) and _letters(user_answer) == _letters(correct)
    elif question.type == QuestionType.JUDGMENT:
        expected = canonical_judgment(correct)
        is_correct = expected is not None and canonical_judgment(user_answer) == expected
    else:
        is_correct = bool(correct) and user_answer == correct.strip()
    return is_correct, question.explanation


def build_explanation_prompt(question: Question, user_answer: Optional[str] = None) -> str:
    content = "请作为一名老师，为学生解析这道题。\n\n"
    content += f"题目：{question.title}\n"
    if question.options:
        content += "选项：\n" + "\n".join(f"{o.label}. {o.content}" for o in question.options) + "\n"
    content += f"\n标准答案：{question.answer}\n"
    content += f"用户回答：{user_answer or '未作答'}\n"
    content += "\n请给出详细的解析，解释知识点，并指出用户回答的对错之处（如果答错的话）。"
    return content


def explain_question(question: Question, user_answer: Optional[str], config: AIConfig) -> str:
    messages = [
        {"role": "system", "content": TUTOR_PROMPT},
        {"role": "user", "content": build_explanation_prompt(question, user_answer)},
    ]
    timeout = 300.0 if config.is_reasoning_model else 60.0
    reply = chat_completion(messages, config, temperature=0.3, max_tokens=1000, timeout=timeout)
    return reply
