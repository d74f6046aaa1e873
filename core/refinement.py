"""
Turns one chunk of raw document text into a batch of question objects by
asking the completion service, then repairing whatever JSON comes back.
"""
import logging
from typing import Callable, List

from core.completion_client import chat_completion
from core.config import AIConfig
from core.errors import CompletionError, QuizParseError, RefinementError
from core.json_repair import JSONRepairError, parse_model_json

log = logging.getLogger(__name__)

SYSTEM_PROMPT = """你是一个试题整理助手。用户会发送一段从文档中提取的题库文本，请把其中的题目转换为 JSON。

输出要求：
1. 只输出一个 JSON 数组。不要使用 markdown 代码块，不要输出任何说明文字。
2. 数组的每个元素是一个对象，包含以下字段：
   - "title": 字符串，题干
   - "type": 字符串，只能是 "单选题"、"多选题"、"判断题"、"简答题" 之一
   - "options": 数组，每项为 {"label": "A", "content": "选项内容"}；判断题和简答题为 []
   - "answer": 字符串。单选如 "A"，多选如 "ABC"，判断题只能是 "正确" 或 "错误"
   - "explanation": 字符串，解析；没有则为 ""

处理规则：
- 去掉题干开头的题号（如 "1."、"2、"）。
- 判断题题干末尾的 (√) 或 (×) 要去掉，并据此填写 answer。
- 所有字符串必须使用英文双引号 (")，不要使用中文引号；题干中的引号要转义。

示例：
[
  {"title": "HTML是什么？", "type": "单选题", "options": [{"label": "A", "content": "超文本标记语言"}, {"label": "B", "content": "编程语言"}], "answer": "A", "explanation": "基础概念"},
  {"title": "地球是平的", "type": "判断题", "options": [], "answer": "错误", "explanation": ""}
]"""

MAX_TOKENS = 4000

CompleteFn = Callable[..., str]


class RefinementClient:
    def __init__(self, config: AIConfig, complete: CompleteFn = chat_completion):
        """
        config: service settings, read but never modified
        complete: chat completion callable, replaceable in tests
        """
        self.config = config
        self.complete = complete

    @property
    def temperature(self) -> float:
        return 0.2 if self.config.is_reasoning_model else 0.1

    def refine(self, chunk: str) -> List[dict]:
        """
        Return the raw question objects for one chunk.
        Raises RefinementError on transport failure, unparseable output,
        or output that is not a JSON array.
        """
        messages = [
            {"role": "system", "content": SYSTEM_PROMPT},
            {"role": "user", "content": chunk},
        ]
        try:
            content = self.complete(
                messages,
                self.config,
                temperature=self.temperature,
                max_tokens=MAX_TOKENS,
            )
        except CompletionError as e:
            raise RefinementError(str(e)) from e
        except QuizParseError:
            raise
        except Exception as e:
            log.exception("Unexpected failure from completion call")
            raise RefinementError(f"Unexpected completion failure: {e}") from e

        if not isinstance(content, str):
            raise RefinementError(f"Completion returned a {type(content).__name__}, not text")

        if not content or not content.strip():
            raise RefinementError("Completion service returned empty content")

        try:
            batch = parse_model_json(content)
        except JSONRepairError as e:
            log.error("Unparseable model output: %r", content[:500])
            raise RefinementError(str(e)) from e

        if not isinstance(batch, list):
            raise RefinementError(f"Model output is a {type(batch).__name__}, not an array")
        return batch
