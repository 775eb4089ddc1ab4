"""
Prompt templates and response parsing for article summaries.
"""
from __future__ import annotations

import json
import re
from dataclasses import dataclass, field
from typing import List

from ainews.models import SENTIMENTS, Language

DEFAULT_MAX_LENGTH = 4000
MAX_KEY_POINTS = 3

SYSTEM_PROMPT_JA = """あなたはAI・テクノロジーニュースの専門家です。
与えられた記事を分析し、以下の形式でJSON形式で要約を返してください。

必ず以下のJSON形式で返答してください：
{
  "summary": "記事の要約（2-3文）",
  "keyPoints": ["重要ポイント1", "重要ポイント2", "重要ポイント3"],
  "category": "カテゴリ（AI/ML/LLM/Robotics/Other）",
  "sentiment": "positive/negative/neutral"
}

注意事項：
- 要約は簡潔かつ正確に
- 技術的な内容は平易な言葉で説明
- 重要ポイントは3つまで
- JSONのみを返し、他の文章は含めない"""

SYSTEM_PROMPT_EN = """You are an AI and technology news expert.
Analyze the given article and return a summary in the following JSON format.

You must respond with only the following JSON format:
{
  "summary": "Article summary (2-3 sentences)",
  "keyPoints": ["Key point 1", "Key point 2", "Key point 3"],
  "category": "Category (AI/ML/LLM/Robotics/Other)",
  "sentiment": "positive/negative/neutral"
}

Guidelines:
- Keep summaries concise and accurate
- Explain technical content in plain language
- Maximum 3 key points
- Return only JSON, no additional text"""

_FENCED_BLOCK = re.compile(r"```(?:json)?\s*([\s\S]*?)```")
_JSON_OBJECT = re.compile(r"\{[\s\S]*\}")


class SummaryParseError(ValueError):
    pass


@dataclass
class ParsedSummary:
    summary: str
    key_points: List[str] = field(default_factory=list)
    category: str = "Other"
    sentiment: str = "neutral"


def get_system_prompt(language: Language) -> str:
    return SYSTEM_PROMPT_JA if Language(language) == Language.JA else SYSTEM_PROMPT_EN


def create_user_prompt(title: str, content: str, language: Language, max_length: int = DEFAULT_MAX_LENGTH) -> str:
    truncated = content[:max_length] + "..." if len(content) > max_length else content
    if Language(language) == Language.JA:
        return f"以下の記事を要約してください。\n\nタイトル: {title}\n\n本文:\n{truncated}"
    return f"Please summarize the following article.\n\nTitle: {title}\n\nContent:\n{truncated}"


def parse_summary_response(response: str) -> ParsedSummary:
    """
    Accepts either a ```json fenced block or a bare object somewhere in the text.
    Only `summary` is mandatory; other fields fall back to defaults.
    """
    text = response
    fenced = _FENCED_BLOCK.search(response)
    if fenced:
        text = fenced.group(1).strip()

    match = _JSON_OBJECT.search(text)
    if not match:
        raise SummaryParseError("No JSON object found in response")
    try:
        parsed = json.loads(match.group(0))
    except json.JSONDecodeError as exc:
        raise SummaryParseError(f"Invalid JSON in response: {exc}") from exc
    if not isinstance(parsed, dict):
        raise SummaryParseError("Response JSON is not an object")

    summary = parsed.get("summary")
    if not summary or not isinstance(summary, str):
        raise SummaryParseError("Invalid summary field")

    key_points = parsed.get("keyPoints")
    if not isinstance(key_points, list):
        key_points = []

    category = parsed.get("category")
    if not category or not isinstance(category, str):
        category = "Other"

    sentiment = parsed.get("sentiment")
    if sentiment not in SENTIMENTS:
        sentiment = "neutral"

    return ParsedSummary(
        summary=summary,
        key_points=[str(point) for point in key_points[:MAX_KEY_POINTS]],
        category=category,
        sentiment=sentiment,
    )
