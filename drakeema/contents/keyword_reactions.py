"""Canned reactions to keyword patterns."""
from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Dict, List, Optional, Tuple

import yaml

from ..errors import InvalidScheduleConfig
from .base import compile_pattern


@dataclass(frozen=True)
class Keyword:
    pattern: re.Pattern
    reactions: Tuple[str, ...]


class KeywordReactions:
    """The first matching keyword picks a reaction by the current second."""

    def __init__(self, keywords: List[Keyword]) -> None:
        for keyword in keywords:
            if not keyword.reactions:
                raise InvalidScheduleConfig(
                    f"Keyword {keyword.pattern.pattern!r} has no reactions"
                )
        self.keywords = keywords

    @staticmethod
    def from_list(data: List[Dict]) -> "KeywordReactions":
        return KeywordReactions(
            [
                Keyword(compile_pattern(entry["regex"]), tuple(entry["reactions"]))
                for entry in data
            ]
        )

    @staticmethod
    def load(path: Path) -> "KeywordReactions":
        with Path(path).open("r", encoding="utf-8") as fh:
            data = yaml.safe_load(fh) or []
        if isinstance(data, dict):
            data = data.get("keywords", [])
        return KeywordReactions.from_list(data)

    def respond(self, now: datetime, text: str) -> Optional[str]:
        for keyword in self.keywords:
            if keyword.pattern.search(text):
                return keyword.reactions[now.second % len(keyword.reactions)]
        return None


__all__ = ["Keyword", "KeywordReactions"]
