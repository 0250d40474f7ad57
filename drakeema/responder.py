"""Turn incoming statuses into replies."""
from __future__ import annotations

import html
import logging
import re
from dataclasses import dataclass
from datetime import datetime
from typing import Any, List, Mapping, Optional, Sequence

from .config import Settings
from .contents import FeatureSet
from .contents.base import Responder
from .contents.keyword_reactions import KeywordReactions
from .errors import ScheduleError

logger = logging.getLogger(__name__)

_TAG_P = re.compile(r"</?[pP][^>]*>")
_TAG_BR = re.compile(r"<br\s*/?>", re.IGNORECASE)
_TAG_OTHER = re.compile(r"</?[^>]+>")


def strip_tags(content: str) -> str:
    """Plain text of a status body; paragraphs and line breaks become newlines."""

    text = _TAG_P.sub("\n", content)
    text = _TAG_BR.sub("\n", text)
    text = _TAG_OTHER.sub("", text)
    return html.unescape(text).strip()


@dataclass(frozen=True)
class Reply:
    text: str
    visibility: str = "public"
    mention: Optional[str] = None
    in_reply_to_id: Optional[Any] = None


class MentionResponder:
    """Answer statuses that call the bot by name.

    "Tell me" requests collect every feature's answer, healthchecks get a canned
    response, and anything else falls through to keyword reactions.
    """

    def __init__(
        self,
        responders: Sequence[Responder],
        reactions: KeywordReactions,
        mention_pattern: str,
        ask_pattern: str,
        healthcheck_pattern: str,
        healthcheck_responses: Sequence[str],
        unknown_response: str = "？",
        ignore_accounts: Sequence[str] = (),
    ) -> None:
        if not healthcheck_responses:
            raise ValueError("At least one healthcheck response is required")
        self.responders = list(responders)
        self.reactions = reactions
        self.mention_pattern = re.compile(mention_pattern)
        self.ask_pattern = re.compile(ask_pattern)
        self.healthcheck_pattern = re.compile(healthcheck_pattern)
        self.healthcheck_responses = list(healthcheck_responses)
        self.unknown_response = unknown_response
        self.ignore_accounts = [re.compile(pattern) for pattern in ignore_accounts]

    @staticmethod
    def from_settings(settings: Settings, features: FeatureSet) -> "MentionResponder":
        return MentionResponder(
            features.responders,
            features.reactions,
            settings.mention_pattern,
            settings.ask_pattern,
            settings.healthcheck_pattern,
            settings.healthcheck_responses,
            settings.unknown_response,
            settings.ignore_accounts,
        )

    def is_ignored(self, acct: str) -> bool:
        return any(pattern.search(acct) for pattern in self.ignore_accounts)

    def answer(self, now: datetime, text: str) -> str:
        answers: List[str] = []
        for responder in self.responders:
            try:
                answer = responder.respond(now, text)
            except ScheduleError:
                logger.exception("Skipping response from %s", type(responder).__name__)
                continue
            if answer:
                answers.append(answer)
        return "\n".join(answers) or self.unknown_response

    def process(self, status: Mapping[str, Any], now: datetime) -> Optional[Reply]:
        content = status.get("content")
        if not content:
            return None
        account = status["account"]
        acct = account["acct"]
        if self.is_ignored(acct):
            logger.info("Ignore status: acct: %s", acct)
            return None

        text = strip_tags(content)
        visibility = status.get("visibility") or "public"
        in_reply_to_id = status.get("id")
        called = self.mention_pattern.search(text) is not None

        if called and self.ask_pattern.search(text):
            logger.info("Text matched keywords of a question: %s", text)
            # Local public questions are answered in the open timeline.
            if "@" not in acct and visibility == "public":
                in_reply_to_id = None
            body: Optional[str] = self.answer(now, text)
        elif called and self.healthcheck_pattern.search(text):
            logger.info("Text matched keywords of healthcheck: %s", text)
            body = self.healthcheck_responses[now.second % len(self.healthcheck_responses)]
        else:
            body = self.reactions.respond(now, text)

        if not body:
            return None
        return Reply(text=body, visibility=visibility, mention=acct, in_reply_to_id=in_reply_to_id)


__all__ = ["MentionResponder", "Reply", "strip_tags"]
