"""Placeholder substitution for announcement and response templates."""
from __future__ import annotations

import re
from typing import Any

_PLACEHOLDER = re.compile(r"__([A-Z0-9_]+?)__")


def render(template: str, **tokens: Any) -> str:
    """Replace ``__NAME__`` placeholders with the matching keyword argument.

    Keyword names are upper-cased, so ``render(t, title="x")`` fills
    ``__TITLE__``. Placeholders without a matching token are left untouched.
    """

    values = {key.upper(): str(value) for key, value in tokens.items()}

    def _substitute(match: re.Match) -> str:
        return values.get(match.group(1), match.group(0))

    return _PLACEHOLDER.sub(_substitute, template)


__all__ = ["render"]
