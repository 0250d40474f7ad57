"""Content features and their assembly from the data directory."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import tzinfo
from pathlib import Path
from typing import List, Optional

from ..catalog import ContentCatalog
from .base import Announcer, Responder
from .calendar_events import DayOfMonthEvents, TermResets, WeeklyResets
from .defense_force import DefenseForce
from .evil_palace import EvilPalace
from .guardian_trials import GuardianTrials
from .keyword_reactions import KeywordReactions
from .monster_lookup import MonsterLookup
from .source_vault import SourceVault
from .twilight_vault import TwilightVault

logger = logging.getLogger(__name__)

DEFAULT_CONTENTS_DIR = Path(__file__).resolve().parent.parent / "data" / "contents"


@dataclass
class FeatureSet:
    """Announcers in posting order, responders in reply order, and the fallback reactions."""

    announcers: List[Announcer] = field(default_factory=list)
    responders: List[Responder] = field(default_factory=list)
    reactions: KeywordReactions = field(default_factory=lambda: KeywordReactions([]))


def build_features(
    catalog: ContentCatalog,
    contents_dir: Optional[Path] = None,
    tz: Optional[tzinfo] = None,
) -> FeatureSet:
    directory = Path(contents_dir) if contents_dir is not None else DEFAULT_CONTENTS_DIR
    logger.info("Loading content features from %s", directory)

    special_days = DayOfMonthEvents.load(directory / "special_days.yaml")
    term_resets = TermResets.load(directory / "term_resets.yaml")
    weekly_resets = WeeklyResets.load(directory / "weekly_resets.yaml")
    guardian_trials = GuardianTrials.load(directory / "guardian_trials.yaml", catalog, tz)
    evil_palace = EvilPalace.load(directory / "evil_palace.yaml", catalog, tz)
    source_vault = SourceVault.load(directory / "source_vault.yaml", catalog, tz)
    twilight_vault = TwilightVault.load(directory / "twilight_vault.yaml", catalog, tz)
    defense_force = DefenseForce.load(directory / "defense_force.yaml", catalog, tz)
    monster_lookup = MonsterLookup.load(directory / "monster_lookup.yaml", catalog)
    reactions = KeywordReactions.load(directory / "keywords.yaml")

    return FeatureSet(
        announcers=[
            special_days,
            term_resets,
            weekly_resets,
            guardian_trials,
            evil_palace,
            source_vault,
            twilight_vault,
        ],
        responders=[
            evil_palace,
            guardian_trials,
            defense_force,
            source_vault,
            twilight_vault,
            monster_lookup,
        ],
        reactions=reactions,
    )


__all__ = [
    "Announcer",
    "DEFAULT_CONTENTS_DIR",
    "DayOfMonthEvents",
    "DefenseForce",
    "EvilPalace",
    "FeatureSet",
    "GuardianTrials",
    "KeywordReactions",
    "MonsterLookup",
    "Responder",
    "SourceVault",
    "TermResets",
    "TwilightVault",
    "WeeklyResets",
    "build_features",
]
