"""wmagent/motivation/kinds.py

Closed enumerations of action and need kinds, each mapped to its weighting
function. Every ActionKind has an entry in both tables; kinds with no
emotional or need term map to a zero contribution.
"""

from __future__ import annotations

from enum import Enum
from typing import Callable, Dict

from .state import EmotionalState, InnateNeeds


class ActionKind(str, Enum):
    REST = "rest"
    EAT = "eat"
    SOCIALIZE = "socialize"
    WORK = "work"
    EXPLORE = "explore"
    COMFORT = "comfort"
    ACHIEVE = "achieve"


class NeedKind(str, Enum):
    REST = "rest"
    HUNGER = "hunger"
    COMFORT = "comfort"
    ACHIEVEMENT = "achievement"


def parse_action_kind(value: "str | ActionKind") -> ActionKind:
    """Resolve an action name (case-insensitive). Unknown names raise ValueError."""
    if isinstance(value, ActionKind):
        return value
    return ActionKind(str(value).strip().lower())


def parse_need_kind(value: "str | NeedKind") -> NeedKind:
    if isinstance(value, NeedKind):
        return value
    return NeedKind(str(value).strip().lower())


WeightFn = Callable[[EmotionalState, InnateNeeds], float]


def _zero(e: EmotionalState, n: InnateNeeds) -> float:
    return 0.0


EMOTIONAL_WEIGHTS: Dict[ActionKind, WeightFn] = {
    ActionKind.REST: lambda e, n: (1 - e.energy) * 0.4 + e.stress * 0.3,
    ActionKind.EAT: lambda e, n: n.hunger * 0.5 - e.stress * 0.2,
    ActionKind.SOCIALIZE: lambda e, n: e.social_need * 0.4 + e.happiness * 0.2 - e.stress * 0.2,
    ActionKind.WORK: lambda e, n: n.achievement * 0.3 + e.confidence * 0.2 + e.energy * 0.2,
    ActionKind.EXPLORE: lambda e, n: e.energy * 0.3 + (1 - e.stress) * 0.2 + e.confidence * 0.2,
    ActionKind.COMFORT: _zero,
    ActionKind.ACHIEVE: _zero,
}

NEED_WEIGHTS: Dict[ActionKind, WeightFn] = {
    ActionKind.REST: lambda e, n: (1 - n.rest) * 0.6,
    ActionKind.EAT: lambda e, n: n.hunger * 0.7,
    ActionKind.COMFORT: lambda e, n: (1 - n.comfort) * 0.4,
    ActionKind.WORK: lambda e, n: (1 - n.achievement) * 0.5,
    ActionKind.ACHIEVE: lambda e, n: (1 - n.achievement) * 0.5,
    ActionKind.SOCIALIZE: _zero,
    ActionKind.EXPLORE: _zero,
}

# Sign applied when a need is satisfied: hunger is satisfied by decreasing it.
NEED_SATISFACTION_SIGN: Dict[NeedKind, float] = {
    NeedKind.REST: 1.0,
    NeedKind.HUNGER: -1.0,
    NeedKind.COMFORT: 1.0,
    NeedKind.ACHIEVEMENT: 1.0,
}
