"""wmagent/motivation/system.py

Decaying emotional/needs simulation.

Update order (each time the interval elapses)
---------------------------------------------
1. needs drift (rest, comfort, achievement decay; hunger accumulates)
2. emotions ease toward need-derived targets
3. personality offsets are added, then emotions are clamped
4. motivational reward is computed and sent to the reward sink, if any

The pipeline sees only ``get_motivational_context()``; action weighting is
queried by the host planner.

Tuning constants are the reference values of the shipped agent and are kept
as-is, including the half-weighted hunger term in the energy target and the
personality offsets applied after the eased update (see DESIGN.md).
"""

from __future__ import annotations

import logging
from typing import List, Optional, Protocol

from ..config import MotivationConfig
from .kinds import (
    EMOTIONAL_WEIGHTS,
    NEED_SATISFACTION_SIGN,
    NEED_WEIGHTS,
    ActionKind,
    NeedKind,
    parse_action_kind,
    parse_need_kind,
)
from .sentiment import KeywordSentimentClassifier, SentimentClassifier
from .state import EmotionalState, InnateNeeds, Personality, clamp01, lerp

logger = logging.getLogger(__name__)


class RewardSink(Protocol):
    def add_reward(self, reward: float) -> None: ...


class MotivationSystem:
    """Emotional/needs state with interval-gated decay."""

    def __init__(
        self,
        cfg: Optional[MotivationConfig] = None,
        *,
        emotions: Optional[EmotionalState] = None,
        needs: Optional[InnateNeeds] = None,
        reward_sink: Optional[RewardSink] = None,
        classifier: Optional[SentimentClassifier] = None,
    ):
        self.cfg = cfg if cfg is not None else MotivationConfig()
        self.cfg.validate()
        self.emotions = emotions if emotions is not None else EmotionalState()
        self.needs = needs if needs is not None else InnateNeeds()
        self.personality = Personality(
            extraversion=float(self.cfg.extraversion),
            neuroticism=float(self.cfg.neuroticism),
            conscientiousness=float(self.cfg.conscientiousness),
        )
        self.reward_sink = reward_sink
        self.classifier: SentimentClassifier = classifier if classifier is not None else KeywordSentimentClassifier()
        self._since_update = 0.0
        self.last_reward = 0.0

    # ------------------------------------------------------------------
    # Time
    # ------------------------------------------------------------------
    def advance(self, dt: float) -> bool:
        """Accumulate `dt` seconds; run one update when the interval elapses.

        Returns True if an update ran.
        """
        self._since_update += float(dt)
        if self._since_update < float(self.cfg.update_interval):
            return False
        self.update_motivational_state()
        self._since_update = 0.0
        return True

    def update_motivational_state(self) -> float:
        """Run one full update and return the emitted reward."""
        self._update_needs()
        self._update_emotions()
        return self._apply_motivational_reward()

    # ------------------------------------------------------------------
    # Needs / emotions
    # ------------------------------------------------------------------
    def _update_needs(self) -> None:
        cfg = self.cfg
        dt = float(cfg.update_interval)
        n = self.needs
        n.rest = clamp01(n.rest - cfg.rest_rate * dt)
        n.hunger = clamp01(n.hunger + cfg.hunger_rate * dt)
        n.comfort = clamp01(n.comfort - cfg.comfort_rate * dt)
        n.achievement = clamp01(n.achievement - cfg.achievement_decay * dt)

    def _update_emotions(self) -> None:
        cfg = self.cfg
        dt = float(cfg.update_interval)
        e, n, p = self.emotions, self.needs, self.personality

        satisfaction = (n.rest + (1 - n.hunger) + n.comfort) / 3.0
        e.happiness = lerp(e.happiness, lerp(-1.0, 1.0, satisfaction), cfg.happiness_decay * dt)

        target_energy = n.rest * (1 - n.hunger * 0.5)
        e.energy = lerp(e.energy, target_energy, cfg.energy_decay * dt)

        unfulfilled = (n.hunger + (1 - n.rest) + (1 - n.comfort)) / 3.0
        e.stress = lerp(e.stress, lerp(0.0, 1.0, unfulfilled), cfg.stress_recovery * dt)

        e.social_need = lerp(e.social_need, lerp(0.3, 0.8, p.extraversion), cfg.social_decay * dt)

        # Confidence reads the stress value just updated above.
        target_confidence = lerp(0.3, 1.0, n.achievement) * (1 - e.stress * 0.5)
        e.confidence = lerp(e.confidence, target_confidence, cfg.confidence_rate * dt)

        self._apply_personality()

    def _apply_personality(self) -> None:
        e, n, p = self.emotions, self.needs, self.personality
        e.social_need += (p.extraversion - 0.5) * 0.2
        e.happiness += (p.extraversion - 0.5) * 0.1
        e.stress += p.neuroticism * 0.2
        e.confidence -= p.neuroticism * 0.2
        e.energy += (p.conscientiousness - 0.5) * 0.2
        n.achievement = clamp01(n.achievement + (p.conscientiousness - 0.5) * 0.1)
        e.clamp()

    def motivational_reward(self) -> float:
        """Unscaled reward from the current emotional state."""
        e = self.emotions
        reward = 0.0
        reward += e.happiness * 0.3
        reward += e.confidence * 0.2
        reward += e.energy * 0.2
        reward -= e.stress * 0.4
        reward -= e.social_need * 0.2
        return float(reward)

    def _apply_motivational_reward(self) -> float:
        scaled = self.motivational_reward() * self.cfg.emotional_influence_strength * self.cfg.update_interval
        self.last_reward = float(scaled)
        if self.reward_sink is not None:
            self.reward_sink.add_reward(self.last_reward)
        return self.last_reward

    # ------------------------------------------------------------------
    # Context contract
    # ------------------------------------------------------------------
    def get_motivational_context(self) -> List[float]:
        """Twelve values: 5 emotions, 4 needs, 3 personality traits."""
        e, n, p = self.emotions, self.needs, self.personality
        context = [
            e.happiness,
            e.energy,
            e.stress,
            e.social_need,
            e.confidence,
            n.rest,
            n.hunger,
            n.comfort,
            n.achievement,
            p.extraversion,
            p.neuroticism,
            p.conscientiousness,
        ]
        return [float(v) for v in context]

    # ------------------------------------------------------------------
    # External influence
    # ------------------------------------------------------------------
    def modify_emotions(self, delta: EmotionalState) -> None:
        e = self.emotions
        e.happiness += delta.happiness
        e.energy += delta.energy
        e.stress += delta.stress
        e.social_need += delta.social_need
        e.confidence += delta.confidence
        e.clamp()

    def satisfy_need(self, need: "str | NeedKind", amount: float) -> None:
        kind = parse_need_kind(need)
        attr = kind.value
        current = float(getattr(self.needs, attr))
        setattr(self.needs, attr, clamp01(current + NEED_SATISFACTION_SIGN[kind] * float(amount)))

    def process_plan_context(self, plan_overview: str) -> EmotionalState:
        """Nudge emotions from the sentiment of a plan description.

        Negative sentiment takes precedence over positive for energy and
        confidence when both are detected. Returns the applied delta.
        """
        sentiment = self.classifier.classify(plan_overview)
        delta = EmotionalState()
        if sentiment.positive:
            delta.happiness = 0.2
            delta.energy = 0.1
            delta.confidence = 0.1
        if sentiment.negative:
            delta.stress = 0.2
            delta.energy = -0.1
            delta.confidence = -0.1
        logger.debug("plan sentiment positive=%s negative=%s", sentiment.positive, sentiment.negative)
        self.modify_emotions(delta)
        return delta

    # ------------------------------------------------------------------
    # Action weighting
    # ------------------------------------------------------------------
    def emotional_weight_for_action(self, action: "str | ActionKind") -> float:
        kind = parse_action_kind(action)
        weight = EMOTIONAL_WEIGHTS[kind](self.emotions, self.needs)
        weight += self.personality.motivation_bias()
        return clamp01(weight)

    def need_weight_for_action(self, action: "str | ActionKind") -> float:
        kind = parse_action_kind(action)
        return clamp01(NEED_WEIGHTS[kind](self.emotions, self.needs))

    def action_completion_bonus(self, action: "str | ActionKind") -> float:
        """Reward bonus for finishing `action`. Same table as the emotional weight."""
        return self.emotional_weight_for_action(action)
