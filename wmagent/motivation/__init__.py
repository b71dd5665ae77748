from .kinds import ActionKind, NeedKind, parse_action_kind, parse_need_kind
from .sentiment import KeywordSentimentClassifier, Sentiment, SentimentClassifier
from .state import EmotionalState, InnateNeeds, Personality
from .system import MotivationSystem, RewardSink

__all__ = [
    "ActionKind",
    "EmotionalState",
    "InnateNeeds",
    "KeywordSentimentClassifier",
    "MotivationSystem",
    "NeedKind",
    "Personality",
    "RewardSink",
    "Sentiment",
    "SentimentClassifier",
    "parse_action_kind",
    "parse_need_kind",
]
