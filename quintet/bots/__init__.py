"""
Bots module - Computer opponents.

Provides:
- BotPolicy: Interface for bot decision-making
- BoardEvaluator: Scores positions
- HeuristicBot: Tactical cascade plus lookahead
- RandomBot: Random baseline
- STRATEGIES / get_strategy: lookup by strategy id
"""

from .policy import BotPolicy, BotDecision, RandomBot
from .evaluator import BoardEvaluator, EvaluationWeights, StateEvaluation
from .heuristic_bot import HeuristicBot

STRATEGIES: dict[str, type[BotPolicy]] = {
    HeuristicBot.strategy_id: HeuristicBot,
    RandomBot.strategy_id: RandomBot,
}


def get_strategy(strategy_id: str) -> BotPolicy:
    """New bot for strategy_id. Raises KeyError for unknown ids."""
    try:
        return STRATEGIES[strategy_id]()
    except KeyError:
        raise KeyError(f"Unknown bot strategy: {strategy_id}") from None


__all__ = [
    "BotPolicy",
    "BotDecision",
    "RandomBot",
    "HeuristicBot",
    "BoardEvaluator",
    "EvaluationWeights",
    "StateEvaluation",
    "STRATEGIES",
    "get_strategy",
]
