"""
Bot Policy - Interface for bot decision-making.

A BotPolicy looks at a game state and the cards drawn this turn and
returns a decision: which card to play and, if the card needs one,
which target.

Contract for every implementation:
- decide() must not mutate the state or the registry
- randomness comes only from the rng argument or children derived from it
- it never raises for a well-formed input, even with nothing drawn
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Sequence

from ..cards.types import MatchContext, TargetKind, TargetValue
from ..cards.validate import enumerate_targets

if TYPE_CHECKING:
    from ..cards.registry import CardRegistry
    from ..engine_core.rng import Prng
    from ..engine_core.state import GameState

FALLBACK_CARD = "Place"


@dataclass
class BotDecision:
    """
    A decision made by a bot.

    Contains:
    - The card to play
    - Its target (None when the card takes no target)
    - Score of the chosen option, if the bot computes one
    - Explanation (for UI/debugging)
    """
    card_id: str
    target: TargetValue | None = None
    score: float | None = None
    explanation: str = ""

    # Evaluation details (for debugging)
    evaluated_options: int = 0
    evaluation_details: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "card_id": self.card_id,
            "target": self.target.to_dict() if self.target else None,
            "score": self.score,
            "explanation": self.explanation,
        }


def match_context(state: GameState) -> MatchContext:
    """Read-only card context for the player to move."""
    return MatchContext(
        board=state.board,
        current_player=state.current_player,
        skip_next_turns=dict(state.status.skip_next_turns),
    )


class BotPolicy(ABC):
    """
    Abstract base class for bot policies.

    Implementations range from the random baseline to the heuristic
    lookahead bot. Each has a stable strategy_id used in configuration.
    """

    strategy_id: str = ""

    @abstractmethod
    def decide(
        self,
        state: GameState,
        drawn: Sequence[str],
        registry: CardRegistry,
        rng: Prng,
    ) -> BotDecision:
        """
        Pick a card among drawn and, if needed, its target.

        Args:
            state: Current game state (read only)
            drawn: Cards drawn this turn (0-2)
            registry: Card definitions
            rng: Generator owned by this call

        Returns:
            BotDecision for the player to move
        """
        pass

    def get_name(self) -> str:
        return self.strategy_id or self.__class__.__name__


class RandomBot(BotPolicy):
    """
    Random baseline - first playable card in random order, random legal target.

    Used for:
    - Testing the match plumbing
    - Baseline comparison in simulations
    """

    strategy_id = "random-baseline"

    def decide(
        self,
        state: GameState,
        drawn: Sequence[str],
        registry: CardRegistry,
        rng: Prng,
    ) -> BotDecision:
        ctx = match_context(state)
        for card_id in rng.shuffle(drawn):
            definition = registry.get(card_id)
            if definition is None or not definition.can_play(ctx).ok:
                continue
            if definition.target.kind == TargetKind.NONE:
                return BotDecision(card_id=card_id, explanation="Random playable card")
            targets = enumerate_targets(ctx, definition.target)
            if targets:
                return BotDecision(
                    card_id=card_id,
                    target=targets[rng.randint(0, len(targets) - 1)],
                    explanation="Random playable card and target",
                    evaluated_options=len(targets),
                )

        # Nothing playable; the turn machine turns this into a no-op
        fallback = drawn[0] if drawn else FALLBACK_CARD
        return BotDecision(card_id=fallback, explanation="Fallback: no playable card")
