"""
Match - Drives one match from configuration to game over.

The match owns:
- The match PRNG (from the configured seed)
- A fresh card registry
- The authoritative GameState
- The live TurnMachine for the turn in progress
- Completed-turn logs and the winning line of the last turn

Usage:
    match = Match(MatchConfig(opponent="bot"))

    match.choose_card("Place")
    match.select_cell((7, 7))

    while match.is_bot_turn():
        match.play_bot_turn()

    view = match.snapshot()

Intents that are not legal right now are ignored; each intent method
returns whether it took effect, and snapshot() always shows the truth.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Callable
import logging
import uuid

from ..bots import BotDecision, BotPolicy, get_strategy
from ..cards.base_cards import create_default_registry
from ..cards.registry import CardRegistry
from ..cards.types import TargetKind, TargetValue
from ..cards.validate import enumerate_targets
from ..engine_core.board import Point, WinLine
from ..engine_core.deck import build_shuffled_deck
from ..engine_core.rng import create_prng
from ..engine_core.state import DRAW, GameState
from .config import MatchConfig
from .turn_machine import TurnLogEntry, TurnMachine, TurnPhase

logger = logging.getLogger(__name__)


@dataclass
class CompletedTurn:
    """Audit record of one finished turn."""
    number: int
    player: int
    logs: list[TurnLogEntry] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "turn": self.number,
            "player": self.player,
            "logs": [{"tag": e.tag, "message": e.message} for e in self.logs],
        }


class Match:
    """
    A single match session.

    Nothing here is persisted; dropping the object ends the match.
    """

    def __init__(
        self,
        config: MatchConfig | None = None,
        registry_factory: Callable[[], CardRegistry] = create_default_registry,
        match_id: str | None = None,
    ):
        self.match_id = match_id or str(uuid.uuid4())
        self.config = config or MatchConfig()
        self._registry_factory = registry_factory
        self._start()

    def _start(self):
        cfg = self.config
        self.registry = self._registry_factory()
        self.rng = create_prng(cfg.seed)
        draw_pile = build_shuffled_deck(self.rng, cfg.deck_counts, self.registry)
        self.game = GameState.create(cfg.board_size, cfg.first_player, draw_pile)
        self.bot: BotPolicy | None = get_strategy(cfg.bot_strategy_id) if cfg.opponent == "bot" else None

        self.turn_number = 0
        self.history: list[CompletedTurn] = []
        self.winning_line: WinLine | None = None
        self.machine: TurnMachine | None = None
        self.stalled = False

        logger.info(
            "Match %s started: size=%s first=P%s seed=%r deck=%s cards opponent=%s",
            self.match_id, cfg.board_size, cfg.first_player, cfg.seed, len(draw_pile), cfg.opponent,
        )
        self._begin_turn()

    # -------------------------------------------------------------------------
    # Turn sequencing
    # -------------------------------------------------------------------------

    def _begin_turn(self):
        """Start turns until one waits for input or the match is over."""
        while self.game.winner is None:
            deck = self.game.deck
            if (
                deck.draw_count + deck.discard_count == 0
                and self.game.status.pending_skips(self.game.current_player) == 0
            ):
                self.stalled = True
                logger.warning("Match %s stalled: no cards left in the deck", self.match_id)
                break

            self.turn_number += 1
            self.machine = TurnMachine(self.game, self.rng, self.registry, self.config.simultaneous_five_policy)
            if not self.machine.done:
                return
            self._finish_turn()
        self.machine = None

    def _finish_turn(self):
        machine = self.machine
        player = self.game.current_player
        self.game = machine.game
        self.history.append(CompletedTurn(number=self.turn_number, player=player, logs=list(machine.logs)))

        self.winning_line = self._find_winning_line()
        if self.game.winner is not None:
            logger.info("Match %s over after turn %s: winner=%s", self.match_id, self.turn_number, self.game.winner)

    def _find_winning_line(self) -> WinLine | None:
        board = self.game.board
        line = board.check_win_from_last_move()
        if line is not None:
            return line
        winner = self.game.winner
        if winner is None or winner == DRAW:
            return None
        for win in board.scan_all_wins():
            if win.player == winner:
                return win
        return None

    def _after_intent(self, accepted: bool) -> bool:
        if self.machine is not None and self.machine.done:
            self._finish_turn()
            self._begin_turn()
        return accepted

    # -------------------------------------------------------------------------
    # Intents
    # -------------------------------------------------------------------------

    @property
    def current_state(self) -> GameState:
        """State including the turn in progress (drawn cards are out of the piles)."""
        return self.machine.game if self.machine is not None else self.game

    @property
    def is_over(self) -> bool:
        return self.game.winner is not None or self.stalled

    def choose_card(self, card_id: str) -> bool:
        """CHOOSE_CARD; True if it took effect."""
        if self.machine is None:
            return False
        return self._after_intent(self.machine.choose_card(card_id))

    def select_target(self, target: TargetValue) -> bool:
        """SELECT_TARGET; True if it took effect."""
        if self.machine is None:
            return False
        return self._after_intent(self.machine.select_target(target))

    def select_cell(self, point: Point | tuple[int, int]) -> bool:
        return self.select_target(TargetValue.cell(point))

    def is_cell_enabled(self, point: Point | tuple[int, int]) -> bool:
        """True only if the chosen card is waiting for a cell and would accept point."""
        machine = self.machine
        if machine is None or not machine.awaiting_target:
            return False
        definition = self.registry.get(machine.chosen)
        if definition is None or definition.target.kind != TargetKind.CELL:
            return False
        ctx = machine.context.match_context()
        return definition.validate_target(ctx, TargetValue.cell(point)).ok

    # -------------------------------------------------------------------------
    # Bots
    # -------------------------------------------------------------------------

    def is_bot_turn(self) -> bool:
        return (
            self.bot is not None
            and self.machine is not None
            and self.game.current_player == self.config.bot_player
        )

    def play_bot_turn(self) -> BotDecision | None:
        """Let the configured bot play the current turn. None if it is not the bot's turn."""
        if not self.is_bot_turn():
            return None
        return self.play_policy_turn(self.bot)

    def play_policy_turn(self, policy: BotPolicy) -> BotDecision | None:
        """
        Play the current turn with policy, whoever is to move.

        The policy gets its own generator, seeded from the match seed and
        turn number, so it never draws from the match stream. A rejected
        choice or target falls back to the first legal option so the turn
        always completes.
        """
        machine = self.machine
        if machine is None:
            return None

        rng = create_prng(f"{self.config.seed}:bot:{self.turn_number}")
        decision = policy.decide(self.game, list(machine.drawn), self.registry, rng)
        logger.debug("Turn %s P%s %s -> %s", self.turn_number, self.game.current_player,
                     policy.get_name(), decision.card_id)

        if machine.phase == TurnPhase.CHOOSE and not machine.choose_card(decision.card_id):
            logger.debug("Bot chose %s which was not drawn; using %s", decision.card_id, machine.drawn[0])
            machine.choose_card(machine.drawn[0])

        if machine.awaiting_target:
            accepted = decision.target is not None and machine.select_target(decision.target)
            if not accepted:
                definition = self.registry.require(machine.chosen)
                targets = enumerate_targets(machine.context.match_context(), definition.target)
                logger.debug("Bot target rejected; falling back to %s", targets[0].describe())
                machine.select_target(targets[0])

        self._after_intent(True)
        return decision

    # -------------------------------------------------------------------------
    # Lifecycle and views
    # -------------------------------------------------------------------------

    def reset(self, **overrides: Any):
        """Drop the running turn and start over with overrides merged into the config."""
        self.config = self.config.merged(**overrides)
        logger.info("Match %s reset", self.match_id)
        self._start()

    def snapshot(self) -> dict[str, Any]:
        """
        Read-only view for a presentation layer.

        Every collection is a fresh copy; changing it changes nothing here.
        """
        game = self.current_state
        board = game.board
        machine = self.machine
        last_move = None
        if board.last_move is not None:
            last_move = {"x": board.last_move.x, "y": board.last_move.y, "player": board.last_move.player}

        return {
            "match_id": self.match_id,
            "config": self.config.to_public_dict(),
            "board": {
                "size": board.size,
                "cells": [row.copy() for row in board.cells],
                "last_move": last_move,
            },
            "current_player": game.current_player,
            "deck": {"draw_pile": game.deck.draw_count, "discard_pile": game.deck.discard_count},
            "skip_next_turns": {str(p): n for p, n in game.status.skip_next_turns.items()},
            "winner": game.winner,
            "winning_line": [{"x": p.x, "y": p.y} for p in self.winning_line.line] if self.winning_line else None,
            "turn_number": self.turn_number,
            "phase": machine.phase.value if machine else None,
            "drawn": list(machine.drawn) if machine else [],
            "chosen": machine.chosen if machine else None,
            "awaiting_target": machine.awaiting_target if machine else False,
            "is_bot_turn": self.is_bot_turn(),
            "stalled": self.stalled,
            "logs": [{"tag": e.tag, "message": e.message} for e in machine.logs] if machine else [],
            "history": [turn.to_dict() for turn in self.history],
        }
