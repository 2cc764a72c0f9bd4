"""
Quintet - Card-driven five-in-a-row engine

A deterministic engine for a two-player connect-five game where each turn
is driven by one of two randomly drawn action cards. Provides:
- Seeded randomness for reproducible matches
- Board, deck and card-effect primitives
- A turn state machine with an ordered audit log
- Heuristic and random bot strategies
"""

__version__ = "0.1.0"
