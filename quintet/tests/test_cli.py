"""
Tests for the command-line interface.
"""

from ..cli import main


class TestCli:

    def test_no_command(self, capsys):
        assert main([]) == 1
        assert "usage" in capsys.readouterr().out.lower()

    def test_cards(self, capsys):
        assert main(["cards"]) == 0
        out = capsys.readouterr().out
        for card_id in ("Place", "Take", "PolarityInversion", "TimeFreeze", "SpontaneousGeneration"):
            assert card_id in out

    def test_simulate(self, capsys):
        code = main([
            "simulate", "--seed", "cli", "--games", "2", "--size", "7",
            "--p1", "random-baseline", "--p2", "random-baseline", "--max-turns", "10",
        ])
        assert code == 0
        out = capsys.readouterr().out
        assert "game 1: seed=cli-0" in out
        assert "game 2: seed=cli-1" in out
        assert "random-baseline (P1)" in out

    def test_play_quit(self, monkeypatch, capsys):
        monkeypatch.setattr("builtins.input", lambda prompt="": "q")
        assert main(["play", "--size", "9"]) == 0
        assert "You are X" in capsys.readouterr().out

    def test_play_one_move(self, monkeypatch, capsys):
        answers = iter(["Place", "4 4", "q"])
        monkeypatch.setattr("builtins.input", lambda prompt="": next(answers))
        assert main(["play", "--size", "9", "--bot", "random-baseline"]) == 0
        out = capsys.readouterr().out
        assert "Bot plays" in out
