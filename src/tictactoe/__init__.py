"""Tic-tac-toe package exposing the rule engine and the web application."""

from .game import GameStatus, TicTacToeGame, apply_move, evaluate_status, reset
from .ui import app

__all__ = [
    "GameStatus",
    "TicTacToeGame",
    "apply_move",
    "app",
    "evaluate_status",
    "reset",
]
