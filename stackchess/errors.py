"""Exceptions raised for rejected game actions."""

from __future__ import annotations


class ChessError(Exception):
    pass


class IllegalMoveError(ChessError):
    pass


class GameOverError(IllegalMoveError):
    pass
