"""
暗棋异常定义

- InputError: 命令或坐标格式错误（含越界）
- IllegalActionError: 违反规则的动作，局面不变
- NoHistoryError: 没有可以撤销的历史
- GameOverError: 对局已结束后仍提交动作
- BoardError 及其子类: 棋盘结构操作被误用（调用方的程序错误）
"""

from __future__ import annotations

from banqi.types import IllegalReason, Position


class BanqiError(Exception):
    """暗棋异常基类"""


class InputError(BanqiError):
    """输入错误"""

    def __init__(self, message: str, reason: IllegalReason | None = None):
        super().__init__(message)
        self.reason = reason


class IllegalActionError(BanqiError):
    """非法动作"""

    def __init__(self, reason: IllegalReason, message: str | None = None):
        super().__init__(message or f"Illegal action: {reason.value}")
        self.reason = reason


class NoHistoryError(BanqiError):
    """没有可撤销的走棋"""

    def __init__(self, message: str = "No moves to undo"):
        super().__init__(message)


class GameOverError(BanqiError):
    """对局已结束"""

    def __init__(self, message: str = "Game has already ended"):
        super().__init__(message)


class BoardError(BanqiError):
    """棋盘结构操作错误"""


class OutOfBoundsError(BoardError):
    def __init__(self, pos: Position):
        super().__init__(f"Position {pos} is out of bounds")
        self.pos = pos


class CellEmptyError(BoardError):
    def __init__(self, pos: Position):
        super().__init__(f"No piece at {pos}")
        self.pos = pos


class CellOccupiedError(BoardError):
    def __init__(self, pos: Position):
        super().__init__(f"Cell {pos} is already occupied")
        self.pos = pos
