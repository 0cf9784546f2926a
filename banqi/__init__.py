"""
暗棋 (Banqi) - 中国象棋变体

暗棋在 4x8 的半张棋盘上进行，双方 32 个棋子全部反面朝上随机摆放。
玩家轮流翻开暗子或走动己方明子，按兵种等级吃子，吃掉对方将/帅或
使对方无子可走即获胜。
"""

from banqi.types import (
    Action,
    ActionType,
    Color,
    DebugRevealAll,
    Flip,
    GameStatus,
    IllegalReason,
    Move,
    MovementClass,
    PieceState,
    PieceType,
    Position,
    QueryHistory,
    QueryState,
    Undo,
)
from banqi.errors import (
    BanqiError,
    BoardError,
    GameOverError,
    IllegalActionError,
    InputError,
    NoHistoryError,
)
from banqi.piece import Piece, can_capture, capture_order_rank, movement_class
from banqi.board import BanqiBoard, CellView
from banqi.rules import Illegal, Legal, check_flip, check_move
from banqi.game import ActionResult, BanqiGame, GameConfig, MoveRecord

__all__ = [
    "Action",
    "ActionType",
    "Color",
    "DebugRevealAll",
    "Flip",
    "GameStatus",
    "IllegalReason",
    "Move",
    "MovementClass",
    "PieceState",
    "PieceType",
    "Position",
    "QueryHistory",
    "QueryState",
    "Undo",
    "BanqiError",
    "BoardError",
    "GameOverError",
    "IllegalActionError",
    "InputError",
    "NoHistoryError",
    "Piece",
    "can_capture",
    "capture_order_rank",
    "movement_class",
    "BanqiBoard",
    "CellView",
    "Illegal",
    "Legal",
    "check_flip",
    "check_move",
    "ActionResult",
    "BanqiGame",
    "GameConfig",
    "MoveRecord",
]
