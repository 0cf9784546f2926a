"""
暗棋规则引擎

所有函数都是纯函数：给定棋盘和走棋方，判断动作是否合法并算出吃子结果，
不修改棋盘。合法返回 Legal(capture)，非法返回 Illegal(reason)。

走法规则：
- 翻棋：目标格必须有棋子且为暗子，双方都可以翻任意暗子
- 帅、仕、相、马、兵：上下左右走一格
- 车：横竖直线任意格，中间不能有子
- 炮：不吃子时和车一样；吃子必须隔且只隔一个子（炮架，不分敌我）
- 暗子（不论敌我）会阻挡走法，但不能被吃
- 车和一格走法的棋子吃子按等级判断，炮吃子不看等级
"""

from __future__ import annotations

from dataclasses import dataclass

from banqi.board import BanqiBoard
from banqi.piece import Piece, can_capture
from banqi.types import (
    COLS,
    ROWS,
    Color,
    Flip,
    IllegalReason,
    MovementClass,
    Move,
    PieceType,
    Position,
)


@dataclass(frozen=True)
class Legal:
    """合法动作，capture 为被吃的棋子"""

    capture: Piece | None = None

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class Illegal:
    """非法动作"""

    reason: IllegalReason

    @property
    def ok(self) -> bool:
        return False


Verdict = Legal | Illegal


def squares_between(from_pos: Position, to_pos: Position) -> list[Position]:
    """同一行或同一列上两点之间（不含端点）的所有位置

    不在同一直线时返回空列表。
    """
    if from_pos.row == to_pos.row:
        step = 1 if to_pos.col > from_pos.col else -1
        return [Position(from_pos.row, col) for col in range(from_pos.col + step, to_pos.col, step)]
    if from_pos.col == to_pos.col:
        step = 1 if to_pos.row > from_pos.row else -1
        return [Position(row, from_pos.col) for row in range(from_pos.row + step, to_pos.row, step)]
    return []


def count_between(board: BanqiBoard, from_pos: Position, to_pos: Position) -> int:
    """两点之间的棋子数（明暗、敌我都算）"""
    return sum(1 for pos in squares_between(from_pos, to_pos) if not board.is_empty(pos))


def is_orthogonal_line(from_pos: Position, to_pos: Position) -> bool:
    return from_pos != to_pos and (from_pos.row == to_pos.row or from_pos.col == to_pos.col)


def is_adjacent(from_pos: Position, to_pos: Position) -> bool:
    return abs(from_pos.row - to_pos.row) + abs(from_pos.col - to_pos.col) == 1


def check_flip(board: BanqiBoard, pos: Position) -> Verdict:
    """检查翻棋是否合法"""
    if not pos.is_valid():
        return Illegal(IllegalReason.OUT_OF_BOUNDS)

    cell = board.get(pos)
    if cell.is_empty:
        return Illegal(IllegalReason.SOURCE_EMPTY)
    if cell.is_revealed:
        return Illegal(IllegalReason.ALREADY_REVEALED)
    return Legal()


def check_move(board: BanqiBoard, from_pos: Position, to_pos: Position, turn: Color) -> Verdict:
    """检查走棋是否合法

    检查顺序：越界 → 起点 → 走棋方 → 走法几何 → 终点 → 路径/炮架 → 吃子等级
    """
    if not from_pos.is_valid() or not to_pos.is_valid():
        return Illegal(IllegalReason.OUT_OF_BOUNDS)

    source = board.get(from_pos)
    if source.is_empty:
        return Illegal(IllegalReason.SOURCE_EMPTY)
    if source.is_hidden:
        return Illegal(IllegalReason.SOURCE_NOT_REVEALED)

    mover = source.piece
    if mover.color != turn:
        return Illegal(IllegalReason.NOT_YOUR_TURN)

    sliding = mover.movement_class == MovementClass.SLIDE_ANY
    if sliding and not is_orthogonal_line(from_pos, to_pos):
        return Illegal(IllegalReason.OUT_OF_RANGE)
    if not sliding and not is_adjacent(from_pos, to_pos):
        return Illegal(IllegalReason.OUT_OF_RANGE)

    target = board.get(to_pos)
    if target.is_hidden:
        return Illegal(IllegalReason.DESTINATION_HIDDEN)
    if target.is_revealed and target.piece.color == mover.color:
        return Illegal(IllegalReason.DESTINATION_OWN_PIECE)

    if mover.piece_type == PieceType.CANNON:
        return _check_cannon(board, from_pos, to_pos, target.piece)

    if sliding and count_between(board, from_pos, to_pos) > 0:
        return Illegal(IllegalReason.PATH_BLOCKED)

    if target.piece is None:
        return Legal()
    if not can_capture(mover, target.piece):
        return Illegal(IllegalReason.RANK_TOO_LOW)
    return Legal(capture=target.piece)


def _check_cannon(
    board: BanqiBoard, from_pos: Position, to_pos: Position, target: Piece | None
) -> Verdict:
    """炮：不吃子时路径必须畅通；吃子时必须正好隔一个炮架"""
    screens = count_between(board, from_pos, to_pos)

    if target is None:
        if screens > 0:
            return Illegal(IllegalReason.PATH_BLOCKED)
        return Legal()

    if screens == 0:
        return Illegal(IllegalReason.INSUFFICIENT_SCREEN)
    if screens > 1:
        return Illegal(IllegalReason.EXCESSIVE_SCREEN)
    return Legal(capture=target)


def check_action(board: BanqiBoard, action: Flip | Move, turn: Color) -> Verdict:
    """检查翻棋或走棋动作"""
    if isinstance(action, Flip):
        return check_flip(board, action.pos)
    return check_move(board, action.from_pos, action.to_pos, turn)


def flip_targets(board: BanqiBoard) -> list[Flip]:
    """所有可翻的暗子"""
    return [Flip(pos) for pos in board.hidden_positions()]


def candidate_destinations(from_pos: Position, piece: Piece) -> list[Position]:
    """按走法类别列出候选终点（未检查合法性）"""
    if piece.movement_class == MovementClass.ADJACENT:
        return from_pos.neighbors()
    row_targets = [Position(from_pos.row, col) for col in range(COLS) if col != from_pos.col]
    col_targets = [Position(row, from_pos.col) for row in range(ROWS) if row != from_pos.row]
    return row_targets + col_targets


def legal_moves(board: BanqiBoard, color: Color) -> list[Move]:
    """某方所有合法的明子走法"""
    moves = []
    for from_pos in board.positions(color, revealed=True):
        piece = board.get_piece(from_pos)
        for to_pos in candidate_destinations(from_pos, piece):
            if check_move(board, from_pos, to_pos, color).ok:
                moves.append(Move(from_pos, to_pos))
    return moves


def legal_actions(board: BanqiBoard, color: Color) -> list[Flip | Move]:
    """某方所有合法动作（翻棋 + 走棋）"""
    return [*flip_targets(board), *legal_moves(board, color)]


def has_legal_action(board: BanqiBoard, color: Color) -> bool:
    """某方是否还有合法动作"""
    if board.hidden_positions():
        return True
    return bool(legal_moves(board, color))
