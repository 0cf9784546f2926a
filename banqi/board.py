"""
暗棋棋盘类定义

4 行 8 列共 32 格，开局 32 个棋子全部反面朝上随机摆放。
棋盘只负责结构性的增删改查和越界/占用检查，不做任何规则判断。
"""

from __future__ import annotations

import random
from typing import Iterator, NamedTuple

from banqi.errors import (
    BoardError,
    CellEmptyError,
    CellOccupiedError,
    OutOfBoundsError,
)
from banqi.piece import Piece, piece_symbol, standard_pieces
from banqi.types import COLS, ROWS, Color, PieceState, Position


class CellView(NamedTuple):
    """格子的只读视图"""

    pos: Position
    piece: Piece | None
    state: PieceState | None

    @property
    def is_empty(self) -> bool:
        return self.piece is None

    @property
    def is_hidden(self) -> bool:
        return self.state == PieceState.HIDDEN

    @property
    def is_revealed(self) -> bool:
        return self.state == PieceState.REVEALED


# 每个格子：None 或 (棋子, 明暗状态)
Slot = tuple[Piece, PieceState]


class BanqiBoard:
    """暗棋棋盘

    坐标系统：
    - row 0-3: 从上到下
    - col 0-7: 从左到右
    """

    def __init__(self, seed: int | None = None, *, deal: bool = True):
        """初始化棋盘

        Args:
            seed: 随机种子，相同种子得到相同的暗子分布
            deal: 是否摆放标准开局（False 得到空棋盘）
        """
        self._cells: list[list[Slot | None]] = [[None] * COLS for _ in range(ROWS)]
        self._seed = seed
        if deal:
            self._setup_initial_position()

    @classmethod
    def empty(cls) -> BanqiBoard:
        """创建空棋盘（用于测试和残局摆放）"""
        return cls(deal=False)

    def _setup_initial_position(self) -> None:
        """双方各 16 子洗牌后背面朝上铺满棋盘"""
        rng = random.Random(self._seed)
        pieces = standard_pieces(Color.RED) + standard_pieces(Color.BLACK)
        rng.shuffle(pieces)

        for index, piece in enumerate(pieces):
            pos = Position(index // COLS, index % COLS)
            self._cells[pos.row][pos.col] = (piece, PieceState.HIDDEN)

    def _check_bounds(self, pos: Position) -> None:
        if not pos.is_valid():
            raise OutOfBoundsError(pos)

    def _slot(self, pos: Position) -> Slot | None:
        self._check_bounds(pos)
        return self._cells[pos.row][pos.col]

    def _occupied_slot(self, pos: Position) -> Slot:
        slot = self._slot(pos)
        if slot is None:
            raise CellEmptyError(pos)
        return slot

    # =========================================================================
    # 结构操作
    # =========================================================================

    def get(self, pos: Position) -> CellView:
        """获取指定格子"""
        slot = self._slot(pos)
        if slot is None:
            return CellView(pos, None, None)
        return CellView(pos, slot[0], slot[1])

    def get_piece(self, pos: Position) -> Piece | None:
        """获取指定位置的棋子（不论明暗）"""
        slot = self._slot(pos)
        return slot[0] if slot else None

    def place(self, pos: Position, piece: Piece, hidden: bool = True) -> None:
        """在空格上放置棋子"""
        if self._slot(pos) is not None:
            raise CellOccupiedError(pos)
        state = PieceState.HIDDEN if hidden else PieceState.REVEALED
        self._cells[pos.row][pos.col] = (piece, state)

    def reveal(self, pos: Position) -> Piece:
        """翻开暗子，返回该棋子"""
        piece, state = self._occupied_slot(pos)
        if state == PieceState.REVEALED:
            raise BoardError(f"Piece at {pos} is already revealed")
        self._cells[pos.row][pos.col] = (piece, PieceState.REVEALED)
        return piece

    def hide(self, pos: Position) -> Piece:
        """把明子翻回暗子（仅用于撤销翻棋）"""
        piece, state = self._occupied_slot(pos)
        if state == PieceState.HIDDEN:
            raise BoardError(f"Piece at {pos} is already hidden")
        self._cells[pos.row][pos.col] = (piece, PieceState.HIDDEN)
        return piece

    def relocate(self, from_pos: Position, to_pos: Position) -> None:
        """把棋子从一个格子移到另一个空格子（明暗状态随之移动）"""
        slot = self._occupied_slot(from_pos)
        if self._slot(to_pos) is not None:
            raise CellOccupiedError(to_pos)
        self._cells[from_pos.row][from_pos.col] = None
        self._cells[to_pos.row][to_pos.col] = slot

    def remove(self, pos: Position) -> Piece:
        """移除并返回指定位置的棋子"""
        piece, _ = self._occupied_slot(pos)
        self._cells[pos.row][pos.col] = None
        return piece

    def reveal_all(self) -> int:
        """翻开所有暗子（调试用），返回翻开的数量"""
        count = 0
        for pos in self.hidden_positions():
            self.reveal(pos)
            count += 1
        return count

    # =========================================================================
    # 查询
    # =========================================================================

    def is_empty(self, pos: Position) -> bool:
        return self._slot(pos) is None

    def cells(self) -> Iterator[CellView]:
        """按行优先遍历所有格子"""
        for row in range(ROWS):
            for col in range(COLS):
                yield self.get(Position(row, col))

    def occupied(self) -> Iterator[CellView]:
        return (cell for cell in self.cells() if not cell.is_empty)

    def hidden_positions(self) -> list[Position]:
        """所有暗子的位置"""
        return [cell.pos for cell in self.occupied() if cell.is_hidden]

    def positions(self, color: Color, revealed: bool | None = None) -> list[Position]:
        """某方棋子的位置，可按明暗过滤"""
        result = []
        for cell in self.occupied():
            if cell.piece.color != color:
                continue
            if revealed is not None and cell.is_revealed != revealed:
                continue
            result.append(cell.pos)
        return result

    def pieces(self, color: Color | None = None) -> list[Piece]:
        """棋盘上的所有棋子，可按颜色过滤"""
        return [
            cell.piece
            for cell in self.occupied()
            if color is None or cell.piece.color == color
        ]

    def count(self, color: Color | None = None) -> int:
        return len(self.pieces(color))

    def hidden_count(self, color: Color | None = None) -> int:
        return len(
            [
                cell
                for cell in self.occupied()
                if cell.is_hidden and (color is None or cell.piece.color == color)
            ]
        )

    def snapshot(self) -> tuple[tuple[Slot | None, ...], ...]:
        """完整局面快照（可哈希、可比较）"""
        return tuple(tuple(row) for row in self._cells)

    def copy(self) -> BanqiBoard:
        """创建棋盘副本（棋子不可变，复制格子即可）"""
        new_board = BanqiBoard.__new__(BanqiBoard)
        new_board._cells = [list(row) for row in self._cells]
        new_board._seed = self._seed
        return new_board

    # =========================================================================
    # 序列化和显示
    # =========================================================================

    def to_dict(self) -> dict:
        """序列化为字典（不暴露暗子身份）"""
        cells = []
        for cell in self.cells():
            item: dict = {"row": cell.pos.row, "col": cell.pos.col}
            if cell.is_empty:
                item["state"] = "empty"
            elif cell.is_hidden:
                item["state"] = PieceState.HIDDEN.value
            else:
                item["state"] = PieceState.REVEALED.value
                item.update(cell.piece.to_dict())
            cells.append(item)
        return {"rows": ROWS, "cols": COLS, "cells": cells}

    def to_full_dict(self) -> dict:
        """序列化为完整字典（包含暗子身份，用于调试）"""
        cells = []
        for cell in self.occupied():
            cells.append(
                {
                    "row": cell.pos.row,
                    "col": cell.pos.col,
                    "state": cell.state.value,
                    **cell.piece.to_dict(),
                }
            )
        return {"rows": ROWS, "cols": COLS, "pieces": cells}

    def __iter__(self) -> Iterator[CellView]:
        return self.cells()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, BanqiBoard):
            return NotImplemented
        return self.snapshot() == other.snapshot()

    def __repr__(self) -> str:
        return f"BanqiBoard({self.count()} pieces, {self.hidden_count()} hidden)"

    def display(self) -> str:
        """返回棋盘的文本表示（暗子显示为 "暗"）"""
        return self._render(show_hidden=False)

    def display_full(self) -> str:
        """返回棋盘的完整文本表示（暗子用括号标出真实身份，用于调试）"""
        return self._render(show_hidden=True)

    def _render(self, show_hidden: bool) -> str:
        lines = ["   " + "".join(f"{col:^4}" for col in range(COLS))]
        for row in range(ROWS):
            line = f"{row}  "
            for col in range(COLS):
                cell = self.get(Position(row, col))
                if cell.is_empty:
                    line += " ·  "
                elif cell.is_hidden:
                    line += f"({piece_symbol(cell.piece)})" if show_hidden else " 暗 "
                else:
                    line += f" {piece_symbol(cell.piece)} "
            lines.append(line.rstrip())
        return "\n".join(lines)
