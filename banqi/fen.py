"""
暗棋局面记号（FEN 风格）

格式: "<第0行>/<第1行>/<第2行>/<第3行> <走棋方>"

- 数字: 连续空格数
- 大写字母: 红方明子，小写字母: 黑方明子
  K=帅/将 A=仕/士 E=相/象 R=车 H=马 C=炮 P=兵/卒
- "?" 前缀: 暗子（如 "?k" 表示黑将的暗子）
- 公开局面中暗子一律写作 "x"（不暴露身份和阵营）
- 走棋方: r=红, b=黑

示例: "?K?p6/8/8/8 b"
"""

from __future__ import annotations

from banqi.board import BanqiBoard
from banqi.piece import piece_from_letter, piece_letter
from banqi.types import COLS, ROWS, Color, Position

HIDDEN_PREFIX = "?"
PUBLIC_HIDDEN = "x"

_TURN_CHARS = {Color.RED: "r", Color.BLACK: "b"}
_CHAR_TURNS = {v: k for k, v in _TURN_CHARS.items()}


def _row_to_fen(board: BanqiBoard, row: int, public: bool) -> str:
    parts = []
    empty = 0
    for col in range(COLS):
        cell = board.get(Position(row, col))
        if cell.is_empty:
            empty += 1
            continue
        if empty:
            parts.append(str(empty))
            empty = 0
        if cell.is_hidden:
            parts.append(PUBLIC_HIDDEN if public else HIDDEN_PREFIX + piece_letter(cell.piece))
        else:
            parts.append(piece_letter(cell.piece))
    if empty:
        parts.append(str(empty))
    return "".join(parts)


def to_fen(board: BanqiBoard, turn: Color = Color.RED) -> str:
    """生成完整局面记号（包含暗子身份）"""
    rows = "/".join(_row_to_fen(board, row, public=False) for row in range(ROWS))
    return f"{rows} {_TURN_CHARS[turn]}"


def to_public_fen(board: BanqiBoard, turn: Color = Color.RED) -> str:
    """生成公开局面记号（暗子写作 x）"""
    rows = "/".join(_row_to_fen(board, row, public=True) for row in range(ROWS))
    return f"{rows} {_TURN_CHARS[turn]}"


def parse_fen(fen: str) -> tuple[BanqiBoard, Color]:
    """解析完整局面记号

    Returns:
        (棋盘, 走棋方)

    Raises:
        ValueError: 格式错误
    """
    parts = fen.strip().split()
    if len(parts) == 1:
        board_str, turn = parts[0], Color.RED
    elif len(parts) == 2:
        board_str = parts[0]
        if parts[1] not in _CHAR_TURNS:
            raise ValueError(f"Invalid side to move: {parts[1]!r}")
        turn = _CHAR_TURNS[parts[1]]
    else:
        raise ValueError(f"Invalid FEN: {fen!r}")

    rows = board_str.split("/")
    if len(rows) != ROWS:
        raise ValueError(f"Expected {ROWS} rows, got {len(rows)}")

    board = BanqiBoard.empty()
    for row, row_str in enumerate(rows):
        col = 0
        hidden = False
        for ch in row_str:
            if ch == HIDDEN_PREFIX:
                hidden = True
                continue
            if ch.isdigit():
                if hidden:
                    raise ValueError(f"Dangling '{HIDDEN_PREFIX}' in row {row}")
                col += int(ch)
                continue
            if col >= COLS:
                raise ValueError(f"Row {row} is longer than {COLS} cells")
            board.place(Position(row, col), piece_from_letter(ch), hidden=hidden)
            hidden = False
            col += 1
        if hidden:
            raise ValueError(f"Dangling '{HIDDEN_PREFIX}' in row {row}")
        if col != COLS:
            raise ValueError(f"Row {row} has {col} cells, expected {COLS}")

    return board, turn
