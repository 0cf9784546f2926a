"""
暗棋棋子定义

棋子本身不可变（阵营 + 兵种），明暗状态由棋盘格子记录。
兵种的吃子等级和走法类别用查表实现，规则引擎只依赖这里的纯函数。
"""

from __future__ import annotations

from dataclasses import dataclass

from banqi.types import STANDARD_SET, Color, MovementClass, PieceType

# 吃子等级：帅 > 仕 > 相 > 车 > 马 > 炮 > 兵
CAPTURE_ORDER: dict[PieceType, int] = {
    PieceType.GENERAL: 7,
    PieceType.ADVISOR: 6,
    PieceType.ELEPHANT: 5,
    PieceType.CHARIOT: 4,
    PieceType.HORSE: 3,
    PieceType.CANNON: 2,
    PieceType.SOLDIER: 1,
}

MOVEMENT_CLASS: dict[PieceType, MovementClass] = {
    PieceType.GENERAL: MovementClass.ADJACENT,
    PieceType.ADVISOR: MovementClass.ADJACENT,
    PieceType.ELEPHANT: MovementClass.ADJACENT,
    PieceType.CHARIOT: MovementClass.SLIDE_ANY,
    PieceType.HORSE: MovementClass.ADJACENT,
    PieceType.CANNON: MovementClass.SLIDE_ANY,
    PieceType.SOLDIER: MovementClass.ADJACENT,
}

# 终端显示用的中文字符
PIECE_SYMBOLS: dict[tuple[Color, PieceType], str] = {
    (Color.RED, PieceType.GENERAL): "帅",
    (Color.BLACK, PieceType.GENERAL): "将",
    (Color.RED, PieceType.ADVISOR): "仕",
    (Color.BLACK, PieceType.ADVISOR): "士",
    (Color.RED, PieceType.ELEPHANT): "相",
    (Color.BLACK, PieceType.ELEPHANT): "象",
    (Color.RED, PieceType.CHARIOT): "俥",
    (Color.BLACK, PieceType.CHARIOT): "車",
    (Color.RED, PieceType.HORSE): "傌",
    (Color.BLACK, PieceType.HORSE): "馬",
    (Color.RED, PieceType.CANNON): "炮",
    (Color.BLACK, PieceType.CANNON): "砲",
    (Color.RED, PieceType.SOLDIER): "兵",
    (Color.BLACK, PieceType.SOLDIER): "卒",
}

# FEN 字母（红方大写，黑方小写）
PIECE_LETTERS: dict[PieceType, str] = {
    PieceType.GENERAL: "K",
    PieceType.ADVISOR: "A",
    PieceType.ELEPHANT: "E",
    PieceType.CHARIOT: "R",
    PieceType.HORSE: "H",
    PieceType.CANNON: "C",
    PieceType.SOLDIER: "P",
}

LETTER_TO_TYPE: dict[str, PieceType] = {v: k for k, v in PIECE_LETTERS.items()}


@dataclass(frozen=True)
class Piece:
    """暗棋棋子"""

    color: Color
    piece_type: PieceType

    @property
    def rank(self) -> int:
        return capture_order_rank(self.piece_type)

    @property
    def movement_class(self) -> MovementClass:
        return movement_class(self.piece_type)

    @property
    def symbol(self) -> str:
        return piece_symbol(self)

    def to_dict(self) -> dict:
        """序列化为字典"""
        return {"color": self.color.value, "type": self.piece_type.value}

    def __repr__(self) -> str:
        return f"Piece({self.color.value}, {self.piece_type.value})"


def capture_order_rank(piece_type: PieceType) -> int:
    """吃子等级（帅最高，兵最低）"""
    return CAPTURE_ORDER[piece_type]


def movement_class(piece_type: PieceType) -> MovementClass:
    """走法类别：车、炮直线任意格，其余走一格"""
    return MOVEMENT_CLASS[piece_type]


def can_capture(attacker: Piece, defender: Piece) -> bool:
    """按吃子等级判断能否吃子（炮不走这个规则）

    - 只能吃对方棋子
    - 兵可以吃帅（特例）
    - 帅不能吃兵（特例）
    - 其余情况：等级大于等于对方即可吃
    """
    if attacker.color == defender.color:
        return False

    if attacker.piece_type == PieceType.SOLDIER and defender.piece_type == PieceType.GENERAL:
        return True
    if attacker.piece_type == PieceType.GENERAL and defender.piece_type == PieceType.SOLDIER:
        return False

    return capture_order_rank(attacker.piece_type) >= capture_order_rank(defender.piece_type)


def piece_symbol(piece: Piece) -> str:
    """棋子的中文字符"""
    return PIECE_SYMBOLS[(piece.color, piece.piece_type)]


def piece_letter(piece: Piece) -> str:
    """棋子的 FEN 字母"""
    letter = PIECE_LETTERS[piece.piece_type]
    return letter if piece.color == Color.RED else letter.lower()


def piece_from_letter(letter: str) -> Piece:
    """从 FEN 字母解析棋子"""
    piece_type = LETTER_TO_TYPE.get(letter.upper())
    if piece_type is None:
        raise ValueError(f"Unknown piece letter: {letter!r}")
    color = Color.RED if letter.isupper() else Color.BLACK
    return Piece(color, piece_type)


def standard_pieces(color: Color) -> list[Piece]:
    """某方的标准 16 个棋子"""
    pieces = []
    for piece_type, count in STANDARD_SET.items():
        pieces.extend(Piece(color, piece_type) for _ in range(count))
    return pieces
