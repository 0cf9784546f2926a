"""
暗棋核心类型定义

定义暗棋中所有基础数据类型：阵营、兵种、棋子状态、位置、动作和游戏状态
"""

from dataclasses import dataclass
from enum import Enum
from typing import ClassVar, NamedTuple

# 棋盘大小：4 行 8 列
ROWS = 4
COLS = 8


class Color(Enum):
    """棋子颜色/阵营"""

    RED = "red"
    BLACK = "black"

    @property
    def opposite(self) -> "Color":
        """获取对方阵营"""
        return Color.BLACK if self == Color.RED else Color.RED


class PieceType(Enum):
    """棋子类型（按吃子等级从高到低排列）"""

    # 将/帅
    GENERAL = "general"
    # 士/仕
    ADVISOR = "advisor"
    # 象/相
    ELEPHANT = "elephant"
    # 车
    CHARIOT = "chariot"
    # 马
    HORSE = "horse"
    # 炮
    CANNON = "cannon"
    # 卒/兵
    SOLDIER = "soldier"


class PieceState(Enum):
    """棋子状态"""

    # 暗子 - 反面朝上，身份未知
    HIDDEN = "hidden"
    # 明子 - 正面朝上，身份已知
    REVEALED = "revealed"


class MovementClass(Enum):
    """走法类别"""

    # 上下左右走一格
    ADJACENT = "adjacent"
    # 横竖直线任意格（车、炮）
    SLIDE_ANY = "slide_any"


class ActionType(Enum):
    """动作类型"""

    FLIP = "flip"
    MOVE = "move"
    UNDO = "undo"
    QUERY_STATE = "query_state"
    QUERY_HISTORY = "query_history"
    DEBUG_REVEAL_ALL = "debug_reveal_all"


class GameStatus(Enum):
    """游戏状态"""

    IN_PROGRESS = "in_progress"
    WON = "won"
    DRAW = "draw"


class IllegalReason(Enum):
    """非法动作原因"""

    NOT_YOUR_TURN = "not_your_turn"
    SOURCE_NOT_REVEALED = "source_not_revealed"
    SOURCE_EMPTY = "source_empty"
    DESTINATION_OWN_PIECE = "destination_own_piece"
    DESTINATION_HIDDEN = "destination_hidden"
    ALREADY_REVEALED = "already_revealed"
    PATH_BLOCKED = "path_blocked"
    INSUFFICIENT_SCREEN = "insufficient_screen"
    EXCESSIVE_SCREEN = "excessive_screen"
    RANK_TOO_LOW = "rank_too_low"
    OUT_OF_RANGE = "out_of_range"
    OUT_OF_BOUNDS = "out_of_bounds"


class Position(NamedTuple):
    """棋盘位置 (row, col)

    row: 0-3 (从上到下)
    col: 0-7 (从左到右)
    """

    row: int
    col: int

    def is_valid(self) -> bool:
        """检查位置是否在棋盘范围内"""
        return 0 <= self.row < ROWS and 0 <= self.col < COLS

    def neighbors(self) -> list["Position"]:
        """上下左右四个相邻位置（只返回棋盘内的）"""
        result = []
        for dr, dc in [(-1, 0), (1, 0), (0, -1), (0, 1)]:
            pos = self + (dr, dc)
            if pos.is_valid():
                result.append(pos)
        return result

    def __add__(self, other: tuple[int, int]) -> "Position":
        """位置加偏移量"""
        return Position(self.row + other[0], self.col + other[1])

    def __str__(self) -> str:
        return f"({self.row},{self.col})"


# =============================================================================
# 动作（前端提交给游戏的请求）
# =============================================================================


@dataclass(frozen=True)
class Flip:
    """翻开暗子"""

    pos: Position

    action_type: ClassVar[ActionType] = ActionType.FLIP

    def to_notation(self) -> str:
        return f"F:{self.pos.row}{self.pos.col}"


@dataclass(frozen=True)
class Move:
    """明子走棋（可能吃子）"""

    from_pos: Position
    to_pos: Position

    action_type: ClassVar[ActionType] = ActionType.MOVE

    def to_notation(self) -> str:
        return (
            f"M:{self.from_pos.row}{self.from_pos.col}"
            f"-{self.to_pos.row}{self.to_pos.col}"
        )


@dataclass(frozen=True)
class Undo:
    """悔棋"""

    action_type: ClassVar[ActionType] = ActionType.UNDO


@dataclass(frozen=True)
class QueryState:
    """查询当前局面"""

    action_type: ClassVar[ActionType] = ActionType.QUERY_STATE


@dataclass(frozen=True)
class QueryHistory:
    """查询走棋历史"""

    action_type: ClassVar[ActionType] = ActionType.QUERY_HISTORY


@dataclass(frozen=True)
class DebugRevealAll:
    """调试用：翻开所有暗子（不计入历史、不换手）"""

    action_type: ClassVar[ActionType] = ActionType.DEBUG_REVEAL_ALL


Action = Flip | Move | Undo | QueryState | QueryHistory | DebugRevealAll


# 标准棋子配置（每方 16 个）
STANDARD_SET: dict[PieceType, int] = {
    PieceType.GENERAL: 1,
    PieceType.ADVISOR: 2,
    PieceType.ELEPHANT: 2,
    PieceType.CHARIOT: 2,
    PieceType.HORSE: 2,
    PieceType.CANNON: 2,
    PieceType.SOLDIER: 5,
}

PIECES_PER_SIDE = sum(STANDARD_SET.values())
