"""
暗棋快照数据模型

Pydantic 模型用于对外暴露局面和历史（前端渲染、JSON 输出）。
公开快照中暗子不带阵营和兵种。
"""

from pydantic import BaseModel


class PositionModel(BaseModel):
    """位置模型"""

    row: int
    col: int


class PieceModel(BaseModel):
    """棋子模型"""

    color: str
    type: str


class CellModel(BaseModel):
    """格子模型"""

    row: int
    col: int
    state: str  # "empty" / "hidden" / "revealed"
    piece: PieceModel | None = None  # 只有明子才有


class HiddenCount(BaseModel):
    """暗子数量"""

    red: int
    black: int


class GameStateModel(BaseModel):
    """局面快照"""

    game_id: str
    rows: int
    cols: int
    cells: list[CellModel]
    current_turn: str
    status: str  # "in_progress" / "won" / "draw"
    winner: str | None = None
    move_count: int
    hidden_count: HiddenCount
    captured: list[PieceModel] = []


class HistoryItemModel(BaseModel):
    """走棋历史项"""

    move_number: int
    action_type: str  # "flip" or "move"
    side: str
    from_pos: PositionModel
    to_pos: PositionModel | None = None
    piece: PieceModel
    captured: PieceModel | None = None
    notation: str


class HistoryModel(BaseModel):
    """历史记录"""

    game_id: str
    moves: list[HistoryItemModel]
    total_moves: int
