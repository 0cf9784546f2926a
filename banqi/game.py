"""
暗棋游戏管理类

管理回合、胜负判定、走棋历史和悔棋。
所有动作都先经规则引擎判定合法后才修改棋盘（先检查后执行），
非法动作抛出异常且局面保持不变。
"""

from __future__ import annotations

from dataclasses import dataclass
from uuid import uuid4

from banqi.board import BanqiBoard
from banqi.errors import (
    GameOverError,
    IllegalActionError,
    InputError,
    NoHistoryError,
)
from banqi.fen import to_fen
from banqi.logging import logger
from banqi.models import (
    CellModel,
    GameStateModel,
    HiddenCount,
    HistoryItemModel,
    HistoryModel,
    PieceModel,
    PositionModel,
)
from banqi.piece import Piece
from banqi.rules import Illegal, Verdict, check_flip, check_move, has_legal_action, legal_actions
from banqi.types import (
    COLS,
    ROWS,
    Action,
    Color,
    DebugRevealAll,
    Flip,
    GameStatus,
    IllegalReason,
    Move,
    PieceType,
    Position,
    QueryHistory,
    QueryState,
    Undo,
)


@dataclass
class MoveRecord:
    """走棋记录（足以完整撤销该动作）"""

    action: Flip | Move
    side: Color  # 执行动作的一方
    piece: Piece  # 被翻开或被移动的棋子
    captured: Piece | None
    was_hidden: bool  # 动作前棋子是否为暗子
    notation: str


@dataclass
class GameConfig:
    """游戏配置"""

    seed: int | None = None  # 随机种子（用于复现棋局）
    first_turn: Color = Color.RED  # 先手方
    undo_restores_hidden: bool = False  # 撤销翻棋时是否把棋子翻回暗子
    track_repetitions: bool = True  # 是否追踪重复局面
    max_repetitions: int = 3  # 同一局面最大重复次数（达到判和）


@dataclass
class ActionResult:
    """动作执行结果"""

    action: Action
    status: GameStatus
    current_turn: Color
    winner: Color | None = None
    record: MoveRecord | None = None
    capture: Piece | None = None
    state: GameStateModel | None = None
    history: HistoryModel | None = None
    revealed_count: int = 0


def _coerce_position(value: object) -> Position:
    """把 (row, col) 转成 Position，格式错误抛 InputError"""
    if isinstance(value, Position):
        candidate = value
    elif isinstance(value, tuple) and len(value) == 2:
        candidate = Position(*value)
    else:
        raise InputError(f"Invalid position: {value!r}")

    for coord in candidate:
        if isinstance(coord, bool) or not isinstance(coord, int):
            raise InputError(f"Invalid position: {value!r}")
    return candidate


class BanqiGame:
    """暗棋游戏"""

    def __init__(
        self,
        game_id: str | None = None,
        config: GameConfig | None = None,
        board: BanqiBoard | None = None,
    ):
        """创建游戏

        Args:
            game_id: 游戏 ID（默认随机生成）
            config: 游戏配置
            board: 自定义开局棋盘（默认按 config.seed 洗牌发子）
        """
        self.game_id = game_id or str(uuid4())
        self.config = config or GameConfig()
        self._initial_board = board.copy() if board is not None else None
        self._start(board)

    def _start(self, board: BanqiBoard | None) -> None:
        self.board = board if board is not None else BanqiBoard(seed=self.config.seed)
        self.current_turn = self.config.first_turn
        self.move_history: list[MoveRecord] = []
        # 被吃掉的棋子，按吃子顺序
        self.captured_pieces: list[Piece] = []
        self.status = GameStatus.IN_PROGRESS
        self.winner: Color | None = None
        self.initial_piece_count = self.board.count()
        # 重复局面追踪：position_key -> count
        self._position_counts: dict[str, int] = {}
        if self.config.track_repetitions:
            self._record_position()
        self._evaluate_terminal()

    def reset(self, board: BanqiBoard | None = None) -> None:
        """重新开局

        Args:
            board: 指定新棋盘；默认重用自定义开局，或按配置重新发子
        """
        if board is None and self._initial_board is not None:
            board = self._initial_board.copy()
        self._start(board)
        logger.debug(f"[{self.game_id[:8]}] game reset")

    @property
    def is_over(self) -> bool:
        return self.status != GameStatus.IN_PROGRESS

    # =========================================================================
    # 动作
    # =========================================================================

    def apply(self, action: Action) -> ActionResult:
        """执行前端提交的动作"""
        if isinstance(action, Flip):
            return self.flip(action.pos)
        if isinstance(action, Move):
            return self.move(action.from_pos, action.to_pos)
        if isinstance(action, Undo):
            return self.undo()
        if isinstance(action, QueryState):
            return self._result(action, state=self.get_state())
        if isinstance(action, QueryHistory):
            return self._result(action, history=self.get_history())
        if isinstance(action, DebugRevealAll):
            return self._result(action, revealed_count=self.debug_reveal_all())
        raise InputError(f"Unknown action: {action!r}")

    def flip(self, pos: Position | tuple[int, int]) -> ActionResult:
        """翻开暗子"""
        pos = _coerce_position(pos)
        self._ensure_in_progress()
        self._raise_if_illegal(check_flip(self.board, pos))

        piece = self.board.reveal(pos)
        record = MoveRecord(
            action=Flip(pos),
            side=self.current_turn,
            piece=piece,
            captured=None,
            was_hidden=True,
            notation=f"F:{piece.piece_type.value} {pos.row}{pos.col}",
        )
        self._commit(record)
        return self._result(record.action, record=record)

    def move(
        self,
        from_pos: Position | tuple[int, int],
        to_pos: Position | tuple[int, int],
    ) -> ActionResult:
        """走棋（可能吃子）"""
        from_pos = _coerce_position(from_pos)
        to_pos = _coerce_position(to_pos)
        self._ensure_in_progress()
        verdict = check_move(self.board, from_pos, to_pos, self.current_turn)
        self._raise_if_illegal(verdict)

        piece = self.board.get_piece(from_pos)
        captured = None
        if verdict.capture is not None:
            captured = self.board.remove(to_pos)
            self.captured_pieces.append(captured)
        self.board.relocate(from_pos, to_pos)

        notation = piece.piece_type.value
        if captured:
            notation += "x"
        notation += f" {from_pos.row}{from_pos.col}-{to_pos.row}{to_pos.col}"
        record = MoveRecord(
            action=Move(from_pos, to_pos),
            side=self.current_turn,
            piece=piece,
            captured=captured,
            was_hidden=False,
            notation=notation,
        )
        self._commit(record)
        return self._result(record.action, record=record, capture=captured)

    def undo(self) -> ActionResult:
        """撤销上一步

        撤销走棋：棋子回到原位，被吃的棋子放回原处，回合交还。
        撤销翻棋：默认棋子保持明子（已经展示过的信息无法收回），
        只交还回合；config.undo_restores_hidden=True 时翻回暗子。
        撤销后重新判定胜负。
        """
        self._ensure_in_progress()
        if not self.move_history:
            raise NoHistoryError()

        if self.config.track_repetitions:
            self._unrecord_position()

        record = self.move_history.pop()
        action = record.action
        if isinstance(action, Flip):
            if self.config.undo_restores_hidden:
                self.board.hide(action.pos)
        else:
            self.board.relocate(action.to_pos, action.from_pos)
            if record.captured is not None:
                self.board.place(action.to_pos, record.captured, hidden=False)
                self.captured_pieces.pop()

        self.current_turn = record.side
        logger.debug(f"[{self.game_id[:8]}] undo {record.notation}")
        # 翻棋撤销后棋子仍是明子，轮到的一方可能已无子可走
        self._evaluate_terminal()
        self._log_if_over()
        return self._result(Undo(), record=record)

    def debug_reveal_all(self) -> int:
        """翻开所有暗子（调试用，不计入历史、不换手）"""
        self._ensure_in_progress()
        if self.config.track_repetitions:
            self._unrecord_position()
        count = self.board.reveal_all()
        if self.config.track_repetitions:
            self._record_position()
        logger.debug(f"[{self.game_id[:8]}] debug reveal all: {count} pieces")

        self._evaluate_terminal()
        self._log_if_over()
        return count

    # =========================================================================
    # 内部状态转换
    # =========================================================================

    def _ensure_in_progress(self) -> None:
        if self.is_over:
            raise GameOverError()

    def _raise_if_illegal(self, verdict: Verdict) -> None:
        if not isinstance(verdict, Illegal):
            return
        logger.debug(f"[{self.game_id[:8]}] rejected: {verdict.reason.value}")
        if verdict.reason == IllegalReason.OUT_OF_BOUNDS:
            raise InputError("Coordinates out of bounds", reason=verdict.reason)
        raise IllegalActionError(verdict.reason)

    def _commit(self, record: MoveRecord) -> None:
        """记录动作、换手、重新判定胜负

        吃掉对方将/帅立即获胜，不再换手。
        """
        self.move_history.append(record)
        logger.debug(f"[{self.game_id[:8]}] {record.side.value}: {record.notation}")

        if record.captured is not None and record.captured.piece_type == PieceType.GENERAL:
            self._finish(GameStatus.WON, record.side)
        else:
            self.current_turn = self.current_turn.opposite
            if self.config.track_repetitions:
                self._record_position()
            self._evaluate_terminal()
        self._log_if_over()

    def _log_if_over(self) -> None:
        if self.is_over:
            winner = self.winner.value if self.winner else "none"
            logger.info(
                f"[{self.game_id[:8]}] game over: {self.status.value}, "
                f"winner={winner}, moves={len(self.move_history)}"
            )

    def _evaluate_terminal(self) -> None:
        """判定当前局面是否结束

        - 轮到的一方没有任何合法动作：对方获胜
        - 同一局面重复达到上限：和棋
        """
        self._finish(GameStatus.IN_PROGRESS, None)

        if not has_legal_action(self.board, self.current_turn):
            self._finish(GameStatus.WON, self.current_turn.opposite)
            return

        if self.config.track_repetitions:
            if self.get_position_count() >= self.config.max_repetitions:
                self._finish(GameStatus.DRAW, None)

    def _finish(self, status: GameStatus, winner: Color | None) -> None:
        self.status = status
        self.winner = winner

    def _position_key(self) -> str:
        return to_fen(self.board, self.current_turn)

    def _record_position(self) -> None:
        """记录当前局面"""
        key = self._position_key()
        self._position_counts[key] = self._position_counts.get(key, 0) + 1

    def _unrecord_position(self) -> None:
        """撤销当前局面的记录"""
        key = self._position_key()
        if key in self._position_counts:
            self._position_counts[key] -= 1
            if self._position_counts[key] <= 0:
                del self._position_counts[key]

    def get_position_count(self) -> int:
        """获取当前局面出现的次数"""
        return self._position_counts.get(self._position_key(), 0)

    def _result(self, action: Action, **kwargs) -> ActionResult:
        return ActionResult(
            action=action,
            status=self.status,
            current_turn=self.current_turn,
            winner=self.winner,
            **kwargs,
        )

    # =========================================================================
    # 查询
    # =========================================================================

    def get_legal_actions(self) -> list[Flip | Move]:
        """获取当前方的所有合法动作"""
        if self.is_over:
            return []
        return legal_actions(self.board, self.current_turn)

    def get_hidden_count(self, color: Color) -> int:
        """获取某方暗子数量"""
        return self.board.hidden_count(color)

    def get_revealed_count(self, color: Color) -> int:
        """获取某方明子数量"""
        return len(self.board.positions(color, revealed=True))

    def get_state(self) -> GameStateModel:
        """公开局面快照（暗子不暴露身份）"""
        cells = []
        for cell in self.board.cells():
            if cell.is_empty:
                cells.append(CellModel(row=cell.pos.row, col=cell.pos.col, state="empty"))
            elif cell.is_hidden:
                cells.append(CellModel(row=cell.pos.row, col=cell.pos.col, state="hidden"))
            else:
                cells.append(
                    CellModel(
                        row=cell.pos.row,
                        col=cell.pos.col,
                        state="revealed",
                        piece=_piece_model(cell.piece),
                    )
                )

        return GameStateModel(
            game_id=self.game_id,
            rows=ROWS,
            cols=COLS,
            cells=cells,
            current_turn=self.current_turn.value,
            status=self.status.value,
            winner=self.winner.value if self.winner else None,
            move_count=len(self.move_history),
            hidden_count=HiddenCount(
                red=self.get_hidden_count(Color.RED),
                black=self.get_hidden_count(Color.BLACK),
            ),
            captured=[_piece_model(p) for p in self.captured_pieces],
        )

    def get_history(self) -> HistoryModel:
        """走棋历史"""
        items = []
        for number, record in enumerate(self.move_history, start=1):
            action = record.action
            if isinstance(action, Flip):
                from_pos, to_pos = action.pos, None
            else:
                from_pos, to_pos = action.from_pos, action.to_pos
            items.append(
                HistoryItemModel(
                    move_number=number,
                    action_type=action.action_type.value,
                    side=record.side.value,
                    from_pos=PositionModel(row=from_pos.row, col=from_pos.col),
                    to_pos=PositionModel(row=to_pos.row, col=to_pos.col) if to_pos else None,
                    piece=_piece_model(record.piece),
                    captured=_piece_model(record.captured) if record.captured else None,
                    notation=record.notation,
                )
            )
        return HistoryModel(game_id=self.game_id, moves=items, total_moves=len(items))

    def get_move_history(self) -> list[dict]:
        """获取走棋历史（字典形式）"""
        return [item.model_dump() for item in self.get_history().moves]

    def to_dict(self) -> dict:
        """序列化为字典（不暴露暗子身份）"""
        return self.get_state().model_dump()

    def to_full_dict(self) -> dict:
        """序列化为完整字典（包含暗子身份，用于调试）"""
        return {
            "game_id": self.game_id,
            "board": self.board.to_full_dict(),
            "fen": to_fen(self.board, self.current_turn),
            "current_turn": self.current_turn.value,
            "status": self.status.value,
            "winner": self.winner.value if self.winner else None,
            "move_count": len(self.move_history),
        }

    def __repr__(self) -> str:
        return (
            f"BanqiGame({self.game_id}, turn={self.current_turn.value}, "
            f"status={self.status.value}, moves={len(self.move_history)})"
        )


def _piece_model(piece: Piece) -> PieceModel:
    return PieceModel(color=piece.color.value, type=piece.piece_type.value)
