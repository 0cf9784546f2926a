"""
暗棋游戏测试
"""

import pytest

from banqi.errors import GameOverError, IllegalActionError, InputError, NoHistoryError
from banqi.fen import parse_fen
from banqi.game import BanqiGame, GameConfig
from banqi.piece import Piece
from banqi.types import (
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


def game_from_fen(fen: str, **config) -> BanqiGame:
    """用局面记号创建游戏，走棋方作为先手"""
    board, turn = parse_fen(fen)
    return BanqiGame(config=GameConfig(first_turn=turn, **config), board=board)


def state_of(game: BanqiGame):
    return game.board.snapshot(), game.current_turn, len(game.move_history)


@pytest.fixture
def game() -> BanqiGame:
    return BanqiGame(game_id="test-game", config=GameConfig(seed=42))


class TestGameInit:
    """测试游戏初始化"""

    def test_initial_state(self, game: BanqiGame):
        """开局红方先走，双方各 16 个暗子"""
        assert game.current_turn == Color.RED
        assert game.status == GameStatus.IN_PROGRESS
        assert game.winner is None
        assert game.move_history == []
        assert game.get_hidden_count(Color.RED) == 16
        assert game.get_hidden_count(Color.BLACK) == 16

    def test_first_turn_config(self):
        """可配置黑方先走"""
        game = BanqiGame(config=GameConfig(seed=1, first_turn=Color.BLACK))
        assert game.current_turn == Color.BLACK

    def test_seed_reproduces_game(self):
        """相同种子复现棋局"""
        a = BanqiGame(config=GameConfig(seed=9))
        b = BanqiGame(config=GameConfig(seed=9))
        assert a.board == b.board

    def test_initial_legal_actions_are_all_flips(self, game: BanqiGame):
        """开局只能翻棋"""
        actions = game.get_legal_actions()
        assert len(actions) == 32
        assert all(isinstance(a, Flip) for a in actions)


class TestFlip:
    """测试翻棋"""

    def test_flip_reveals_and_passes_turn(self, game: BanqiGame):
        """翻棋后换手并记录历史"""
        hidden_piece = game.board.get_piece(Position(1, 2))
        result = game.flip(Position(1, 2))

        cell = game.board.get(Position(1, 2))
        assert cell.is_revealed
        assert cell.piece == hidden_piece
        assert result.record.piece == hidden_piece
        assert result.record.side == Color.RED
        assert game.current_turn == Color.BLACK
        assert len(game.move_history) == 1

    def test_flip_opponent_piece_allowed(self):
        """可以翻出对方的棋子"""
        game = game_from_fen("?k?K6/8/8/8 r")
        game.flip((0, 0))
        assert game.board.get(Position(0, 0)).piece.color == Color.BLACK

    def test_flip_accepts_tuple(self, game: BanqiGame):
        """位置可以用元组"""
        game.flip((0, 0))
        assert game.board.get(Position(0, 0)).is_revealed

    def test_flip_notation(self):
        """翻棋记号"""
        game = game_from_fen("?K?p6/8/8/8 r")
        result = game.flip((0, 0))
        assert result.record.notation == "F:general 00"


class TestRejectedActions:
    """测试非法动作不改变局面"""

    def test_flip_revealed_piece(self, game: BanqiGame):
        """重复翻同一个子"""
        game.flip((0, 0))
        before = state_of(game)
        with pytest.raises(IllegalActionError) as exc_info:
            game.flip((0, 0))
        assert exc_info.value.reason == IllegalReason.ALREADY_REVEALED
        assert state_of(game) == before

    def test_move_hidden_piece(self, game: BanqiGame):
        """走暗子"""
        before = state_of(game)
        with pytest.raises(IllegalActionError) as exc_info:
            game.move((0, 0), (0, 1))
        assert exc_info.value.reason == IllegalReason.SOURCE_NOT_REVEALED
        assert state_of(game) == before

    def test_move_opponent_piece(self):
        """走对方的棋子"""
        game = game_from_fen("h7/8/8/7P r")
        before = state_of(game)
        with pytest.raises(IllegalActionError) as exc_info:
            game.move((0, 0), (0, 1))
        assert exc_info.value.reason == IllegalReason.NOT_YOUR_TURN
        assert state_of(game) == before

    def test_cannon_without_screen(self):
        """炮没有炮架吃子"""
        game = game_from_fen("C1p5/8/8/8 r")
        before = state_of(game)
        with pytest.raises(IllegalActionError) as exc_info:
            game.move((0, 0), (0, 2))
        assert exc_info.value.reason == IllegalReason.INSUFFICIENT_SCREEN
        assert state_of(game) == before
        assert game.captured_pieces == []

    def test_out_of_bounds_is_input_error(self, game: BanqiGame):
        """越界是输入错误"""
        before = state_of(game)
        with pytest.raises(InputError) as exc_info:
            game.flip((4, 0))
        assert exc_info.value.reason == IllegalReason.OUT_OF_BOUNDS
        assert state_of(game) == before

    @pytest.mark.parametrize("pos", [("a", 1), (1,), (1, 2, 3), None, (1.0, 2)])
    def test_malformed_position(self, game: BanqiGame, pos):
        """格式错误的位置"""
        with pytest.raises(InputError):
            game.flip(pos)


class TestMoveAndCapture:
    """测试走棋和吃子"""

    def test_plain_move(self):
        """车走到空格"""
        game = game_from_fen("R7/8/8/7r r")
        result = game.move((0, 0), (0, 5))
        assert result.capture is None
        assert game.board.is_empty(Position(0, 0))
        assert game.board.get_piece(Position(0, 5)) == Piece(Color.RED, PieceType.CHARIOT)
        assert game.current_turn == Color.BLACK

    def test_chariot_capture(self):
        """车吃马并记录被吃的棋子"""
        game = game_from_fen("R2h4/8/8/7c r")
        result = game.move((0, 0), (0, 3))
        assert result.capture == Piece(Color.BLACK, PieceType.HORSE)
        assert result.record.notation == "chariotx 00-03"
        assert game.captured_pieces == [Piece(Color.BLACK, PieceType.HORSE)]

    def test_chariot_path_blocked(self):
        """车被中间的兵挡住"""
        game = game_from_fen("R1Ph4/8/8/8 r")
        with pytest.raises(IllegalActionError) as exc_info:
            game.move((0, 0), (0, 3))
        assert exc_info.value.reason == IllegalReason.PATH_BLOCKED

    def test_cannon_capture_over_screen(self):
        """炮隔暗子吃士"""
        game = game_from_fen("C?Pa5/8/8/7c r")
        result = game.move((0, 0), (0, 2))
        assert result.capture == Piece(Color.BLACK, PieceType.ADVISOR)
        assert game.status == GameStatus.IN_PROGRESS

    def test_pieces_are_conserved(self):
        """棋盘上的棋子加上被吃的棋子数量不变"""
        game = game_from_fen("R2h4/8/8/7c r")
        game.move((0, 0), (0, 3))
        assert game.board.count() + len(game.captured_pieces) == game.initial_piece_count


class TestUndo:
    """测试悔棋"""

    def test_undo_move_restores_position(self):
        """撤销走棋恢复局面和回合"""
        game = game_from_fen("R7/8/8/7r r")
        before = state_of(game)
        game.move((0, 0), (0, 1))
        game.undo()
        assert state_of(game) == before

    def test_undo_capture_restores_piece(self):
        """撤销吃子把被吃的棋子放回"""
        game = game_from_fen("R2h4/8/8/7c r")
        before = state_of(game)
        game.move((0, 0), (0, 3))
        result = game.undo()
        assert state_of(game) == before
        assert game.board.get(Position(0, 3)).is_revealed
        assert game.captured_pieces == []
        assert result.record.captured == Piece(Color.BLACK, PieceType.HORSE)

    def test_undo_flip_keeps_piece_revealed(self, game: BanqiGame):
        """默认撤销翻棋后棋子保持明子"""
        game.flip((2, 2))
        game.undo()
        assert game.board.get(Position(2, 2)).is_revealed
        assert game.current_turn == Color.RED
        assert game.move_history == []

    def test_undo_flip_restores_hidden_when_configured(self):
        """配置后撤销翻棋翻回暗子"""
        game = BanqiGame(config=GameConfig(seed=42, undo_restores_hidden=True))
        before = state_of(game)
        game.flip((2, 2))
        game.undo()
        assert state_of(game) == before

    def test_undo_without_history(self, game: BanqiGame):
        """没有历史不能悔棋"""
        with pytest.raises(NoHistoryError):
            game.undo()

    def test_apply_undo(self):
        """通过 apply 悔棋"""
        game = game_from_fen("R7/8/8/7r r")
        game.apply(Move(Position(0, 0), Position(0, 1)))
        result = game.apply(Undo())
        assert result.current_turn == Color.RED
        assert game.board.get_piece(Position(0, 0)) is not None

    def test_undo_flip_leaving_no_action_loses(self):
        """撤销翻棋后棋子仍是明子，红帅被两个卒堵住无子可走，黑方获胜"""
        game = game_from_fen("K?p6/p7/8/8 r")
        game.flip((0, 1))
        result = game.undo()
        assert game.status == GameStatus.WON
        assert game.winner == Color.BLACK
        assert result.status == GameStatus.WON
        assert game.get_legal_actions() == []

    def test_undo_flip_restoring_hidden_keeps_game_going(self):
        """翻回暗子时红方还可以再翻，对局继续"""
        game = game_from_fen("K?p6/p7/8/8 r", undo_restores_hidden=True)
        game.flip((0, 1))
        game.undo()
        assert game.status == GameStatus.IN_PROGRESS
        assert game.current_turn == Color.RED


class TestGameOver:
    """测试胜负判定"""

    def test_capture_general_wins(self):
        """红将暗子在 (0,0)，黑卒暗子在 (0,1)，黑方先走"""
        game = game_from_fen("?K?p6/8/8/8 b")
        game.apply(Flip(Position(0, 0)))
        game.apply(Flip(Position(0, 1)))
        result = game.apply(Move(Position(0, 1), Position(0, 0)))

        assert result.capture == Piece(Color.RED, PieceType.GENERAL)
        assert game.status == GameStatus.WON
        assert game.winner == Color.BLACK
        assert result.status == GameStatus.WON
        assert result.winner == Color.BLACK
        # 吃将后立即结束，不再换手
        assert game.current_turn == Color.BLACK
        assert result.current_turn == Color.BLACK

    def test_no_pieces_loses_immediately(self):
        """开局就无子可走的一方直接输"""
        game = game_from_fen("k7/8/8/8 r")
        assert game.status == GameStatus.WON
        assert game.winner == Color.BLACK

    def test_no_legal_move_loses(self):
        """黑将被两个红兵堵住，将不能吃兵"""
        game = game_from_fen("kP6/P7/8/7R r")
        game.move((3, 7), (3, 6))
        assert game.status == GameStatus.WON
        assert game.winner == Color.RED

    def test_actions_after_game_over(self):
        """对局结束后不接受动作"""
        game = game_from_fen("k7/8/8/8 r")
        with pytest.raises(GameOverError):
            game.flip((0, 0))
        with pytest.raises(GameOverError):
            game.undo()
        assert game.get_legal_actions() == []

    def test_repetition_draw(self):
        """同一局面出现三次判和"""
        game = game_from_fen("R7/8/8/7r r")
        cycle = [((0, 0), (0, 1)), ((3, 7), (3, 6)), ((0, 1), (0, 0)), ((3, 6), (3, 7))]
        for from_pos, to_pos in cycle + cycle[:3]:
            game.move(from_pos, to_pos)
            assert game.status == GameStatus.IN_PROGRESS
        game.move(*cycle[3])
        assert game.status == GameStatus.DRAW
        assert game.winner is None

    def test_repetition_tracking_disabled(self):
        """关闭重复局面追踪不判和"""
        game = game_from_fen("R7/8/8/7r r", track_repetitions=False)
        cycle = [((0, 0), (0, 1)), ((3, 7), (3, 6)), ((0, 1), (0, 0)), ((3, 6), (3, 7))]
        for from_pos, to_pos in cycle * 3:
            game.move(from_pos, to_pos)
        assert game.status == GameStatus.IN_PROGRESS

    def test_reset(self):
        """重新开局恢复自定义开局"""
        game = game_from_fen("?K?p6/8/8/8 b")
        initial = game.board.copy()
        game.flip((0, 0))
        game.flip((0, 1))
        game.move((0, 1), (0, 0))
        assert game.is_over

        game.reset()
        assert game.status == GameStatus.IN_PROGRESS
        assert game.board == initial
        assert game.current_turn == Color.BLACK
        assert game.move_history == []
        assert game.captured_pieces == []


class TestQueries:
    """测试查询动作"""

    def test_query_state(self, game: BanqiGame):
        """局面快照不暴露暗子"""
        game.flip((0, 0))
        result = game.apply(QueryState())
        state = result.state
        assert state.game_id == "test-game"
        assert state.current_turn == "black"
        assert state.move_count == 1
        assert state.hidden_count.red + state.hidden_count.black == 31
        revealed = [c for c in state.cells if c.state == "revealed"]
        assert len(revealed) == 1
        assert all(c.piece is None for c in state.cells if c.state == "hidden")

    def test_query_history(self):
        """历史记录包含吃子信息"""
        game = game_from_fen("R2h4/8/8/7c r")
        game.move((0, 0), (0, 3))
        result = game.apply(QueryHistory())
        history = result.history
        assert history.total_moves == 1
        item = history.moves[0]
        assert item.action_type == "move"
        assert item.side == "red"
        assert item.captured.type == "horse"
        assert (item.to_pos.row, item.to_pos.col) == (0, 3)

    def test_queries_do_not_change_state(self, game: BanqiGame):
        """查询不改变局面"""
        before = state_of(game)
        game.apply(QueryState())
        game.apply(QueryHistory())
        assert state_of(game) == before

    def test_debug_reveal_all(self, game: BanqiGame):
        """全部翻开不计入历史、不换手"""
        result = game.apply(DebugRevealAll())
        assert result.revealed_count == 32
        assert game.board.hidden_count() == 0
        assert game.current_turn == Color.RED
        assert game.move_history == []

    def test_to_dict_hides_identity(self, game: BanqiGame):
        """字典形式不暴露暗子"""
        data = game.to_dict()
        assert data["status"] == "in_progress"
        assert all(cell["piece"] is None for cell in data["cells"])

    def test_to_full_dict(self, game: BanqiGame):
        """完整字典包含所有棋子"""
        data = game.to_full_dict()
        assert len(data["board"]["pieces"]) == 32
        assert data["fen"].endswith(" r")

    def test_get_move_history(self):
        """字典形式的走棋历史"""
        game = game_from_fen("?K?p6/8/8/8 r")
        game.flip((0, 1))
        history = game.get_move_history()
        assert history[0]["notation"] == "F:soldier 01"
        assert history[0]["to_pos"] is None

    def test_debug_reveal_all_leaving_no_action_loses(self):
        """全部翻开后红帅被两个卒堵住，黑方获胜"""
        game = game_from_fen("K?p6/?p7/8/8 r")
        game.apply(DebugRevealAll())
        assert game.status == GameStatus.WON
        assert game.winner == Color.BLACK

    def test_debug_reveal_all_after_game_over(self):
        """对局结束后不能再翻开暗子"""
        game = game_from_fen("?K?p?P5/8/8/8 b")
        game.flip((0, 0))
        game.flip((0, 1))
        game.move((0, 1), (0, 0))
        assert game.is_over
        with pytest.raises(GameOverError):
            game.apply(DebugRevealAll())
        assert game.board.get(Position(0, 2)).is_hidden

    def test_debug_reveal_all_records_position(self, game: BanqiGame):
        """全部翻开后的局面计入重复局面统计"""
        game.flip((0, 0))
        game.debug_reveal_all()
        assert game.get_position_count() == 1
