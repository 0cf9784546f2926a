"""
命令解析

把控制台输入的一行文字解析成动作：
- flip <row> <col>
- move <from_row> <from_col> <to_row> <to_col>
- undo / state / history
- flip all（调试：翻开所有暗子）
- help / exit
"""

from __future__ import annotations

from dataclasses import dataclass

from banqi.errors import InputError
from banqi.types import (
    Action,
    DebugRevealAll,
    Flip,
    Move,
    Position,
    QueryHistory,
    QueryState,
    Undo,
)


@dataclass(frozen=True)
class Help:
    """显示帮助"""


@dataclass(frozen=True)
class Exit:
    """退出游戏"""


Command = Action | Help | Exit

_SIMPLE_COMMANDS: dict[str, Command] = {
    "undo": Undo(),
    "state": QueryState(),
    "history": QueryHistory(),
    "help": Help(),
    "exit": Exit(),
    "quit": Exit(),
    "flip all": DebugRevealAll(),
}


def _parse_coordinates(parts: list[str]) -> list[int]:
    try:
        return [int(part) for part in parts]
    except ValueError:
        raise InputError(f"Invalid coordinates: {' '.join(parts)}") from None


def parse_command(text: str) -> Command:
    """解析一行输入

    Raises:
        InputError: 空输入、未知命令或坐标格式错误
    """
    normalized = " ".join(text.strip().lower().split())
    if not normalized:
        raise InputError("Missing command")

    if normalized in _SIMPLE_COMMANDS:
        return _SIMPLE_COMMANDS[normalized]

    command, *args = normalized.split(" ")
    if command == "flip":
        if len(args) != 2:
            raise InputError("Usage: flip <row> <col>")
        row, col = _parse_coordinates(args)
        return Flip(Position(row, col))

    if command == "move":
        if len(args) != 4:
            raise InputError("Usage: move <from_row> <from_col> <to_row> <to_col>")
        from_row, from_col, to_row, to_col = _parse_coordinates(args)
        return Move(Position(from_row, from_col), Position(to_row, to_col))

    raise InputError(f"Unknown command: {command}")


HELP_TEXT = """\
Available commands:
  flip <row> <col>                              - Flip a hidden piece
  move <from_row> <from_col> <to_row> <to_col>  - Move a revealed piece (captures if occupied)
  undo                                          - Undo the last action
  state                                         - Print the current game state
  history                                       - Print the move history
  flip all                                      - (Testing) Reveal every hidden piece
  help                                          - Show this help
  exit                                          - Leave the game

Rules:
  1. All 32 pieces start face down. On your turn either flip any hidden piece or move one of your revealed pieces.
  2. General, Advisor, Elephant, Horse and Soldier move one square up, down, left or right.
  3. Chariot moves any distance along a row or column; the path must be empty.
  4. Cannon moves like the Chariot, but captures only by jumping exactly one piece (of any side).
  5. Capture order: General > Advisor > Elephant > Chariot > Horse > Cannon > Soldier.
     A piece captures the same or lower rank. Soldier may capture the General; the General may not capture a Soldier.
     The Cannon ignores rank.
  6. Hidden pieces block movement and cannot be captured.
  7. Capturing the enemy General wins. A player with no legal action on their turn loses.
"""
