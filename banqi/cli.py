"""
暗棋命令行

- play: 控制台对局（双人轮流输入命令）
- show: 显示一个新发的棋盘
- rules: 显示规则和命令说明

## 使用示例

```bash
python -m banqi.cli play --seed 42
python -m banqi.cli show --seed 42 --full
python -m banqi.cli show --seed 42 --json
```
"""

from __future__ import annotations

import json

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from banqi.board import BanqiBoard
from banqi.commands import HELP_TEXT, Exit, Help, parse_command
from banqi.errors import BanqiError
from banqi.game import ActionResult, BanqiGame, GameConfig
from banqi.logging import setup_logging
from banqi.piece import piece_symbol
from banqi.types import (
    COLS,
    ROWS,
    Color,
    DebugRevealAll,
    Flip,
    GameStatus,
    Move,
    Position,
    QueryHistory,
    QueryState,
    Undo,
)

console = Console()
app = typer.Typer(help="Banqi (暗棋) - Chinese dark chess on a 4x8 board")

COLOR_STYLES = {Color.RED: "bold red", Color.BLACK: "bold"}


def render_board(board: BanqiBoard, full: bool = False) -> Table:
    """渲染棋盘

    Args:
        board: 棋盘
        full: 是否显示暗子真实身份（调试用）
    """
    table = Table(show_header=True, show_lines=True, box=None, pad_edge=False)
    table.add_column("", justify="right", style="dim")
    for col in range(COLS):
        table.add_column(str(col), justify="center")

    for row in range(ROWS):
        cells = [str(row)]
        for col in range(COLS):
            cell = board.get(Position(row, col))
            if cell.is_empty:
                cells.append("[dim]·[/dim]")
            elif cell.is_hidden:
                if full:
                    style = COLOR_STYLES[cell.piece.color]
                    cells.append(f"[{style} dim]({piece_symbol(cell.piece)})[/]")
                else:
                    cells.append("[dim]暗[/dim]")
            else:
                style = COLOR_STYLES[cell.piece.color]
                cells.append(f"[{style}]{piece_symbol(cell.piece)}[/]")
        table.add_row(*cells)
    return table


def render_history(game: BanqiGame) -> Table:
    """渲染走棋历史"""
    table = Table(title="Move History")
    table.add_column("#", justify="right")
    table.add_column("Side")
    table.add_column("Action")
    table.add_column("Captured")

    for item in game.get_history().moves:
        captured = "-"
        if item.captured:
            captured = f"{item.captured.color} {item.captured.type}"
        table.add_row(str(item.move_number), item.side, item.notation, captured)
    return table


def _status_line(game: BanqiGame) -> str:
    if game.status == GameStatus.WON:
        return f"[bold]{game.winner.value.capitalize()} wins![/bold]"
    if game.status == GameStatus.DRAW:
        return "[bold]Draw.[/bold]"
    red_hidden = game.get_hidden_count(Color.RED)
    black_hidden = game.get_hidden_count(Color.BLACK)
    return (
        f"Turn: [{COLOR_STYLES[game.current_turn]}]{game.current_turn.value}[/] | "
        f"moves: {len(game.move_history)} | hidden: red {red_hidden}, black {black_hidden}"
    )


def _report(game: BanqiGame, result: ActionResult) -> None:
    """输出动作结果"""
    action = result.action
    record = result.record

    if isinstance(action, Flip):
        console.print(f"{record.side.value.capitalize()} flipped {piece_symbol(record.piece)} at {action.pos}.")
        console.print(render_board(game.board))
    elif isinstance(action, Move):
        message = f"{record.side.value.capitalize()} moved {action.from_pos} -> {action.to_pos}"
        if result.capture is not None:
            message += f", captured {piece_symbol(result.capture)}"
        console.print(message + ".")
        console.print(render_board(game.board))
    elif isinstance(action, Undo):
        console.print(f"Undone: {escape(record.notation)}")
        console.print(render_board(game.board))
    elif isinstance(action, QueryState):
        console.print(render_board(game.board))
    elif isinstance(action, QueryHistory):
        console.print(render_history(game))
    elif isinstance(action, DebugRevealAll):
        console.print(f"All pieces flipped for testing ({result.revealed_count}).")
        console.print(render_board(game.board))

    console.print(_status_line(game))


@app.command()
def play(
    seed: int | None = typer.Option(None, "--seed", "-s", help="随机种子"),
    first: str = typer.Option("red", "--first", help="先手方 (red/black)"),
    restore_hidden_on_undo: bool = typer.Option(
        False, "--restore-hidden-on-undo", help="撤销翻棋时翻回暗子"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="输出调试日志"),
    log_file: bool = typer.Option(False, "--log-file", help="日志写入 logs/app.log"),
) -> None:
    """控制台双人对局"""
    setup_logging(verbose=verbose, log_to_file=log_file)

    try:
        first_turn = Color(first.lower())
    except ValueError:
        console.print(f"[red]Error:[/red] invalid side {escape(first)!r} (expected red/black)")
        raise typer.Exit(1) from None

    config = GameConfig(
        seed=seed,
        first_turn=first_turn,
        undo_restores_hidden=restore_hidden_on_undo,
    )
    game = BanqiGame(config=config)
    console.print(render_board(game.board))
    console.print(_status_line(game))
    console.print("Type 'help' for commands.")

    while not game.is_over:
        try:
            text = console.input(f"[{COLOR_STYLES[game.current_turn]}]{game.current_turn.value}[/] > ")
        except EOFError:
            break

        try:
            command = parse_command(text)
            if isinstance(command, Exit):
                break
            if isinstance(command, Help):
                console.print(HELP_TEXT, markup=False)
                continue
            result = game.apply(command)
        except BanqiError as e:
            console.print(f"[red]Error:[/red] {escape(str(e))}")
            continue

        _report(game, result)

    console.print("Game over. Thanks for playing!")


@app.command()
def show(
    seed: int | None = typer.Option(None, "--seed", "-s", help="随机种子"),
    full: bool = typer.Option(False, "--full", help="显示暗子真实身份"),
    output_json: bool = typer.Option(False, "--json", help="JSON 输出"),
) -> None:
    """显示一个新发的棋盘"""
    game = BanqiGame(config=GameConfig(seed=seed))

    if output_json:
        if full:
            print(json.dumps(game.to_full_dict(), indent=2, ensure_ascii=False))
        else:
            print(game.get_state().model_dump_json(indent=2))
        return

    console.print(render_board(game.board, full=full))
    console.print(_status_line(game))


@app.command()
def rules() -> None:
    """显示规则和命令说明"""
    console.print(HELP_TEXT, markup=False)


if __name__ == "__main__":
    app()
