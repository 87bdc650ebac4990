from dataclasses import fields

from purgegame.action import Command
from purgegame.ai_demo import Demo
from purgegame.registry import new_player
from purgegame.settings import Settings
from purgegame.structs import CommandType, Dir, TokenReader


def make_settings():
    values = {f.name: 1 for f in fields(Settings)}
    values.update(
        num_players=4,
        num_days=2,
        num_rounds_per_day=4,
        board_rows=12,
        board_cols=12,
        builder_ini_life=60,
        warrior_ini_life=100,
    )
    return Settings(**values)


def state_text(marks=None, citizens=(), round_=0, day=1, status="0 0 0 0"):
    marks = marks or {}
    lines = ["   000000000011", "   012345678901"]
    for i in range(12):
        row = "".join(marks.get((i, j), ".") for j in range(12))
        lines.append(f"{i:02d} {row}")
    lines += ["citizens", str(len(citizens)), "type\tid\tplayer\trow\tcolumn\tweapon\tlife"]
    lines += ["\t".join(str(x) for x in c) for c in citizens]
    lines += ["barricades", "0", "player\trow\tcolumn\tresistance"]
    lines += [f"round {round_}", f"day {day}", "score 0 0 0 0", f"status {status}"]
    return "\n".join(lines) + "\n"


def play(text, seed=1):
    player = Demo(make_settings(), 0, seed)
    player.reset_from_stream(TokenReader(text))
    player.play()
    return player.action.commands


def test_demo_is_registered():
    assert new_player("Demo") is Demo


def test_moves_to_food():
    text = state_text(marks={(6, 5): "F"}, citizens=[("b", 0, 0, 5, 5, "n", 60)])
    assert play(text) == [Command(0, CommandType.MOVE, Dir.DOWN)]


def test_nearly_out_of_time_does_nothing():
    text = state_text(
        marks={(6, 5): "F"},
        citizens=[("b", 0, 0, 5, 5, "n", 60)],
        status="0.95 0 0 0",
    )
    assert play(text) == []


def test_late_rounds_do_nothing():
    text = state_text(marks={(6, 5): "F"}, citizens=[("b", 0, 0, 5, 5, "n", 60)], round_=5)
    assert play(text) == []


def test_builds_in_first_valid_direction():
    text = state_text(citizens=[("b", 0, 0, 0, 0, "n", 60)])
    commands = [c for seed in range(1, 30) for c in play(text, seed)]
    builds = [c for c in commands if c.kind == CommandType.BUILD]
    assert builds
    assert all(c.direction == Dir.DOWN for c in builds)
    assert all(c.cid == 0 for c in commands)


def test_day_moves_stay_on_board():
    text = state_text(citizens=[("b", 0, 0, 0, 0, "n", 60)])
    moves = [
        c for seed in range(1, 30) for c in play(text, seed) if c.kind == CommandType.MOVE
    ]
    assert all(c.direction in (Dir.DOWN, Dir.RIGHT) for c in moves)


def test_night_only_warriors_move():
    text = state_text(
        citizens=[("b", 0, 0, 2, 2, "n", 60), ("w", 1, 0, 5, 5, "h", 100)],
        round_=2,
        day=0,
    )
    commands = [c for seed in range(1, 20) for c in play(text, seed)]
    assert commands
    assert all(c.cid == 1 and c.kind == CommandType.MOVE for c in commands)


def test_ignores_other_players_citizens():
    text = state_text(citizens=[("b", 0, 1, 5, 5, "n", 60)])
    assert play(text) == []