import io

import pytest

from purgegame.action import Action, Command
from purgegame.board import Board
from purgegame.mapgen import num_connected_components
from purgegame.player import Player
from purgegame.settings import Settings
from purgegame.structs import (
    BonusType,
    CellType,
    Citizen,
    CitizenType,
    CommandType,
    Dir,
    GameError,
    Pos,
    TokenReader,
    WeaponType,
)

SETTINGS = {
    "NUM_PLAYERS": 4,
    "NUM_DAYS": 2,
    "NUM_ROUNDS_PER_DAY": 10,
    "BOARD_ROWS": 15,
    "BOARD_COLS": 30,
    "NUM_INI_BUILDERS": 2,
    "NUM_INI_WARRIORS": 1,
    "NUM_INI_MONEY": 3,
    "NUM_INI_FOOD": 2,
    "NUM_INI_GUNS": 1,
    "NUM_INI_BAZOOKAS": 1,
    "BUILDER_INI_LIFE": 60,
    "WARRIOR_INI_LIFE": 100,
    "MONEY_POINTS": 5,
    "KILL_BUILDER_POINTS": 50,
    "KILL_WARRIOR_POINTS": 100,
    "FOOD_INCR_LIFE": 20,
    "LIFE_LOST_IN_ATTACK": 30,
    "BUILDER_STRENGTH_ATTACK": 1,
    "HAMMER_STRENGTH_ATTACK": 10,
    "GUN_STRENGTH_ATTACK": 100,
    "BAZOOKA_STRENGTH_ATTACK": 1000,
    "BUILDER_STRENGTH_DEMOLISH": 5,
    "HAMMER_STRENGTH_DEMOLISH": 10,
    "GUN_STRENGTH_DEMOLISH": 20,
    "BAZOOKA_STRENGTH_DEMOLISH": 50,
    "NUM_ROUNDS_REGEN_BUILDER": 20,
    "NUM_ROUNDS_REGEN_WARRIOR": 40,
    "NUM_ROUNDS_REGEN_FOOD": 10,
    "NUM_ROUNDS_REGEN_MONEY": 5,
    "NUM_ROUNDS_REGEN_WEAPON": 30,
    "BARRICADE_RESISTANCE_STEP": 25,
    "BARRICADE_MAX_RESISTANCE": 150,
    "MAX_NUM_BARRICADES": 3,
}

ROWS, COLS = 15, 30
BASE_ITEMS = {
    (0, 0): "M",
    (0, 1): "M",
    (0, 2): "M",
    (1, 0): "F",
    (1, 1): "F",
    (2, 0): "G",
    (2, 1): "Z",
}


def settings_text():
    lines = ["ThePurge 1.0", ""] + [f"{k}\t{v}" for k, v in SETTINGS.items()]
    return "\n".join(lines) + "\n"


def base_citizens():
    citizens = {}
    for pl in range(4):
        citizens[3 * pl] = ["b", 3 * pl, pl, 14, 1 + 7 * pl, "n", 60]
        citizens[3 * pl + 1] = ["b", 3 * pl + 1, pl, 14, 3 + 7 * pl, "n", 60]
        citizens[3 * pl + 2] = ["w", 3 * pl + 2, pl, 12, 1 + 7 * pl, "h", 100]
    return citizens


def fixed_text(positions=None, items=None, barricades=(), drop_items=(), lives=None):
    citizens = base_citizens()
    for cid, (r, c) in (positions or {}).items():
        citizens[cid][3] = r
        citizens[cid][4] = c
    for cid, life in (lives or {}).items():
        citizens[cid][6] = life
    cells = dict(BASE_ITEMS)
    cells.update(items or {})
    for pos in drop_items:
        del cells[pos]
    grid = [["."] * COLS for _ in range(ROWS)]
    for (r, c), ch in cells.items():
        grid[r][c] = ch
    lines = [
        "FIXED",
        "   " + "".join(str(j // 10) for j in range(COLS)),
        "   " + "".join(str(j % 10) for j in range(COLS)),
    ]
    lines += [f"{i:02d} {''.join(row)}" for i, row in enumerate(grid)]
    lines += ["citizens", str(len(citizens)), "type id player row column weapon life"]
    lines += [" ".join(map(str, c)) for c in citizens.values()]
    lines += ["barricades", str(len(barricades)), "player row column resistance"]
    lines += [" ".join(map(str, b)) for b in barricades]
    return settings_text() + "\n".join(lines) + "\n"


def make_board(seed=7, **kwargs):
    return Board(TokenReader(fixed_text(**kwargs)), seed)


def random_board(seed=3):
    return Board(TokenReader(settings_text() + "RANDOM\n"), seed)


def count_cells(board, predicate):
    return sum(1 for row in board.grid for cell in row if predicate(cell))


def move(cid, d):
    return Command(cid, CommandType.MOVE, d)


def build(cid, d):
    return Command(cid, CommandType.BUILD, d)


# ---------------------------------------------------------------- loading


def test_fixed_board_loads_citizens_and_fresh_id():
    board = make_board()
    assert len(board.citizens) == 12
    assert board.builders(1) == [3, 4]
    assert board.warriors(3) == [11]
    assert board.fresh_id == max(board.citizens) + 1
    assert board.ok()


def test_fixed_board_with_missing_money_is_rejected():
    with pytest.raises(GameError):
        make_board(drop_items=[(0, 0)])


def test_fixed_board_with_wrong_life_is_rejected():
    with pytest.raises(GameError):
        make_board(lives={0: 59})


def test_unknown_generator_is_rejected():
    with pytest.raises(GameError):
        Board(TokenReader(settings_text() + "BOGUS\n"), 1)


def test_random_board_matches_settings():
    board = random_board()
    s = board.settings
    for pl in range(s.num_players):
        assert len(board.builders(pl)) == s.num_ini_builders
        assert len(board.warriors(pl)) == s.num_ini_warriors
    assert count_cells(board, lambda c: c.bonus == BonusType.MONEY) == s.num_ini_money
    assert count_cells(board, lambda c: c.bonus == BonusType.FOOD) == s.num_ini_food
    assert count_cells(board, lambda c: c.weapon == WeaponType.GUN) == s.num_ini_guns
    assert count_cells(board, lambda c: c.weapon == WeaponType.BAZOOKA) == s.num_ini_bazookas
    assert count_cells(board, lambda c: c.type == CellType.BUILDING) > 0
    assert num_connected_components(board.grid) == 1
    assert board.fresh_id > max(board.citizens)
    assert board.ok()


def test_random_board_is_reproducible():
    first = random_board(11)
    second = random_board(11)
    assert sorted(first.citizens) == list(range(12))
    assert count_cells(first, lambda c: c.type == CellType.BUILDING) > 0
    assert first.grid == second.grid
    assert first.citizens == second.citizens
    out_first, out_second = io.StringIO(), io.StringIO()
    first.write_state(out_first)
    second.write_state(out_second)
    assert "citizens\n12\n" in out_first.getvalue()
    assert out_first.getvalue() == out_second.getvalue()


# ----------------------------------------------------------------- output


def test_write_settings_round_trips():
    board = make_board()
    out = io.StringIO()
    board.write_settings(out)
    assert Settings.read(TokenReader(out.getvalue())) == board.settings


def test_write_names_and_name():
    board = make_board()
    board.names = ["a", "b", "c", "d"]
    out = io.StringIO()
    board.write_names(out)
    assert out.getvalue().split() == ["names", "a", "b", "c", "d"]
    assert board.name(2) == "c"
    with pytest.raises(GameError):
        board.name(9)


def test_write_state_round_trips_through_player():
    board = make_board(positions={0: (7, 7)}, barricades=[(0, 7, 7, 25)])
    board.scores[2] = 5
    out = io.StringIO()
    board.write_state(out)
    text = out.getvalue()
    assert "\n00 MMM" in text
    assert "\n07 " + "." * 7 + "c" in text
    assert "citizens\n12\n" in text

    player = Player(board.settings, 0, 1)
    player.reset_from_stream(TokenReader(text))
    assert player.grid == board.grid
    assert player.citizens == board.citizens
    assert player.player_barricades == board.player_barricades
    assert player.scores == board.scores
    assert player.round() == board.round()
    assert player.is_day() == board.is_day()


def test_winners_and_results():
    board = make_board()
    board.names = ["a", "b", "c", "d"]
    board.scores = [5, 10, 10, 0]
    assert board.winners() == [1, 2]
    err = io.StringIO()
    board.print_results(err)
    assert "info: player(s) b c got top score" in err.getvalue()
    assert "info: player a got score 5" in err.getvalue()


# ----------------------------------------------------------------- moves


def test_move_onto_money_scores():
    board = make_board(positions={0: (1, 2)})
    assert board.execute(move(0, Dir.UP), set())
    assert board.citizen(0).pos == Pos(0, 2)
    assert board.score(0) == board.settings.money_points
    assert board.cell(Pos(0, 2)).bonus == BonusType.NO_BONUS
    assert board.cell(Pos(0, 2)).id == 0
    assert board.cell(Pos(1, 2)).id == -1


def test_move_onto_food_heals_up_to_max():
    board = make_board(positions={0: (1, 2)})
    board.citizens[0].life = 50
    assert board.execute(move(0, Dir.LEFT), set())
    assert board.citizen(0).life == board.settings.builder_ini_life
    assert board.cell(Pos(1, 1)).bonus == BonusType.NO_BONUS


def test_warrior_takes_weapon_builder_destroys_it():
    board = make_board(positions={2: (3, 0), 0: (3, 1)})
    assert board.execute(move(2, Dir.UP), set())
    assert board.citizen(2).weapon == WeaponType.GUN
    assert board.execute(move(0, Dir.UP), set())
    assert board.citizen(0).weapon == WeaponType.NO_WEAPON
    assert board.cell(Pos(2, 1)).weapon == WeaponType.NO_WEAPON
    assert board.citizen(0).pos == Pos(2, 1)


def test_cannot_move_into_building_or_off_board():
    board = make_board(positions={0: (5, 4)}, items={(5, 5): "B"})
    assert not board.execute(move(0, Dir.RIGHT), set())
    assert board.citizen(0).pos == Pos(5, 4)
    assert not board.execute(move(1, Dir.DOWN), set())
    assert board.citizen(1).pos == Pos(14, 3)


def test_invalid_commands_are_ignored():
    board = make_board()
    assert not board.execute(Command(0, None, Dir.UP), set())
    assert not board.execute(Command(0, CommandType.MOVE, None), set())
    assert not board.execute(move(0, Dir.UP), {0})
    assert not board.execute(move(99, Dir.UP), set())
    assert board.citizen(0).pos == Pos(14, 1)


def test_day_barricades_own_free_versus_rival():
    board = make_board(positions={0: (7, 6)}, barricades=[(0, 7, 7, 25)])
    assert board.execute(move(0, Dir.RIGHT), set())
    assert board.citizen(0).pos == Pos(7, 7)

    rival = make_board(positions={0: (7, 6)}, barricades=[(1, 7, 7, 25)])
    assert not rival.execute(move(0, Dir.RIGHT), set())
    assert rival.citizen(0).pos == Pos(7, 6)


def test_night_demolishes_rival_barricade():
    board = make_board(positions={2: (8, 8)}, barricades=[(1, 8, 9, 25)])
    board.day = False
    assert board.execute(move(2, Dir.RIGHT), set())
    assert board.citizen(2).pos == Pos(8, 8)
    assert board.cell(Pos(8, 9)).resistance == 25 - board.settings.hammer_strength_demolish


def test_night_demolition_removes_weak_barricade():
    board = make_board(positions={2: (8, 8)}, barricades=[(1, 8, 9, 10)])
    board.day = False
    assert board.execute(move(2, Dir.RIGHT), set())
    assert board.cell(Pos(8, 9)).resistance == -1
    assert board.cell(Pos(8, 9)).b_owner == -1
    assert board.barricades(1) == []
    assert board.ok()


# ---------------------------------------------------------------- attacks


def test_no_attacks_at_day_or_on_own_clan():
    board = make_board(positions={2: (8, 8), 5: (8, 9), 0: (9, 8)})
    assert not board.execute(move(2, Dir.RIGHT), set())
    board.day = False
    assert not board.execute(move(2, Dir.DOWN), set())
    assert board.citizen(2).life == board.citizen(5).life == board.settings.warrior_ini_life


def test_night_attack_costs_loser_life():
    board = make_board(positions={2: (8, 8), 5: (8, 9)})
    board.day = False
    assert board.execute(move(2, Dir.RIGHT), set())
    s = board.settings
    assert board.citizen(2).pos == Pos(8, 8)
    lives = sorted([board.citizen(2).life, board.citizen(5).life])
    assert lives == sorted([s.warrior_ini_life - s.life_lost_in_attack, s.warrior_ini_life])


def test_lethal_attack_kills_and_scores():
    board = make_board(positions={2: (8, 8), 5: (8, 9)})
    board.day = False
    lost = board.settings.life_lost_in_attack
    board.citizens[2].life = lost
    board.citizens[5].life = lost
    killed = set()
    assert board.execute(move(2, Dir.RIGHT), killed)
    assert len(killed) == 1
    dead = next(iter(killed))
    survivor = 5 if dead == 2 else 2
    assert dead not in board.citizens
    assert len(board.citizens) == 11
    winner_player = board.citizen(survivor).player
    assert board.score(winner_player) == board.settings.kill_warrior_points
    assert not board.execute(move(dead, Dir.UP), killed)
    assert board.ok()


def test_first_citizen_wins_attack_follows_strength():
    board = make_board()
    strong = Citizen(CitizenType.WARRIOR, 1, 0, Pos(), WeaponType.BAZOOKA, 100)
    weak = Citizen()
    wins = sum(board.first_citizen_wins_attack(strong, weak) for _ in range(200))
    losses = sum(board.first_citizen_wins_attack(weak, strong) for _ in range(200))
    assert wins > 180
    assert losses < 20


def test_kill_errors():
    board = make_board()
    killed = set()
    board.kill(0, killed)
    assert 0 not in board.citizens
    assert board.builders(0) == [1]
    assert board.cell(Pos(14, 1)).id == -1
    with pytest.raises(GameError):
        board.kill(0, killed)
    with pytest.raises(GameError):
        board.kill(99, set())


# ----------------------------------------------------------------- builds


def test_build_creates_and_reinforces_barricade():
    board = make_board(positions={0: (7, 7)})
    s = board.settings
    assert board.execute(build(0, Dir.RIGHT), set())
    cell = board.cell(Pos(7, 8))
    assert cell.resistance == s.barricade_resistance_step
    assert cell.b_owner == 0
    assert board.barricades(0) == [Pos(7, 8)]
    for _ in range(10):
        board.execute(build(0, Dir.RIGHT), set())
    assert board.cell(Pos(7, 8)).resistance == s.barricade_max_resistance
    assert board.ok()


def test_build_limit_on_barricades():
    board = make_board(positions={0: (7, 7)})
    for d in (Dir.UP, Dir.DOWN, Dir.LEFT):
        assert board.execute(build(0, d), set())
    assert not board.execute(build(0, Dir.RIGHT), set())
    assert len(board.barricades(0)) == board.settings.max_num_barricades


def test_build_restrictions():
    board = make_board(positions={0: (14, 2)})
    assert not board.execute(build(0, Dir.RIGHT), set())  # occupied cell
    assert not board.execute(build(2, Dir.UP), set())  # warriors cannot build
    board.day = False
    assert not board.execute(build(0, Dir.UP), set())
    assert board.barricades(0) == []


def test_cannot_build_from_a_barricade():
    board = make_board(positions={0: (7, 7)}, barricades=[(0, 7, 7, 25)])
    assert not board.execute(build(0, Dir.RIGHT), set())
    assert board.cell(Pos(7, 8)).resistance == -1


# ---------------------------------------------------- regeneration, rounds


def test_deteriorate_only_on_last_night_round():
    board = make_board(barricades=[(0, 7, 7, 25)])
    board.rnd = 3
    board.deteriorate_barricades()
    assert board.barricades(0) == [Pos(7, 7)]
    board.rnd = board.settings.num_rounds_per_day - 1
    board.deteriorate_barricades()
    assert board.barricades(0) == []
    assert board.cell(Pos(7, 7)).resistance == -1


def test_regen_positions_are_good():
    board = make_board()
    assert not board.is_good_pos_to_regen(Pos(0, 0))  # money
    assert not board.is_good_pos_to_regen(Pos(13, 1))  # next to a citizen
    assert board.is_good_pos_to_regen(Pos(6, 15))
    pos = board.random_pos_where_regenerate()
    assert board.is_good_pos_to_regen(pos)
    assert board.grid[board.empty_pos().i][board.empty_pos().j].is_empty()


def test_create_new_citizen_needs_empty_cell():
    board = make_board()
    with pytest.raises(GameError):
        board.create_new_citizen(Pos(0, 0), CitizenType.BUILDER, 0)
    cid = board.create_new_citizen(Pos(6, 15), CitizenType.WARRIOR, 1)
    assert board.citizen(cid).weapon == WeaponType.HAMMER
    assert cid in board.warriors(1)


def test_dead_citizen_regenerates():
    board = make_board(positions={2: (8, 8), 5: (8, 9)})
    lost = board.settings.life_lost_in_attack
    board.citizens[2].life = lost
    board.citizens[5].life = lost
    owners = {2: 0, 5: 1}
    killed = set()
    board.perform_attack(board.citizens[2], board.citizens[5], killed)
    dead = next(iter(killed))
    before = set(board.citizens)
    for _ in range(board.settings.num_rounds_regen_warrior - 1):
        board.regenerate_citizens()
    assert len(board.citizens) == 11
    board.regenerate_citizens()
    assert len(board.citizens) == 12
    (new_id,) = set(board.citizens) - before
    new = board.citizen(new_id)
    assert new.type == CitizenType.WARRIOR
    assert new.player == owners[dead]
    assert new.life == board.settings.warrior_ini_life
    assert board.ok()


def test_next_moves_and_regenerates_money():
    board = make_board(positions={0: (1, 2)})
    actions = [Action() for _ in range(4)]
    actions[0].move(0, Dir.UP)
    out = io.StringIO()
    board.next(actions, out)
    assert out.getvalue() == "commands\n1\n0\tm\tu\t\n"
    assert board.round() == 1
    assert board.is_day()
    money = lambda c: c.bonus == BonusType.MONEY
    assert count_cells(board, money) == 2
    for _ in range(board.settings.num_rounds_regen_money - 2):
        board.next([Action() for _ in range(4)], io.StringIO())
    assert count_cells(board, money) == 2
    board.next([Action() for _ in range(4)], io.StringIO())
    assert count_cells(board, money) == board.settings.num_ini_money
    assert board.is_night()


def test_next_ignores_commands_for_others_citizens():
    board = make_board()
    actions = [Action() for _ in range(4)]
    actions[1].move(0, Dir.UP)
    out = io.StringIO()
    board.next(actions, out)
    assert out.getvalue() == "commands\n0\n"
    assert board.citizen(0).pos == Pos(14, 1)


def test_next_requires_one_action_per_player():
    board = make_board()
    with pytest.raises(GameError):
        board.next([Action()], io.StringIO())