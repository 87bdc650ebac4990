# purgegame

A turn-based strategy game engine for four players on a city grid. Each
player controls builders and warriors. By day, builders pick up money and
put up barricades. By night, warriors fight and tear barricades down.
Citizens on the other side's barricades cannot be reached by day. Food
restores life, and guns and bazookas make warriors stronger. Dead citizens,
bonuses and weapons come back after a set number of rounds. All barricades
are removed at the end of each night.

The engine reads a game configuration. The board is either given cell by
cell (`FIXED`) or generated from the seed (`RANDOM`). The engine then plays
every round and writes a full replay log. Scores and the winners go to
standard error.

## Installation

```
pip install .
```

To run the tests:

```
pip install .[test]
pytest
```

## Running a match

```
purgegame --seed 42 --input game.cnf --output game.out Demo Demo Null HADES
```

Options:

| Option | Short | Meaning |
|---|---|---|
| `--seed=N` | `-s N` | random seed (required, at least 0) |
| `--input=FILE` | `-i FILE` | configuration file (default: stdin) |
| `--output=FILE` | `-o FILE` | replay output (default: stdout) |
| `--list` | `-l` | list registered players |
| `--version` | `-v` | print game version |
| `--help` | `-h` | print help |

Exactly four player names must be given, each at most 12 characters long.
Run `purgegame` with no arguments to see the help. The command exits with
status 1 and an `error:` message when the configuration or the arguments are
wrong.

## Configuration

A configuration starts with the version line `ThePurge 1.0`, then one
`KEY value` pair per setting in a fixed order, then the board generator.
For a generated board:

```
ThePurge 1.0

NUM_PLAYERS	4
NUM_DAYS	2
NUM_ROUNDS_PER_DAY	50
BOARD_ROWS	15
BOARD_COLS	30
NUM_INI_BUILDERS	4
NUM_INI_WARRIORS	2
NUM_INI_MONEY	8
NUM_INI_FOOD	8
NUM_INI_GUNS	4
NUM_INI_BAZOOKAS	2
BUILDER_INI_LIFE	60
WARRIOR_INI_LIFE	100
MONEY_POINTS	5
KILL_BUILDER_POINTS	50
KILL_WARRIOR_POINTS	100
FOOD_INCR_LIFE	20
LIFE_LOST_IN_ATTACK	20
BUILDER_STRENGTH_ATTACK	1
HAMMER_STRENGTH_ATTACK	2
GUN_STRENGTH_ATTACK	4
BAZOOKA_STRENGTH_ATTACK	8
BUILDER_STRENGTH_DEMOLISH	1
HAMMER_STRENGTH_DEMOLISH	5
GUN_STRENGTH_DEMOLISH	10
BAZOOKA_STRENGTH_DEMOLISH	20
NUM_ROUNDS_REGEN_BUILDER	10
NUM_ROUNDS_REGEN_WARRIOR	20
NUM_ROUNDS_REGEN_FOOD	10
NUM_ROUNDS_REGEN_MONEY	10
NUM_ROUNDS_REGEN_WEAPON	20
BARRICADE_RESISTANCE_STEP	10
BARRICADE_MAX_RESISTANCE	50
MAX_NUM_BARRICADES	3

RANDOM
```

`NUM_PLAYERS` must be 4 and `NUM_ROUNDS_PER_DAY` even; the first half of
each day's rounds is daylight. Attack and demolish strengths must not
decrease from builder to hammer to gun to bazooka. With `FIXED` instead of
`RANDOM`, the map, citizens and barricades follow in the same layout as a
state in the replay log, and their counts must match the settings.

## Built-in players

- `Null`: does nothing.
- `Demo`: shows how the player interface is used; writes what it does to
  standard error.
- `HADES`: a path-finding player that collects weapons, money and food,
  runs from stronger enemies and hunts weaker ones.

## Writing a player

Subclass `purgegame.player.Player`, override `play()`, and register the
class with `purgegame.registry.register`:

```python
from purgegame.player import Player
from purgegame.registry import register
from purgegame.structs import Dir


@register("Walker")
class Walker(Player):
    def play(self):
        if self.is_day():
            for cid in self.builders(self.me()):
                pos = self.citizen(cid).pos
                if self.settings.pos_ok(pos + Dir.RIGHT):
                    self.move(cid, Dir.RIGHT)
```

Inside `play()`, a player can query the game with `me()`, `round()`,
`is_day()`, `is_night()`, `cell(pos)`, `citizen(id)`, `builders(pl)`,
`warriors(pl)`, `barricades(pl)`, `score(pl)` and `status(pl)`, and read
the settings through `self.settings` (for example
`self.settings.num_rounds()` or `self.settings.board_rows`). It gives
orders with `move(id, dir)` and `build(id, dir)`, and draws reproducible
random numbers with `random(low, high)` and `random_permutation(n)`. Each
citizen takes at most one command per round; later commands for the same
citizen are ignored, and more than 1000 commands in a round raise
`GameError`.

You can also run a game from your own code:

```python
import sys
from purgegame.game import run
from purgegame.structs import TokenReader

with open("game.cnf") as config:
    run(["Walker", "Demo", "Null", "HADES"], TokenReader(config), sys.stdout, 42, sys.stderr)
```

## What it does not do

The engine only writes the replay as text; it has no viewer to watch a
match. Players run in the same process as the engine with no time limit,
so `status(pl)` always reports 0.