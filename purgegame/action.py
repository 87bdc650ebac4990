"""Commands requested by a player during one round."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional, TextIO

from .structs import (
    CommandType,
    Dir,
    GameError,
    TokenReader,
    char_to_command_type,
    char_to_dir,
    command_type_to_char,
    dir_to_char,
)

MAX_COMMANDS = 1000


@dataclass(frozen=True)
class Command:
    """One command: citizen id, command kind and direction (None if unreadable)."""

    cid: int
    kind: Optional[CommandType]
    direction: Optional[Dir]


class Action:
    """The list of commands of a player in a round, at most one per citizen."""

    MAX_COMMANDS = MAX_COMMANDS

    def __init__(self):
        self.attempts = 0
        self.commanded: set[int] = set()
        self.commands: list[Command] = []

    def move(self, cid: int, direction: Dir) -> None:
        """Command citizen cid to move in direction."""
        self.execute(Command(cid, CommandType.MOVE, direction))

    def build(self, cid: int, direction: Dir) -> None:
        """Command builder cid to build a barricade in direction."""
        self.execute(Command(cid, CommandType.BUILD, direction))

    def execute(self, command: Command) -> None:
        """Add command unless its citizen already has one."""
        self.attempts += 1
        if self.attempts > self.MAX_COMMANDS:
            raise GameError("Too many commands.")
        if command.cid in self.commanded:
            return
        self.commanded.add(command.cid)
        self.commands.append(command)

    @classmethod
    def read(cls, reader: TokenReader) -> "Action":
        """Read commands as written by write_commands, stopping at truncated input."""
        action = cls()
        try:
            count = reader.next_int()
        except (EOFError, GameError):
            return action
        for _ in range(count):
            try:
                cid = reader.next_int()
                kind = reader.next()
                direction = reader.next()
            except (EOFError, GameError):
                break
            action.commanded.add(cid)
            action.commands.append(
                Command(cid, char_to_command_type(kind), char_to_dir(direction))
            )
        return action


def write_commands(commands: Iterable[Command], out: TextIO) -> None:
    """Write a count line followed by one tab-separated line per command."""
    commands = list(commands)
    out.write(f"{len(commands)}\n")
    for command in commands:
        out.write(
            f"{command.cid}\t{command_type_to_char(command.kind)}\t"
            f"{dir_to_char(command.direction)}\t\n"
        )