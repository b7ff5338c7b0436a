"""
Session Roster - Turn order over the seats at one table.

The roster owns the seats (for the campaign game, the player hands).
It is game-agnostic: a seat is anything with a `player_id`.

Invariant: while the game runs, `current_index` always points at an
active seat. Removing a seat before the pointer shifts the pointer
back so it keeps naming the same player; removing the current seat
leaves the pointer on the successor.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Generic, Iterator, Protocol, TypeVar


class Seat(Protocol):
    player_id: str


SeatT = TypeVar("SeatT", bound=Seat)


@dataclass
class Departure(Generic[SeatT]):
    """Record of a seat leaving the table."""
    seat: SeatT
    index: int
    was_current: bool


class SessionRoster(Generic[SeatT]):
    """Ordered active seats, departed seats, and whose turn it is."""

    def __init__(self, seats: list[SeatT] | None = None):
        self.seats: list[SeatT] = list(seats or [])
        self.departed: list[SeatT] = []
        self.current_index = 0

    def __len__(self) -> int:
        return len(self.seats)

    def __iter__(self) -> Iterator[SeatT]:
        return iter(self.seats)

    def __contains__(self, player_id: object) -> bool:
        return self.index_of(player_id) is not None

    @property
    def size(self) -> int:
        return len(self.seats)

    @property
    def is_multiplayer(self) -> bool:
        return len(self.seats) > 1

    @property
    def current(self) -> SeatT:
        return self.seats[self.current_index]

    @property
    def player_ids(self) -> list[str]:
        return [seat.player_id for seat in self.seats]

    def index_of(self, player_id) -> int | None:
        for i, seat in enumerate(self.seats):
            if seat.player_id == player_id:
                return i
        return None

    def get(self, player_id: str) -> SeatT | None:
        index = self.index_of(player_id)
        return None if index is None else self.seats[index]

    def is_current(self, player_id: str) -> bool:
        return bool(self.seats) and self.current.player_id == player_id

    def add(self, seat: SeatT) -> None:
        if seat.player_id in self:
            raise ValueError(f"{seat.player_id} is already seated")
        self.seats.append(seat)

    def advance(self) -> SeatT:
        """Pass the turn to the next seat."""
        self.current_index = (self.current_index + 1) % len(self.seats)
        return self.current

    def set_current(self, index: int) -> SeatT:
        if not 0 <= index < len(self.seats):
            raise IndexError(f"No seat at index {index}")
        self.current_index = index
        return self.current

    def remove(self, player_id: str) -> Departure[SeatT] | None:
        """
        Take a seat out of the turn order.

        Returns None if the player is not seated. The departed seat is
        kept in `departed` for end-of-game reporting.
        """
        index = self.index_of(player_id)
        if index is None:
            return None
        was_current = index == self.current_index
        if index < self.current_index:
            self.current_index -= 1
        seat = self.seats.pop(index)
        if self.current_index >= len(self.seats):
            self.current_index = 0
        self.departed.append(seat)
        return Departure(seat=seat, index=index, was_current=was_current)
