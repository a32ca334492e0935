"""Data types exchanged between the game client and server."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Union


class ProtocolError(ValueError):
    """Raised when a message cannot be parsed or serialised."""


class MessageType(Enum):
    """Kinds of messages on the wire."""

    REGISTER = "REGISTER"
    PLACE_SHIPS = "PLACE_SHIPS"
    SHOOT = "SHOOT"
    STATUS = "STATUS"
    SURRENDER = "SURRENDER"
    GAME_OVER = "GAME_OVER"
    ERROR = "ERROR"
    PLAYER_ID = "PLAYER_ID"


class ShipType(Enum):
    """Kinds of ships in a fleet."""

    PORTAAVIONES = "PORTAAVIONES"
    BUQUE = "BUQUE"
    CRUCERO = "CRUCERO"
    DESTRUCTOR = "DESTRUCTOR"
    SUBMARINO = "SUBMARINO"


class Turn(Enum):
    """Whose turn it is, seen from the receiving player."""

    YOUR_TURN = "YOUR_TURN"
    OPPONENT_TURN = "OPPONENT_TURN"


class CellState(Enum):
    """State of one board cell."""

    WATER = "WATER"
    HIT = "HIT"
    SUNK = "SUNK"
    SHIP = "SHIP"
    MISS = "MISS"


class GameState(Enum):
    """Overall state of a game."""

    ONGOING = "ONGOING"
    WAITING = "WAITING"
    ENDED = "ENDED"


@dataclass(frozen=True)
class Coordinate:
    """A board position: a row letter and a column number."""

    letter: str
    number: int

    def __str__(self) -> str:
        return f"{self.letter}{self.number}"


@dataclass
class PlayerIdData:
    """Player number assigned by the server."""

    player_id: int


@dataclass
class RegisterData:
    """A player's nickname and e-mail address."""

    nickname: str
    email: str


@dataclass
class Ship:
    """A ship and the cells it occupies."""

    type: ShipType
    coordinates: List[Coordinate] = field(default_factory=list)


@dataclass
class PlaceShipsData:
    """A whole fleet placement."""

    ships: List[Ship] = field(default_factory=list)


@dataclass
class ShootData:
    """The target of a shot."""

    coordinate: Coordinate


@dataclass
class Cell:
    """One cell of a board and its state."""

    coordinate: Coordinate
    state: CellState


@dataclass
class StatusData:
    """The game as one player sees it."""

    turn: Turn = Turn.YOUR_TURN
    board_own: List[Cell] = field(default_factory=list)
    board_opponent: List[Cell] = field(default_factory=list)
    game_state: GameState = GameState.ONGOING
    time_remaining: int = 0


@dataclass
class GameOverData:
    """The outcome of a finished game."""

    winner: str


@dataclass
class ErrorData:
    """An error reported by the peer."""

    code: int
    description: str


MessageData = Optional[
    Union[
        PlayerIdData,
        RegisterData,
        PlaceShipsData,
        ShootData,
        StatusData,
        GameOverData,
        ErrorData,
    ]
]


@dataclass
class Message:
    """A message type with its payload; payload is None when there is none."""

    type: MessageType
    data: MessageData = None