"""Rules of a two-player game: registration, fleet placement and shooting."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from .models import (
    Cell,
    CellState,
    Coordinate,
    GameOverData,
    GameState,
    PlaceShipsData,
    RegisterData,
    Ship,
    ShipType,
    ShootData,
    StatusData,
    Turn,
)
from .phase_state import Phase, PhaseState

BOARD_SIZE = 10
PLAYER_IDS = (1, 2)
FLEET_SIZE = 9

# Ship type -> (how many the fleet holds, cells each one occupies).
REQUIRED_SHIPS: Dict[ShipType, tuple] = {
    ShipType.PORTAAVIONES: (1, 5),
    ShipType.BUQUE: (1, 4),
    ShipType.CRUCERO: (2, 3),
    ShipType.DESTRUCTOR: (2, 2),
    ShipType.SUBMARINO: (3, 1),
}

_ATTACKED = (CellState.HIT, CellState.SUNK, CellState.MISS)


class GameLogicError(RuntimeError):
    """Raised when a game rule is broken or a request is invalid."""


def _empty_board() -> List[Cell]:
    return [
        Cell(Coordinate(chr(ord("A") + row), col), CellState.WATER)
        for row in range(BOARD_SIZE)
        for col in range(1, BOARD_SIZE + 1)
    ]


@dataclass
class _Player:
    nickname: str = ""
    board: List[Cell] = field(default_factory=_empty_board)
    ships: List[Ship] = field(default_factory=list)
    surrendered: bool = False
    ships_remaining: int = FLEET_SIZE


def _index_of(coord: Coordinate) -> int:
    """Return the board index (0-99) of a coordinate."""
    row = ord(coord.letter[0]) - ord("A") if coord.letter else -1
    col = coord.number - 1
    if not (0 <= row < BOARD_SIZE and 0 <= col < BOARD_SIZE):
        raise GameLogicError(
            "Coordinate out of bounds: expected format <coord> ::= <letter><number>, "
            'where <letter> ::= "A" to "J" and <number> ::= "1" to "10". '
            f'Received: "{coord.letter}{coord.number}".'
        )
    return row * BOARD_SIZE + col


def _check_player_id(player_id: int) -> None:
    if player_id not in PLAYER_IDS:
        raise GameLogicError(f"Invalid player ID: {player_id}")


def _other(player_id: int) -> int:
    return 2 if player_id == 1 else 1


class GameLogic:
    """State and rules of one game between players 1 and 2."""

    def __init__(self) -> None:
        self._state = PhaseState()
        self._players: Dict[int, _Player] = {pid: _Player() for pid in PLAYER_IDS}
        self._current_turn = 1
        self._game_over = False
        self._winner: Optional[str] = None

    @property
    def phase(self) -> Phase:
        """The current game phase."""
        return self._state.phase

    def transition_to_placement(self) -> None:
        """Move the game to the ship placement phase."""
        self._state.transition_to_placement()

    def transition_to_playing(self) -> None:
        """Move the game to the playing phase."""
        self._state.transition_to_playing()

    def transition_to_finished(self) -> None:
        """Move the game to the finished phase."""
        self._state.transition_to_finished()

    def register_player(self, player_id: int, data: RegisterData) -> None:
        """Record the nickname of player 1 or 2."""
        _check_player_id(player_id)
        if not data.nickname:
            raise GameLogicError("Nickname cannot be empty")
        player = self._players[player_id]
        if player.nickname:
            raise GameLogicError(f"Player {player_id} already registered")
        player.nickname = data.nickname

    def are_both_registered(self) -> bool:
        """True once both players have a nickname."""
        return all(player.nickname for player in self._players.values())

    def are_both_ships_placed(self) -> bool:
        """True once both players have placed a full fleet."""
        return all(len(p.ships) == FLEET_SIZE for p in self._players.values())

    def ships_placed(self, player_id: int) -> int:
        """Number of ships the player has placed."""
        _check_player_id(player_id)
        return len(self._players[player_id].ships)

    def place_ships(self, player_id: int, data: PlaceShipsData) -> None:
        """Validate a fleet and put it on the player's board."""
        _check_player_id(player_id)
        player = self._players[player_id]
        if len(player.ships) == FLEET_SIZE:
            raise GameLogicError(f"Ships already placed for Player {player_id}")
        if not self.are_both_registered():
            raise GameLogicError(
                "Both players must be registered before placing ships"
            )
        self._validate_and_place(player, data.ships)

    @staticmethod
    def _validate_and_place(player: _Player, ships: List[Ship]) -> None:
        if len(ships) != FLEET_SIZE:
            raise GameLogicError(f"Incorrect number of ships: {len(ships)}")

        for ship in ships:
            if len(ship.coordinates) != REQUIRED_SHIPS[ship.type][1]:
                raise GameLogicError(
                    "Invalid ship configuration: coordinate count mismatch."
                )

        counts = Counter(ship.type for ship in ships)
        if any(counts[kind] != count for kind, (count, _) in REQUIRED_SHIPS.items()):
            raise GameLogicError(
                "Ship count does not match the required configuration."
            )

        placements: Dict[int, Coordinate] = {}
        for ship in ships:
            for coord in ship.coordinates:
                index = _index_of(coord)
                if index in placements:
                    raise GameLogicError(f"Ship overlap at {coord}")
                placements[index] = coord

        for index, coord in placements.items():
            player.board[index] = Cell(coord, CellState.SHIP)
        player.ships = list(ships)

    def process_shot(self, player_id: int, shot: ShootData) -> None:
        """Fire at the opponent; shots out of turn are ignored.

        A valid shot passes the turn to the opponent and may end the game.
        """
        if player_id != self._current_turn:
            return
        if self._game_over:
            raise GameLogicError("Game is already over")
        target_id = _other(player_id)
        if not self._update_board(target_id, shot.coordinate):
            raise GameLogicError(f"Coordinate already attacked: {shot.coordinate}")
        self._current_turn = target_id
        if self._players[target_id].ships_remaining == 0:
            self._game_over = True
            self._winner = self._players[player_id].nickname

    def _update_board(self, target_id: int, shot: Coordinate) -> bool:
        try:
            index = _index_of(shot)
        except GameLogicError:
            return False
        target = self._players[target_id]
        cell = target.board[index]
        if cell.state in _ATTACKED:
            return False
        if cell.state is CellState.SHIP:
            cell.state = CellState.HIT
            for ship in target.ships:
                cells = [target.board[_index_of(c)] for c in ship.coordinates]
                if all(c.state is CellState.HIT for c in cells):
                    for c in cells:
                        c.state = CellState.SUNK
                    target.ships_remaining -= 1
        elif cell.state is CellState.WATER:
            cell.state = CellState.MISS
        return True

    def status(self, player_id: int) -> StatusData:
        """The game as seen by the given player."""
        _check_player_id(player_id)
        own = self._players[player_id].board
        opponent = self._players[_other(player_id)].board
        if self.phase is Phase.FINISHED:
            game_state = GameState.ENDED
        elif self.are_both_registered() and self.are_both_ships_placed():
            game_state = GameState.ONGOING
        else:
            game_state = GameState.WAITING
        return StatusData(
            turn=Turn.YOUR_TURN if self._current_turn == player_id else Turn.OPPONENT_TURN,
            board_own=[Cell(c.coordinate, c.state) for c in own],
            board_opponent=[Cell(c.coordinate, c.state) for c in opponent],
            game_state=game_state,
        )

    def is_game_over(self) -> bool:
        """True once one fleet has been sunk."""
        return self._game_over

    def game_over_result(self) -> GameOverData:
        """The winner's nickname; raises if the game is still going."""
        if not self._game_over:
            raise GameLogicError("Game is not over yet")
        return GameOverData(self._winner if self._winner is not None else "NONE")

    def nickname(self, player_id: int) -> str:
        """The registered nickname of a player (empty if not registered)."""
        player = self._players.get(player_id)
        if player is None:
            raise GameLogicError("Player ID not found")
        return player.nickname