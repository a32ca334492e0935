import dataclasses

import pytest

from navalbattle.models import (
    Cell,
    CellState,
    Coordinate,
    GameState,
    Message,
    MessageType,
    ProtocolError,
    Ship,
    ShipType,
    StatusData,
    Turn,
)


def test_coordinate_str():
    assert str(Coordinate("C", 5)) == "C5"


def test_coordinate_str_two_digits():
    assert str(Coordinate("J", 10)) == "J10"


def test_coordinate_equality_and_hash():
    shots = {Coordinate("A", 1), Coordinate("A", 1), Coordinate("B", 2)}
    assert len(shots) == 2
    assert Coordinate("A", 1) in shots


def test_coordinate_is_immutable():
    coordinate = Coordinate("A", 1)
    with pytest.raises(dataclasses.FrozenInstanceError):
        coordinate.number = 2
    assert coordinate.number == 1
    assert str(coordinate) == "A1"


def test_message_without_payload():
    message = Message(MessageType.SURRENDER)
    assert message.data is None
    assert message.type is MessageType.SURRENDER


def test_status_defaults_do_not_share_boards():
    first = StatusData()
    second = StatusData()
    first.board_own.append(Cell(Coordinate("A", 1), CellState.SHIP))
    assert second.board_own == []
    assert first.turn is Turn.YOUR_TURN
    assert first.game_state is GameState.ONGOING
    assert first.time_remaining == 0


def test_enum_lookup_by_wire_name():
    assert ShipType("SUBMARINO") is ShipType.SUBMARINO
    assert MessageType("PLAYER_ID") is MessageType.PLAYER_ID


def test_ship_coordinates_compare():
    ship = Ship(ShipType.BUQUE, [Coordinate("A", 1), Coordinate("A", 2)])
    assert ship == Ship(ShipType.BUQUE, [Coordinate("A", 1), Coordinate("A", 2)])


def test_protocol_error_caught_as_value_error():
    error = ProtocolError("bad")
    assert issubclass(ProtocolError, ValueError)
    assert str(error) == "bad"