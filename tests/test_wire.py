import pytest

from navalbattle.models import (
    Cell,
    CellState,
    Coordinate,
    GameState,
    ProtocolError,
    ShipType,
    Turn,
)
from navalbattle.wire import (
    format_board,
    format_coordinates,
    parse_board,
    parse_cell,
    parse_coordinate,
    parse_coordinates,
    parse_enum,
)


@pytest.mark.parametrize(
    "text, letter, number",
    [("A1", "A", 1), ("B5", "B", 5), ("J10", "J", 10), ("H7", "H", 7)],
)
def test_parse_coordinate(text, letter, number):
    assert parse_coordinate(text) == Coordinate(letter, number)


@pytest.mark.parametrize("text", ["1A", "C", "7", "$@", "A", "", "A1234"])
def test_parse_coordinate_rejects(text):
    with pytest.raises(ProtocolError):
        parse_coordinate(text)


def test_parse_coordinates():
    assert parse_coordinates("A1,A2") == [Coordinate("A", 1), Coordinate("A", 2)]


def test_parse_coordinates_trailing_comma_ignored():
    assert parse_coordinates("A1,") == [Coordinate("A", 1)]


@pytest.mark.parametrize("text", ["", "A1,,A2", ",A1", "A1,X"])
def test_parse_coordinates_rejects(text):
    with pytest.raises(ProtocolError):
        parse_coordinates(text)


def test_format_coordinates():
    coords = [Coordinate("A", 1), Coordinate("A", 2), Coordinate("A", 3)]
    assert format_coordinates(coords) == "A1,A2,A3"


def test_coordinates_round_trip():
    coords = [Coordinate("B", 4), Coordinate("J", 10)]
    assert parse_coordinates(format_coordinates(coords)) == coords


@pytest.mark.parametrize(
    "coords",
    [[], [Coordinate("", 1)], [Coordinate("A", 0)], [Coordinate("A", -3)]],
)
def test_format_coordinates_rejects(coords):
    with pytest.raises(ProtocolError):
        format_coordinates(coords)


def test_parse_cell():
    assert parse_cell("A1:SHIP") == Cell(Coordinate("A", 1), CellState.SHIP)


@pytest.mark.parametrize("text", ["A1:INVALIDSTATE", "A1", "1A:SHIP"])
def test_parse_cell_rejects(text):
    with pytest.raises(ProtocolError):
        parse_cell(text)


def test_parse_board_empty():
    assert parse_board("") == []


def test_parse_board():
    board = parse_board("B1:HIT,B2:SUNK")
    assert board == [
        Cell(Coordinate("B", 1), CellState.HIT),
        Cell(Coordinate("B", 2), CellState.SUNK),
    ]


def test_parse_board_rejects_empty_cell():
    with pytest.raises(ProtocolError):
        parse_board("A1:SHIP,,A2:WATER")


def test_format_board():
    cells = [
        Cell(Coordinate("A", 1), CellState.SHIP),
        Cell(Coordinate("A", 2), CellState.HIT),
    ]
    assert format_board(cells) == "A1:SHIP,A2:HIT"


def test_board_round_trip():
    cells = [
        Cell(Coordinate("C", 1), CellState.WATER),
        Cell(Coordinate("D", 4), CellState.MISS),
        Cell(Coordinate("J", 10), CellState.SUNK),
    ]
    assert parse_board(format_board(cells)) == cells


def test_parse_enum():
    assert parse_enum(ShipType, "BUQUE", "ship type") is ShipType.BUQUE
    assert parse_enum(Turn, "OPPONENT_TURN", "turn") is Turn.OPPONENT_TURN
    assert parse_enum(GameState, "ENDED", "game state") is GameState.ENDED


def test_parse_enum_rejects_with_label():
    with pytest.raises(ProtocolError, match="Invalid ship type:AVION"):
        parse_enum(ShipType, "AVION", "ship type")