"""Text encodings of the pieces that make up protocol messages."""

from __future__ import annotations

import re
from enum import Enum
from typing import Iterable, List, Type, TypeVar

from .models import Cell, CellState, Coordinate, ProtocolError

E = TypeVar("E", bound=Enum)

_LEADING_NUMBER = re.compile(r"-?[0-9]+")


def _split_fields(text: str, separator: str) -> List[str]:
    """Split like repeated line reads: a trailing separator adds no empty field."""
    if not text:
        return []
    parts = text.split(separator)
    if parts[-1] == "":
        parts.pop()
    return parts


def parse_enum(enum_type: Type[E], text: str, label: str) -> E:
    """Look up an enum member by its wire name."""
    try:
        return enum_type(text)
    except ValueError:
        raise ProtocolError(f"Invalid {label}:{text}") from None


def parse_coordinate(text: str) -> Coordinate:
    """Parse '<letter><number>', e.g. 'A1' or 'J10'."""
    if not 2 <= len(text) <= 4:
        raise ProtocolError(
            "Invalid coordinate format. Expected format: <Letter><Number>"
        )
    match = _LEADING_NUMBER.match(text, 1)
    if match is None:
        raise ProtocolError(f"Invalid number: {text}")
    return Coordinate(text[0], int(match.group()))


def parse_coordinates(text: str) -> List[Coordinate]:
    """Parse a comma separated list of coordinates."""
    if not text:
        raise ProtocolError("Coordinate list cannot be empty")
    coordinates = []
    for token in _split_fields(text, ","):
        if not token:
            raise ProtocolError("Empty coordinate found in list")
        coordinates.append(parse_coordinate(token))
    if not coordinates:
        raise ProtocolError("No valid coordinates found in the list")
    return coordinates


def format_coordinates(coordinates: Iterable[Coordinate]) -> str:
    """Serialise coordinates as a comma separated list."""
    coordinates = list(coordinates)
    if not coordinates:
        raise ProtocolError("Cannot serialize an empty list of coordinates")
    for coordinate in coordinates:
        if not coordinate.letter or coordinate.number <= 0:
            raise ProtocolError(
                "Invalid coordinate found while converting to string"
            )
    return ",".join(str(coordinate) for coordinate in coordinates)


def parse_cell(text: str) -> Cell:
    """Parse '<coordinate>:<state>', e.g. 'A1:SHIP'."""
    coordinate_text, separator, state_text = text.partition(":")
    if not separator:
        state_text = text
    coordinate = parse_coordinate(coordinate_text)
    state = parse_enum(CellState, state_text, "cell state")
    return Cell(coordinate, state)


def parse_board(text: str) -> List[Cell]:
    """Parse a comma separated list of cells; an empty text is an empty board."""
    if not text:
        return []
    pieces = text.split(",")
    last = pieces.pop()
    board = []
    for piece in pieces:
        if not piece:
            raise ProtocolError("Empty cell specification in board")
        board.append(parse_cell(piece))
    if last:
        board.append(parse_cell(last))
    return board


def format_board(cells: Iterable[Cell]) -> str:
    """Serialise cells as a comma separated list."""
    return ",".join(f"{cell.coordinate}:{cell.state.value}" for cell in cells)