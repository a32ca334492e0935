"""Parsing and building whole protocol messages."""

from __future__ import annotations

import re
from typing import Dict, List, Optional, Type

from .models import (
    ErrorData,
    GameOverData,
    GameState,
    Message,
    MessageType,
    PlaceShipsData,
    PlayerIdData,
    ProtocolError,
    RegisterData,
    Ship,
    ShipType,
    ShootData,
    StatusData,
    Turn,
)
from .wire import (
    format_board,
    format_coordinates,
    parse_board,
    parse_coordinate,
    parse_enum,
)

_LEADING_INT = re.compile(r"-?[0-9]+")

_MISSING_END = "Invalid message format: missing end delimiter"
_EXTRA_PIPE = (
    "Invalid message format. Expected: <message> ::= <message-type> '|' <message-data>"
)


def _leading_int(text: str) -> Optional[int]:
    match = _LEADING_INT.match(text)
    return int(match.group()) if match else None


def _split_fields(text: str, separator: str) -> List[str]:
    parts = text.split(separator)
    if parts and parts[-1] == "":
        parts.pop()
    return parts


def _strip_terminator(data: str) -> str:
    if not data.endswith("\n"):
        raise ProtocolError(_MISSING_END)
    return data[:-1]


def _parse_player_id(data: str) -> PlayerIdData:
    player_id = _leading_int(data)
    if player_id is None:
        raise ProtocolError(f"Invalid player id: {data}")
    return PlayerIdData(player_id)


def _parse_register(data: str) -> RegisterData:
    data = _strip_terminator(data)
    nickname, separator, email = data.partition(",")
    if not separator:
        raise ProtocolError("Invalid message format: missing ','")
    if not nickname:
        raise ProtocolError("Nickname field cannot be empty")
    if not email:
        raise ProtocolError("Email field cannot be empty")
    return RegisterData(nickname, email)


def _parse_place_ships(data: str) -> PlaceShipsData:
    if not data:
        raise ProtocolError("<message-data> for PLACE_SHIPS cannot be empty")
    data = _strip_terminator(data)
    ships = []
    for segment in _split_fields(data, ";"):
        if not segment:
            raise ProtocolError("Empty ship definition encountered")
        type_text, separator, coords_text = segment.partition(":")
        if not separator:
            raise ProtocolError(
                "Missing ':' in ship definition: expected format "
                "<ship-type> ':' <coordinates>"
            )
        ship_type = parse_enum(ShipType, type_text, "ship type")
        if not coords_text:
            raise ProtocolError(f"No coordinates provided for ship type: {type_text}")
        coordinates = []
        for token in _split_fields(coords_text, ","):
            if not token:
                raise ProtocolError("Empty coordinate found in ship definition")
            coordinates.append(parse_coordinate(token))
        if not coordinates:
            raise ProtocolError(
                f"No valid coordinates parsed for ship type: {type_text}"
            )
        ships.append(Ship(ship_type, coordinates))
    if not ships:
        raise ProtocolError("No valid ships parsed from PLACE_SHIPS data")
    return PlaceShipsData(ships)


def _parse_shoot(data: str) -> ShootData:
    return ShootData(parse_coordinate(_strip_terminator(data)))


def _parse_status(data: str) -> StatusData:
    data = _strip_terminator(data)
    missing = (
        "Missing turn delimiter in STATUS data",
        "Missing board_own delimiter in STATUS data",
        "Missing board_opponent delimiter in STATUS data",
        "Missing game_state or time_remaining in STATUS data",
    )
    fields = []
    rest = data
    for message in missing:
        head, separator, rest = rest.partition(";")
        if not separator:
            raise ProtocolError(message)
        fields.append(head)
    turn_text, own_text, opponent_text, state_text = fields
    turn = parse_enum(Turn, turn_text, "turn")
    board_own = parse_board(own_text)
    board_opponent = parse_board(opponent_text)
    game_state = parse_enum(GameState, state_text, "game state")
    seconds = _leading_int(rest)
    if seconds is None:
        raise ProtocolError(f"Invalid time_remaining in STATUS data: {rest}")
    return StatusData(turn, board_own, board_opponent, game_state, seconds)


def _parse_game_over(data: str) -> GameOverData:
    data = _strip_terminator(data)
    if not data:
        raise ProtocolError("Game over data cannot be empty")
    if "|" in data:
        raise ProtocolError(_EXTRA_PIPE)
    return GameOverData(data)


def _parse_error(data: str) -> ErrorData:
    data = _strip_terminator(data)
    if "|" in data:
        raise ProtocolError(_EXTRA_PIPE)
    code_text, separator, description = data.partition(",")
    if not separator:
        raise ProtocolError("Invalid message format: missing ','")
    code = _leading_int(code_text)
    if code is None:
        raise ProtocolError(f"Invalid code number: {code_text}")
    if not description:
        raise ProtocolError("Description is empty")
    return ErrorData(code, description)


_PARSERS = {
    MessageType.PLAYER_ID: _parse_player_id,
    MessageType.REGISTER: _parse_register,
    MessageType.PLACE_SHIPS: _parse_place_ships,
    MessageType.SHOOT: _parse_shoot,
    MessageType.STATUS: _parse_status,
    MessageType.GAME_OVER: _parse_game_over,
    MessageType.ERROR: _parse_error,
}


def parse_message(raw: str) -> Message:
    """Parse '<type>|<data>' into a Message; raise ProtocolError if malformed."""
    type_text, separator, data = raw.partition("|")
    if not separator:
        raise ProtocolError(
            'Invalid message format. Format expected: <message> ::= '
            '<message-type> "|" <message-data>'
        )
    message_type = parse_enum(MessageType, type_text, "type")
    parser = _PARSERS.get(message_type)
    return Message(message_type, parser(data) if parser else None)


_PAYLOAD_TYPES: Dict[MessageType, Type] = {
    MessageType.PLAYER_ID: PlayerIdData,
    MessageType.REGISTER: RegisterData,
    MessageType.PLACE_SHIPS: PlaceShipsData,
    MessageType.SHOOT: ShootData,
    MessageType.STATUS: StatusData,
    MessageType.GAME_OVER: GameOverData,
    MessageType.ERROR: ErrorData,
}


def _format_payload(message: Message) -> str:
    data = message.data
    if message.type is MessageType.SURRENDER:
        return ""
    expected = _PAYLOAD_TYPES[message.type]
    if not isinstance(data, expected):
        raise ProtocolError(
            f"{message.type.value} message needs {expected.__name__} data"
        )
    if isinstance(data, PlayerIdData):
        return str(data.player_id)
    if isinstance(data, RegisterData):
        return f"{data.nickname},{data.email}"
    if isinstance(data, PlaceShipsData):
        return ";".join(
            f"{ship.type.value}:{format_coordinates(ship.coordinates)}"
            for ship in data.ships
        )
    if isinstance(data, ShootData):
        return str(data.coordinate)
    if isinstance(data, StatusData):
        return ";".join(
            (
                data.turn.value,
                format_board(data.board_own),
                format_board(data.board_opponent),
                data.game_state.value,
                str(data.time_remaining),
            )
        )
    if isinstance(data, GameOverData):
        return data.winner
    return f"{data.code},{data.description}"


def build_message(message: Message) -> str:
    """Serialise a Message as '<type>|<data>' followed by a newline."""
    return f"{message.type.value}|{_format_payload(message)}\n"