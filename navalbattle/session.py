"""A game session between two connected players, run on its own thread."""

from __future__ import annotations

import logging
import select
import socket
import threading
import time
from dataclasses import dataclass
from typing import Callable, Dict, Optional, Set

from .codec import build_message, parse_message
from .game_logic import PLAYER_IDS, GameLogic, GameLogicError
from .models import (
    ErrorData,
    GameOverData,
    Message,
    MessageType,
    ProtocolError,
    Turn,
)
from .phase_state import Phase

LogFn = Callable[[str, str, str, str], None]

TURN_TIMEOUT_SECONDS = 30
_RECV_SIZE = 4095

_logger = logging.getLogger(__name__)


class ServerError(RuntimeError):
    """Raised when the server cannot talk to a client or manage a session."""


def send_message(sock: Optional[socket.socket], message: Message) -> None:
    """Serialise *message* and write all of it to *sock*."""
    if sock is None:
        raise ServerError("Send failed: socket is closed")
    data = build_message(message).encode("utf-8")
    _logger.debug("sending %r", data)
    try:
        sock.sendall(data)
    except OSError as exc:
        raise ServerError(f"Send failed: {exc.strerror or exc}") from exc


def receive_messages(sock: socket.socket) -> list:
    """Read from *sock* until at least one whole line arrives and parse every line.

    Bytes after the last newline of the read are dropped. Raises
    ProtocolError when the peer disconnects, the read fails or a line
    cannot be parsed.
    """
    buffer = b""
    while True:
        try:
            chunk = sock.recv(_RECV_SIZE)
        except OSError as exc:
            raise ProtocolError(f"Receive failed: {exc.strerror or exc}") from exc
        if not chunk:
            raise ProtocolError("Client disconnected")
        buffer += chunk
        *lines, buffer = buffer.split(b"\n")
        messages = []
        for line in lines:
            text = line.decode("utf-8", errors="replace") + "\n"
            try:
                messages.append(parse_message(text))
            except ValueError as exc:
                raise ProtocolError(f"Failed to parse message: {exc}") from exc
        if messages:
            _logger.debug("received %d messages", len(messages))
            return messages


def _error(description: str) -> Message:
    return Message(MessageType.ERROR, ErrorData(400, description))


def _other(player_id: int) -> int:
    return 2 if player_id == 1 else 1


@dataclass
class _Seat:
    sock: Optional[socket.socket]
    address: str

    def close(self) -> None:
        if self.sock is not None:
            try:
                self.sock.close()
            except OSError:
                pass
            self.sock = None


class GameSession:
    """One game between players 1 and 2, from registration to game over."""

    def __init__(self, session_id: int, log_fn: Optional[LogFn]) -> None:
        self.session_id = session_id
        self.finished = False
        self.turn_timeout: float = TURN_TIMEOUT_SECONDS
        self.poll_interval: float = 1.0
        self._log = log_fn
        self._players: Dict[int, _Seat] = {}
        self._game = GameLogic()
        self._thread: Optional[threading.Thread] = None
        self._turn_start: Optional[float] = None

    def _log_event(self, client_ip: str, query: str, response: str, level: str) -> None:
        if self._log is not None:
            self._log(client_ip, query, response, level)

    def add_player(self, player_id: int, sock: socket.socket, address: str) -> None:
        """Seat a player and tell them their player number."""
        if self.is_full():
            raise ServerError(f"Session {self.session_id} is already full")
        self._players[player_id] = _Seat(sock, address)
        message = Message(MessageType.PLAYER_ID, _player_id_data(player_id))
        try:
            send_message(sock, message)
            if self._log is None:
                raise ServerError("Logging function is not initialized")
            self._log(address, build_message(message), f"Player {player_id} assigned", "INFO")
        except Exception as exc:
            self._log_event(address, "PLAYER_ID assignment failed", str(exc), "ERROR")
            raise

    def player_address(self, player_id: int) -> str:
        """The network address of a seated player."""
        seat = self._players.get(player_id)
        if seat is None:
            raise ServerError(f"Player {player_id} is not in session {self.session_id}")
        return seat.address

    def is_full(self) -> bool:
        """True once both players are seated."""
        return len(self._players) == 2

    def start(self) -> None:
        """Run the session on a background thread."""
        if self._thread is not None:
            raise ServerError(f"Session {self.session_id} already started")
        self._thread = threading.Thread(
            target=self.run, name=f"session-{self.session_id}", daemon=True
        )
        self._thread.start()

    def join(self, timeout: Optional[float] = None) -> bool:
        """Wait for the session thread, then close the players' sockets.

        Returns False if the thread is still running after *timeout*.
        """
        if self._thread is not None:
            self._thread.join(timeout)
            if self._thread.is_alive():
                return False
        for seat in self._players.values():
            seat.close()
        return True

    def run(self) -> None:
        """Play the whole session; errors end it rather than propagate."""
        try:
            self._play()
        except Exception as exc:
            _logger.error("critical error in session %s: %s", self.session_id, exc)
            self._log_event("0.0.0.0", "Critical error in run_session", str(exc), "ERROR")
            self.finished = True

    def _play(self) -> None:
        if not self._gather(
            Phase.REGISTRATION,
            MessageType.REGISTER,
            "Esperado REGISTER",
            self._game.register_player,
            lambda pid: f"Player {pid} registered",
            "REGISTRATION",
        ):
            return
        self._game.transition_to_placement()
        if not self._gather(
            Phase.PLACEMENT,
            MessageType.PLACE_SHIPS,
            "Esperado PLACE_SHIPS",
            self._game.place_ships,
            lambda pid: "Ships placed",
            "PLACEMENT",
        ):
            return
        self._game.transition_to_playing()
        self._playing()

    def _gather(self, phase, expected, wrong_type_text, apply, note, label) -> bool:
        """Collect one accepted message of type *expected* from each player."""
        done: Set[int] = set()
        while len(done) < 2 and not self.finished:
            for pid in PLAYER_IDS:
                if pid in done:
                    continue
                seat = self._players[pid]
                try:
                    for message in receive_messages(seat.sock):
                        if self._game.phase is not phase:
                            send_message(seat.sock, _error("Mensaje recibido en fase incorrecta"))
                            continue
                        if message.type is not expected:
                            send_message(seat.sock, _error(wrong_type_text))
                            continue
                        apply(pid, message.data)
                        self._log_event(seat.address, build_message(message), note(pid), "INFO")
                        done.add(pid)
                        break
                except ProtocolError as exc:
                    self._handle_disconnect(pid, str(exc))
                    return False
                except Exception as exc:
                    self._log_event(seat.address, f"Unexpected error in {label}", str(exc), "ERROR")
                    self._handle_disconnect(pid, f"Unexpected error: {exc}")
                    return False
        return not self.finished

    def _playing(self) -> None:
        current = 1
        self._broadcast_status(current)
        while not self.finished:
            seat = self._players[current]
            self._turn_start = time.monotonic()
            turn_finished = False
            while not turn_finished and not self.finished:
                try:
                    if time.monotonic() - self._turn_start >= self.turn_timeout:
                        self._log_event(seat.address, "Turn timeout", "Turno perdido", "INFO")
                        current = _other(current)
                        self._turn_start = time.monotonic()
                        self._broadcast_status(current)
                        break
                    try:
                        readable, _, _ = select.select([seat.sock], [], [], self.poll_interval)
                    except (OSError, ValueError, TypeError) as exc:
                        self._handle_disconnect(current, f"select() failed: {exc}")
                        return
                    if not readable:
                        continue
                    for message in receive_messages(seat.sock):
                        if message.type is MessageType.SURRENDER:
                            self._game.transition_to_finished()
                            self._announce(winner=_other(current), loser=current)
                            self.finished = True
                            return
                        if message.type is not MessageType.SHOOT:
                            send_message(seat.sock, _error("Esperado SHOOT"))
                            continue
                        try:
                            self._game.process_shot(current, message.data)
                        except GameLogicError as exc:
                            send_message(seat.sock, _error(str(exc)))
                            continue
                        shooter = current
                        current = _other(current)
                        self._turn_start = time.monotonic()
                        self._broadcast_status(current)
                        if self._game.is_game_over():
                            self._game.transition_to_finished()
                            self._announce(winner=shooter, loser=current)
                            self.finished = True
                            return
                        turn_finished = True
                        break
                except ProtocolError as exc:
                    self._handle_disconnect(current, str(exc))
                    return
                except Exception as exc:
                    self._log_event(seat.address, "Unexpected error in PLAYING", str(exc), "ERROR")
                    self._handle_disconnect(current, f"Unexpected error: {exc}")
                    return

    def _announce(self, winner: int, loser: int) -> None:
        send_message(self._players[winner].sock, Message(MessageType.GAME_OVER, GameOverData("YOU_WIN")))
        send_message(self._players[loser].sock, Message(MessageType.GAME_OVER, GameOverData("YOU_LOSE")))

    def _time_remaining(self) -> int:
        if self._game.phase is not Phase.PLAYING or self._turn_start is None:
            return 0
        elapsed = int(time.monotonic() - self._turn_start)
        return max(0, int(self.turn_timeout) - elapsed)

    def _broadcast_status(self, current: int) -> None:
        for pid in PLAYER_IDS:
            self._send_status(pid, current)

    def _send_status(self, player_id: int, current: int) -> None:
        seat = self._players[player_id]
        if seat.sock is None:
            return
        try:
            status = self._game.status(player_id)
            status.turn = Turn.YOUR_TURN if player_id == current else Turn.OPPONENT_TURN
            status.time_remaining = self._time_remaining()
            message = Message(MessageType.STATUS, status)
            send_message(seat.sock, message)
            self._log_event(seat.address, build_message(message), "Status sent", "INFO")
        except Exception as exc:
            self._log_event(seat.address, "Failed to send status", str(exc), "ERROR")

    def _handle_disconnect(self, player_id: int, reason: str) -> None:
        seat = self._players[player_id]
        _logger.debug("player %s disconnected: %s", player_id, reason)
        self._log_event(seat.address, "Client disconnected", reason, "ERROR")
        seat.close()
        other = self._players.get(_other(player_id))
        if other is not None and other.sock is not None:
            try:
                send_message(other.sock, _error("Opponent disconnected"))
                other.close()
            except Exception as exc:
                self._log_event(other.address, "Failed to notify", str(exc), "ERROR")
        self.finished = True


def _player_id_data(player_id: int):
    from .models import PlayerIdData

    return PlayerIdData(player_id)