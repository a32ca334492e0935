"""TCP server that pairs incoming players into game sessions."""

from __future__ import annotations

import ipaddress
import re
import socket
import sys
import threading
import time
from collections import deque
from typing import Deque, Dict, List, Optional, Tuple

from .session import GameSession, ServerError

_LISTEN_BACKLOG = 10
_ACCEPT_POLL = 0.5
_CLEANUP_INTERVAL = 1.0
_LEADING_INT = re.compile(r"\s*[+-]?[0-9]+")


class Server:
    """Accepts players, pairs them two by two and runs a session per pair."""

    def __init__(self, host: str, port: int, log_path: str) -> None:
        try:
            ipaddress.IPv4Address(host)
        except ValueError:
            raise ServerError(f"Invalid IP address: {host}") from None
        self.host = host
        self.port = port
        self.address: Optional[Tuple[str, int]] = None
        self.ready = threading.Event()
        try:
            self._log_file = open(log_path, "a", encoding="utf-8")
        except OSError:
            raise ServerError(f"Failed to open log file: {log_path}") from None
        self._log_lock = threading.Lock()
        self._stop = threading.Event()
        self._sock: Optional[socket.socket] = None
        self._sessions: Dict[int, GameSession] = {}
        self._sessions_lock = threading.Lock()
        self._pending: Deque[Tuple[socket.socket, str]] = deque()
        self._next_session_id = 1

    @property
    def session_count(self) -> int:
        """Number of sessions that have not yet been cleaned up."""
        with self._sessions_lock:
            return len(self._sessions)

    def log(self, client_ip: str, query: str, response: str, level: str = "INFO") -> None:
        """Write a timestamped entry to standard output and the log file."""
        with self._log_lock:
            stamp = time.strftime("%Y-%m-%d %H:%M:%S", time.localtime())
            entry = f"[{level}] {stamp} {client_ip} {query} {response}"
            print(entry, flush=True)
            if not self._log_file.closed:
                self._log_file.write(entry + "\n")
                self._log_file.flush()

    def _open_socket(self) -> socket.socket:
        try:
            sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        except OSError as exc:
            raise ServerError(f"Failed to create socket: {exc.strerror or exc}") from exc
        try:
            sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        except OSError as exc:
            sock.close()
            raise ServerError(f"Failed to set socket options: {exc.strerror or exc}") from exc
        try:
            sock.bind((self.host, self.port))
        except OSError as exc:
            sock.close()
            raise ServerError(f"Bind failed: {exc.strerror or exc}") from exc
        try:
            sock.listen(_LISTEN_BACKLOG)
        except OSError as exc:
            sock.close()
            raise ServerError(f"Listen failed: {exc.strerror or exc}") from exc
        sock.settimeout(_ACCEPT_POLL)
        return sock

    def run(self) -> None:
        """Listen and serve until close() is called."""
        self._sock = self._open_socket()
        self.address = self._sock.getsockname()
        self.log("0.0.0.0", "Server started", f"{self.host}:{self.port}")
        self.ready.set()
        cleaner = threading.Thread(
            target=self._cleanup_finished_sessions, name="session-cleanup", daemon=True
        )
        cleaner.start()
        try:
            self._accept_clients()
        finally:
            self._stop.set()
            cleaner.join()

    def close(self) -> None:
        """Stop accepting clients and release the socket and log file."""
        self._stop.set()
        if self._sock is not None:
            try:
                self._sock.close()
            except OSError:
                pass
        with self._log_lock:
            if not self._log_file.closed:
                self._log_file.close()

    def _accept_clients(self) -> None:
        sock = self._sock
        while not self._stop.is_set():
            try:
                conn, peer = sock.accept()
            except socket.timeout:
                continue
            except OSError as exc:
                if self._stop.is_set():
                    break
                self.log("0.0.0.0", "Accept failed", str(exc.strerror or exc), "ERROR")
                continue
            conn.settimeout(None)
            client_ip = peer[0]
            self.log(client_ip, "Client connected", "Assigning to session")
            self._pending.append((conn, client_ip))
            if len(self._pending) >= 2:
                first = self._pending.popleft()
                second = self._pending.popleft()
                self._open_session([first, second])

    def _open_session(self, players: List[Tuple[socket.socket, str]]) -> None:
        with self._sessions_lock:
            session = GameSession(self._next_session_id, self.log)
            self._next_session_id += 1
            try:
                for player_id, (conn, client_ip) in enumerate(players, start=1):
                    session.add_player(player_id, conn, client_ip)
            except Exception as exc:
                self.log("0.0.0.0", "Session setup failed", str(exc), "ERROR")
                for conn, _ in players:
                    try:
                        conn.close()
                    except OSError:
                        pass
                return
            session.start()
            self._sessions[session.session_id] = session

    def _cleanup_finished_sessions(self) -> None:
        while not self._stop.wait(_CLEANUP_INTERVAL):
            with self._sessions_lock:
                done = [s for s in self._sessions.values() if s.finished]
                for session in done:
                    del self._sessions[session.session_id]
            for session in done:
                session.join(1.0)


def _parse_port(text: str) -> int:
    match = _LEADING_INT.match(text)
    if match is None:
        raise ValueError("not a number")
    port = int(match.group())
    if not 1 <= port <= 65535:
        raise ValueError("Port out of valid range (1-65535)")
    return port


def main(argv: Optional[List[str]] = None) -> int:
    """Run the server: <ip> <port> <log path>."""
    args = sys.argv[1:] if argv is None else list(argv)
    if len(args) != 3:
        print("Usage: server <ip> <port> </path/log.log>", file=sys.stderr)
        print("Example: server 0.0.0.0 8080 ./logs/server.log", file=sys.stderr)
        return 1
    host, port_text, log_path = args
    try:
        port = _parse_port(port_text)
    except ValueError as exc:
        print(f"Invalid port: {port_text} ({exc})", file=sys.stderr)
        return 1
    server = None
    try:
        server = Server(host, port, log_path)
        server.run()
    except ServerError as exc:
        print(f"Server error: {exc}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        return 0
    except Exception as exc:
        print(f"Unexpected error: {exc}", file=sys.stderr)
        return 1
    finally:
        if server is not None:
            server.close()
    return 0


if __name__ == "__main__":
    sys.exit(main())