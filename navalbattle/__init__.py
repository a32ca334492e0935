"""A two-player naval battle game over TCP: protocol, rules, sessions and server."""

__version__ = "0.1.0"
__all__ = [
    "codec",
    "env",
    "game_logic",
    "models",
    "phase_state",
    "server",
    "session",
    "wire",
]