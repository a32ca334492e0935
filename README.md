# navalbattle

A two-player naval battle game played over TCP. The package holds:

- `navalbattle.models`: the message types and their payloads (`Message`,
  `MessageType`, `Coordinate`, `Ship`, `StatusData`, ...) and `ProtocolError`
- `navalbattle.wire` and `navalbattle.codec`: reading and writing messages
  (`parse_message`, `build_message`)
- `navalbattle.phase_state` and `navalbattle.game_logic`: the game rules —
  registration, fleet placement, shots, sinking and the end of the game
- `navalbattle.session`: `GameSession`, which runs one match between two
  connected sockets on its own thread
- `navalbattle.server`: `Server`, which accepts connections, pairs them two by
  two into sessions and logs every exchange
- `navalbattle.env`: `load_env_file`, which copies `KEY=VALUE` lines of a file
  into `os.environ`

There are no third-party dependencies. Python 3.10 or later is needed.

## Installing

```
pip install .
```

To run the tests:

```
pip install .[test]
pytest
```

## Running the server

```
navalbattle-server <ip> <port> <path/to/log.log>
```

For example:

```
navalbattle-server 0.0.0.0 8080 ./logs/server.log
```

The IP must be an IPv4 address and the port must be between 1 and 65535. The
log file is opened for appending; every entry is written both to it and to
standard output as `[LEVEL] YYYY-MM-DD HH:MM:SS <client ip> <query> <response>`.
Ctrl-C stops the server.

Each pair of clients that connects is put in its own session:

1. Each player is sent `PLAYER_ID|1` or `PLAYER_ID|2`.
2. Both players must send `REGISTER`, then both must send `PLACE_SHIPS`.
   Any other message in these phases is answered with an `ERROR`.
3. Player 1 shoots first. After every accepted shot both players get a
   `STATUS`, and the turn passes to the opponent. A turn lasts at most 30
   seconds; after that the turn passes without a shot.
4. When a fleet is sunk, or a player sends `SURRENDER`, the winner gets
   `GAME_OVER|YOU_WIN` and the loser `GAME_OVER|YOU_LOSE`.

If a player disconnects or sends a line that cannot be parsed, the other
player is sent `ERROR|400,Opponent disconnected` and the session ends.
A shot at a cell already attacked, or outside the board, is answered with an
`ERROR` and the turn stays with the shooter.

## The protocol

Every message is one line: `<TYPE>|<data>\n`.

| Type          | Data                                                    |
|---------------|---------------------------------------------------------|
| `PLAYER_ID`   | `1` or `2`                                              |
| `REGISTER`    | `<nickname>,<email>`                                    |
| `PLACE_SHIPS` | `<TYPE>:<coord>,<coord>...;<TYPE>:...`                  |
| `SHOOT`       | `<coord>` such as `C5`                                  |
| `STATUS`      | `<turn>;<own board>;<opponent board>;<state>;<seconds>` |
| `SURRENDER`   | nothing                                                 |
| `GAME_OVER`   | the result, e.g. `YOU_WIN` or `YOU_LOSE`                |
| `ERROR`       | `<code>,<description>`                                  |

A board is a comma separated list of cells `<coord>:<state>`, where the state
is one of `WATER`, `SHIP`, `HIT`, `SUNK` and `MISS`. The turn is `YOUR_TURN`
or `OPPONENT_TURN`; the game state is `WAITING`, `ONGOING` or `ENDED`.

A fleet has nine ships: one PORTAAVIONES (5 cells), one BUQUE (4), two
CRUCERO (3), two DESTRUCTOR (2) and three SUBMARINO (1). Rows are `A` to `J`
and columns are `1` to `10`. Ships may not overlap.

Build and parse messages from Python:

```python
from navalbattle.codec import build_message, parse_message
from navalbattle.models import Coordinate, Message, MessageType, ShootData

line = build_message(Message(MessageType.SHOOT, ShootData(Coordinate("C", 5))))
assert line == "SHOOT|C5\n"
assert parse_message(line).data.coordinate.number == 5
```

Malformed input raises `navalbattle.models.ProtocolError`.

## Playing without the network

```python
from navalbattle.game_logic import GameLogic
from navalbattle.models import (
    Coordinate, PlaceShipsData, RegisterData, Ship, ShipType, ShootData, Turn,
)

game = GameLogic()
game.register_player(1, RegisterData("alice", "alice@example.com"))
game.register_player(2, RegisterData("bob", "bob@example.com"))

layout = [
    (ShipType.PORTAAVIONES, "A", 5), (ShipType.BUQUE, "B", 4),
    (ShipType.CRUCERO, "C", 3), (ShipType.CRUCERO, "D", 3),
    (ShipType.DESTRUCTOR, "E", 2), (ShipType.DESTRUCTOR, "F", 2),
    (ShipType.SUBMARINO, "G", 1), (ShipType.SUBMARINO, "H", 1),
    (ShipType.SUBMARINO, "I", 1),
]
fleet = PlaceShipsData([
    Ship(kind, [Coordinate(row, n) for n in range(1, size + 1)])
    for kind, row, size in layout
])
game.place_ships(1, fleet)
game.place_ships(2, fleet)

game.process_shot(1, ShootData(Coordinate("A", 1)))
assert game.status(2).turn is Turn.YOUR_TURN
```

`GameLogic` raises `GameLogicError` when a rule is broken (unknown player,
duplicate registration, a wrong fleet, a repeated shot). Shots made out of
turn are ignored. `is_game_over()` and `game_over_result()` report the end of
the game; `nickname()` gives a player's registered name. Phase changes go
through `transition_to_placement()`, `transition_to_playing()` and
`transition_to_finished()`, and an out-of-order change raises
`PhaseTransitionError`.

## What the package does not do

There is no client program: players need their own client that speaks the
protocol above, for example one built on `navalbattle.codec`. The server
command does not read a `.env` file; `load_env_file` is there for programs
that want it.