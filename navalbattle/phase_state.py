"""The phases a game goes through and the allowed moves between them."""

from __future__ import annotations

from enum import Enum


class Phase(Enum):
    """Game phases, in the order they are passed through."""

    REGISTRATION = 0
    PLACEMENT = 1
    PLAYING = 2
    FINISHED = 3


class PhaseTransitionError(RuntimeError):
    """Raised when a phase change is not allowed from the current phase."""


class PhaseState:
    """Tracks the current phase; starts in REGISTRATION."""

    def __init__(self) -> None:
        self.phase = Phase.REGISTRATION

    def _advance(self, expected: Phase, target: Phase) -> None:
        if self.phase is not expected:
            raise PhaseTransitionError(
                f"Invalid transition to {target.name} from {self.phase.value}"
            )
        self.phase = target

    def transition_to_placement(self) -> None:
        """Move from REGISTRATION to PLACEMENT."""
        self._advance(Phase.REGISTRATION, Phase.PLACEMENT)

    def transition_to_playing(self) -> None:
        """Move from PLACEMENT to PLAYING."""
        self._advance(Phase.PLACEMENT, Phase.PLAYING)

    def transition_to_finished(self) -> None:
        """Move from PLAYING to FINISHED."""
        self._advance(Phase.PLAYING, Phase.FINISHED)