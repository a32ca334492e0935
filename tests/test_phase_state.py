import pytest

from navalbattle.phase_state import Phase, PhaseState, PhaseTransitionError


@pytest.fixture
def phase_state():
    return PhaseState()


def test_transition_from_registration_to_placement(phase_state):
    assert phase_state.phase is Phase.REGISTRATION
    phase_state.transition_to_placement()
    assert phase_state.phase is Phase.PLACEMENT


def test_invalid_transition_from_registration_to_playing(phase_state):
    assert phase_state.phase is Phase.REGISTRATION
    with pytest.raises(PhaseTransitionError):
        phase_state.transition_to_playing()


def test_transition_from_placement_to_playing(phase_state):
    phase_state.transition_to_placement()
    assert phase_state.phase is Phase.PLACEMENT
    phase_state.transition_to_playing()
    assert phase_state.phase is Phase.PLAYING


def test_invalid_transition_from_registration_to_finished(phase_state):
    with pytest.raises(PhaseTransitionError):
        phase_state.transition_to_finished()


def test_transition_from_playing_to_finished(phase_state):
    phase_state.transition_to_placement()
    phase_state.transition_to_playing()
    assert phase_state.phase is Phase.PLAYING
    phase_state.transition_to_finished()
    assert phase_state.phase is Phase.FINISHED


def test_full_transition_cycle(phase_state):
    assert phase_state.phase is Phase.REGISTRATION
    phase_state.transition_to_placement()
    assert phase_state.phase is Phase.PLACEMENT
    phase_state.transition_to_playing()
    assert phase_state.phase is Phase.PLAYING
    phase_state.transition_to_finished()
    assert phase_state.phase is Phase.FINISHED


def test_invalid_multiple_transitions_to_same_phase(phase_state):
    phase_state.transition_to_placement()
    assert phase_state.phase is Phase.PLACEMENT
    with pytest.raises(PhaseTransitionError):
        phase_state.transition_to_placement()


def test_failed_transition_keeps_phase(phase_state):
    with pytest.raises(PhaseTransitionError, match="from 0"):
        phase_state.transition_to_finished()
    assert phase_state.phase is Phase.REGISTRATION


def test_error_is_a_runtime_error(phase_state):
    with pytest.raises(RuntimeError):
        phase_state.transition_to_playing()