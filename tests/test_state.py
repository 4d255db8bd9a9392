"""Tests for the step transition function."""

import pytest

from gamewizard.engine.errors import NavigationError, WizardBusyError
from gamewizard.engine.schema import StepId
from gamewizard.engine.state import (
    Back,
    Cancel,
    HookFinished,
    HookStarted,
    Next,
    SaveFinished,
    SaveStarted,
    WizardState,
    can_go_back,
    can_go_next,
    can_save,
    transition,
)


def test_initial_state():
    state = WizardState()

    assert state.step is StepId.INTRO
    assert state.working is False


def test_next_advances_one_step():
    state = transition(WizardState(), Next())

    assert state == WizardState(step=StepId.REFERENCES)


def test_back_from_intro_unavailable():
    state = WizardState()

    assert can_go_back(state) is False
    with pytest.raises(NavigationError):
        transition(state, Back())


def test_next_from_review_unavailable():
    """The last step offers save instead of next."""
    state = WizardState(step=StepId.REVIEW)

    assert can_go_next(state) is False
    assert can_save(state) is True
    with pytest.raises(NavigationError, match="last step"):
        transition(state, Next())


def test_next_then_back_returns_to_origin():
    state = WizardState(step=StepId.INFO)

    assert transition(transition(state, Next()), Back()) == state


def test_transition_does_not_mutate_input():
    state = WizardState(step=StepId.INFO)

    transition(state, Next())

    assert state.step is StepId.INFO


@pytest.mark.parametrize('action', [Next(), Back(), Cancel(), SaveStarted()])
def test_navigation_while_working_rejected(action):
    state = WizardState(step=StepId.REVIEW, working=True)

    with pytest.raises(WizardBusyError):
        transition(state, action)


def test_busy_state_disables_all_controls():
    state = WizardState(step=StepId.INFO, working=True)

    assert not can_go_back(state)
    assert not can_go_next(state)
    assert not can_save(state)


def test_hook_started_and_finished_toggle_working():
    state = transition(WizardState(step=StepId.INFO), HookStarted())
    assert state == WizardState(step=StepId.INFO, working=True)

    state = transition(state, HookFinished())
    assert state == WizardState(step=StepId.INFO, working=False)


def test_save_only_on_review():
    with pytest.raises(NavigationError, match="last step"):
        transition(WizardState(step=StepId.MODTYPES), SaveStarted())


def test_save_cycle_returns_to_intro():
    state = transition(WizardState(step=StepId.REVIEW), SaveStarted())
    assert state.working is True

    assert transition(state, SaveFinished()) == WizardState()


def test_cancel_returns_to_intro():
    assert transition(WizardState(step=StepId.TECHNICAL), Cancel()) == WizardState()


def test_unknown_action_rejected():
    with pytest.raises(TypeError):
        transition(WizardState(), object())
