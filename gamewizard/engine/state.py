"""Step transition function - (state, action) -> state."""

from dataclasses import dataclass

from .errors import NavigationError, WizardBusyError
from .schema import StepId, STEPS


@dataclass(frozen=True)
class WizardState:
    """Current page and whether an entry hook or save is in flight."""

    step: StepId = StepId.INTRO
    working: bool = False


@dataclass(frozen=True)
class Action:
    """Base class for state transitions."""


@dataclass(frozen=True)
class Next(Action):
    pass


@dataclass(frozen=True)
class Back(Action):
    pass


@dataclass(frozen=True)
class Cancel(Action):
    pass


@dataclass(frozen=True)
class HookStarted(Action):
    pass


@dataclass(frozen=True)
class HookFinished(Action):
    pass


@dataclass(frozen=True)
class SaveStarted(Action):
    pass


@dataclass(frozen=True)
class SaveFinished(Action):
    pass


def can_go_back(state: WizardState) -> bool:
    return not state.working and state.step != STEPS[0]


def can_go_next(state: WizardState) -> bool:
    return not state.working and state.step != STEPS[-1]


def can_save(state: WizardState) -> bool:
    return not state.working and state.step == STEPS[-1]


def _check_idle(state: WizardState, action: Action) -> None:
    if state.working:
        raise WizardBusyError(f"Cannot {type(action).__name__.lower()} while working")


def transition(state: WizardState, action: Action) -> WizardState:
    """
    Compute the state following *action*.

    Args:
        state: Current state
        action: Requested transition

    Returns:
        New state (input is never modified)

    Raises:
        WizardBusyError: Navigation requested while working
        NavigationError: No predecessor / successor, or save outside review
    """
    idx = STEPS.index(state.step)

    if isinstance(action, Next):
        _check_idle(state, action)
        if idx + 1 >= len(STEPS):
            raise NavigationError(f"'{state.step.value}' is the last step, use save")
        return WizardState(step=STEPS[idx + 1], working=False)

    if isinstance(action, Back):
        _check_idle(state, action)
        if idx == 0:
            raise NavigationError(f"'{state.step.value}' has no previous step")
        return WizardState(step=STEPS[idx - 1], working=False)

    if isinstance(action, Cancel):
        _check_idle(state, action)
        return WizardState()

    if isinstance(action, HookStarted):
        return WizardState(step=state.step, working=True)

    if isinstance(action, HookFinished):
        return WizardState(step=state.step, working=False)

    if isinstance(action, SaveStarted):
        _check_idle(state, action)
        if state.step != STEPS[-1]:
            raise NavigationError("Save is only available on the last step")
        return WizardState(step=state.step, working=True)

    if isinstance(action, SaveFinished):
        return WizardState()

    raise TypeError(f"Unknown action: {action!r}")
