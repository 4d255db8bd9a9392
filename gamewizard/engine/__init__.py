"""Wizard engine - core infrastructure for the data-driven add-game wizard."""

from .engine import WizardEngine
from .loader import SpecLoader
from .runner import ActionRunner, RealActionRunner, MockActionRunner
from .schema import FieldKey, StepId, Flow, GameSpec
from .state import WizardState, transition

__all__ = [
    'WizardEngine',
    'SpecLoader',
    'ActionRunner',
    'RealActionRunner',
    'MockActionRunner',
    'FieldKey',
    'StepId',
    'Flow',
    'GameSpec',
    'WizardState',
    'transition',
]
