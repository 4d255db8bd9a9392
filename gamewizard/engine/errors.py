"""Error taxonomy for the add-game wizard."""

from typing import Dict


class WizardError(Exception):
    """Base class for all wizard errors."""


class NavigationError(WizardError):
    """Requested step transition is not available from the current step."""


class WizardBusyError(NavigationError):
    """Navigation requested while an entry hook or save is still running."""


class SpecValidationError(WizardError):
    """Mandatory fields failed validation at save time.

    Args:
        errors: Mapping of field key to the validation message
    """

    def __init__(self, errors: Dict[str, str]):
        self.errors = dict(errors)
        fields = ', '.join(sorted(self.errors))
        super().__init__(f"Cannot save, please fix: {fields}")


class TemplateError(WizardError):
    """Template document is missing required slots."""


class ExportError(WizardError):
    """One stage of the export pipeline failed.

    Args:
        stage: Pipeline stage that failed (e.g. 'fetch_image')
        cause: Underlying exception
    """

    def __init__(self, stage: str, cause: Exception):
        self.stage = stage
        self.cause = cause
        super().__init__(f"{stage} failed: {cause}")
