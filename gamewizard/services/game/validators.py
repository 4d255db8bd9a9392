"""Field validators for the add-game wizard.

Validators never raise. Each returns a ValidationResult for the current
value; ``ctx`` is a snapshot of all answers for cross-field checks.
"""

from typing import Dict, Any

from gamewizard.engine.schema import FieldKey, ValidationResult
from .derivation import deduce_id, escapes, is_empty, is_valid_id, relative_path

SUCCESS = ValidationResult(severity='success')


def validate_name(value: str, ctx: Dict[str, Any]) -> ValidationResult:
    """Game name must be set and, without a catalog domain, yield a usable id."""
    if is_empty(value):
        return ValidationResult(
            severity='error',
            message="Can't be empty. Please use the proper game name formatted "
                    "like the developer company advertises it.")
    if not deduce_id(value, ctx.get(FieldKey.CATALOG_DOMAIN)):
        return ValidationResult(
            severity='error',
            message="The name has to contain at least one letter or digit")
    return SUCCESS


def validate_catalog_domain(value: str, ctx: Dict[str, Any]) -> ValidationResult:
    """Catalog domain is optional, an empty value only warns."""
    if is_empty(value) or not value.strip():
        return ValidationResult(
            severity='warning',
            message="If this game exists on nexusmods.com, please enter the part "
                    "of the url that identifies the game, for example in "
                    "https://www.nexusmods.com/newvegas it would be \"newvegas\". "
                    "If the game is not on Nexus Mods you can leave this empty.")
    if not is_valid_id(value.strip()):
        return ValidationResult(
            severity='error',
            message="Only lowercase letters, digits and '.' are allowed, as in the url")
    return SUCCESS


def validate_game_path(value: str, ctx: Dict[str, Any]) -> ValidationResult:
    """Game path must be set."""
    if is_empty(value):
        return ValidationResult(
            severity='error',
            message="Please select the top-most folder of the game, meaning the "
                    "folder that contains within it the entire game, *not* just "
                    "the executable.")
    return SUCCESS


def validate_exe_path(value: str, ctx: Dict[str, Any]) -> ValidationResult:
    """Executable must be set and located inside the game path.

    Containment is only checked once the game path is known; until then
    the game path field carries the error.
    """
    if is_empty(value):
        return ValidationResult(
            severity='error',
            message="Can't be empty, please select the executable to start the game with")

    game_path = ctx.get(FieldKey.GAME_PATH)
    if not is_empty(game_path) and escapes(relative_path(game_path, value)):
        return ValidationResult(
            severity='error',
            message="The executable has to be inside the game directory")
    return SUCCESS
