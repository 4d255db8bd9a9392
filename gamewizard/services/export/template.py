"""Single pass slot substitution for the extension template."""

import pprint
import re
from typing import Any, Dict, Iterable

from gamewizard.engine.errors import TemplateError

SLOT_PATTERN = re.compile(r'\{(\w+)\}')

SLOTS = (
    'spec',
    'mod_type_priority_func',
    'path_pattern_func',
    'query_path_func',
    'query_mod_path_func',
    'requires_launcher_func',
    'apply_func',
)


def find_slots(template: str) -> set:
    return set(SLOT_PATTERN.findall(template))


def render(template: str, values: Dict[str, Any], required: Iterable[str] = SLOTS) -> str:
    """Replace {slot} placeholders with values.

    Substituted text is not scanned again. Brace text that is not a known
    slot is kept as-is.

    Args:
        template: Template document
        values: Slot values
        required: Slots the template must contain

    Returns:
        Rendered text

    Raises:
        TemplateError: If the template lacks a required slot or a slot has no value

    Examples:
        >>> render("x = {spec}", {'spec': 1}, required=['spec'])
        'x = 1'
    """
    present = find_slots(template)
    missing = [slot for slot in required if slot not in present]
    if missing:
        raise TemplateError(f"Template is missing slots: {', '.join(missing)}")

    unfilled = [slot for slot in required if slot not in values]
    if unfilled:
        raise TemplateError(f"No value for slots: {', '.join(unfilled)}")

    def replacer(match):
        key = match.group(1)
        if key in values:
            return str(values[key])
        return match.group(0)

    return SLOT_PATTERN.sub(replacer, template)


def python_literal(data: Any) -> str:
    """Python source for plain data (dicts, lists, str, numbers, bools, None)."""
    return pprint.pformat(data, indent=1, width=88, sort_dicts=False)
