"""Derived values - defaults filled on entering a step, and fields computed at save time."""

import os
import posixpath
import re
from typing import Any, Dict, Optional, Tuple
from urllib.parse import urlparse

from gamewizard.engine.schema import FieldKey
from .references import (
    ReferenceSnapshot,
    catalog_image_url,
    find_catalog_entry,
    find_store_entry,
)

FALLBACK_LOGO = 'gameart.jpg'

_ID_STRIP = str.maketrans('', '', ' -_')
_ID_INVALID = re.compile(r'[^a-z0-9.]')
_ID_TOKEN = re.compile(r'[a-z0-9][a-z0-9.]*')


def is_empty(value: Any) -> bool:
    return value is None or value == ''


def is_valid_id(value: Optional[str]) -> bool:
    """True for lowercase letters, digits and '.', not starting with '.'."""
    return bool(value) and _ID_TOKEN.fullmatch(value) is not None


def deduce_id(name: Optional[str], catalog_domain: Optional[str] = None) -> str:
    """Game id: the catalog domain, else the lowercased name without spaces, '-' and '_'.

    Any character outside [a-z0-9.] is dropped afterwards, as are leading
    and trailing dots, so the id is always usable as a folder name. A
    well-formed catalog domain comes back unchanged; one without any usable
    character falls back to the name.

    Examples:
        >>> deduce_id('Foo Bar-Baz_1')
        'foobarbaz1'
        >>> deduce_id('Skyrim', 'skyrimspecialedition')
        'skyrimspecialedition'
        >>> deduce_id('AC/DC Rocks')
        'acdcrocks'
    """
    if not is_empty(catalog_domain):
        game_id = _clean_id(catalog_domain.strip().lower())
        if game_id:
            return game_id
    return _clean_id((name or '').lower().translate(_ID_STRIP))


def _clean_id(raw: str) -> str:
    return _ID_INVALID.sub('', raw).strip('.')


def relative_path(base: str, target: str) -> Optional[str]:
    """Path of *target* relative to *base*; None if no relative path exists.

    That is the case for targets on another drive and for an empty *base*,
    which would otherwise resolve against the working directory.
    """
    if is_empty(base) or is_empty(target):
        return None
    try:
        rel = os.path.relpath(target, base)
    except ValueError:
        return None
    return rel if rel else os.curdir


def escapes(rel: Optional[str]) -> bool:
    """True if *rel* leaves its base directory."""
    if rel is None:
        return True
    parts = rel.replace(os.sep, posixpath.sep).split(posixpath.sep)
    return parts[0] == os.pardir or os.path.isabs(rel)


def relativize_executable(game_path: str, exe_path: str) -> str:
    """Executable relative to the game directory, always in the relative form."""
    rel = relative_path(game_path, exe_path)
    return exe_path if rel is None else rel


def relativize_mod_path(game_path: str, mod_path: Optional[str]) -> Tuple[str, bool]:
    """
    Mod directory as stored in the GameSpec.

    Args:
        game_path: Game install directory
        mod_path: Selected mod directory (defaults to the game directory)

    Returns:
        (mod_path, is_relative) - relative when inside the game directory,
        otherwise the path as entered with is_relative False
    """
    target = game_path if is_empty(mod_path) else mod_path
    rel = relative_path(game_path, target)
    if escapes(rel):
        return target, False
    return rel, True


def logo_filename(game_id: str, image_url: Optional[str]) -> str:
    """'<id><ext of the image url>', or the fallback name when no image is set."""
    if is_empty(image_url):
        return FALLBACK_LOGO
    url_path = urlparse(image_url).path or image_url
    return f"{game_id}{posixpath.splitext(url_path)[1]}"


def autofill_info(ctx: Dict[FieldKey, Any], references: ReferenceSnapshot) -> Dict[FieldKey, Any]:
    """Entry hook of the info step - best guess defaults from the selected references.

    Only empty fields are filled. The store entry provides name and game
    path; the catalog entry provides the image and the name if still empty.

    Args:
        ctx: Snapshot of the current answers
        references: Catalog / store data

    Returns:
        Patch of field values to apply (may be empty)
    """
    patch: Dict[FieldKey, Any] = {}

    def set_if_empty(key: FieldKey, value: Any) -> None:
        if is_empty(value):
            return
        if is_empty(ctx.get(key)) and key not in patch:
            patch[key] = value

    store_entry = find_store_entry(references, ctx.get(FieldKey.STORE_GAME))
    catalog_entry = find_catalog_entry(references, ctx.get(FieldKey.CATALOG_DOMAIN))

    if store_entry is not None:
        set_if_empty(FieldKey.NAME, store_entry.name)
        set_if_empty(FieldKey.GAME_PATH, store_entry.game_path)

    if catalog_entry is not None:
        set_if_empty(FieldKey.NAME, catalog_entry.name)
        set_if_empty(FieldKey.IMAGE_URL, catalog_image_url(catalog_entry))

    return patch
