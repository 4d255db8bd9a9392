"""SpecCompiler - turns the wizard answers into a normalized GameSpec."""

import logging
from typing import Any, Callable, Dict, List, Optional, Sequence

from gamewizard.engine.schema import (
    DiscoverySpec,
    FieldKey,
    GameInfo,
    GameSpec,
    ModTypeSpec,
    StopPatternSpec,
)
from .derivation import (
    deduce_id,
    is_empty,
    logo_filename,
    relativize_executable,
    relativize_mod_path,
)
from .references import ReferenceSnapshot, find_store_entry, parse_store_selection

logger = logging.getLogger(__name__)

# Enricher signature: (details, environment, app_id) -> None, mutating the two dicts
StoreEnricher = Callable[[Dict[str, Any], Dict[str, str], str], None]


def _enrich_steam(details: Dict[str, Any], environment: Dict[str, str], app_id: str) -> None:
    environment['SteamAPPId'] = app_id
    try:
        details['steamAppId'] = int(app_id)
    except ValueError:
        logger.warning("steam app id %s is not numeric", app_id)


STORE_ENRICHERS: Dict[str, StoreEnricher] = {
    'steam': _enrich_steam,
}


def register_store_enricher(store_id: str, enricher: StoreEnricher) -> None:
    """Add store specific details for games discovered through *store_id*."""
    STORE_ENRICHERS[store_id] = enricher


def compile_spec(
    fields: Dict[FieldKey, Any],
    mod_types: Sequence[ModTypeSpec] = (),
    stop_patterns: Sequence[StopPatternSpec] = (),
    references: Optional[ReferenceSnapshot] = None,
) -> GameSpec:
    """
    Assemble the GameSpec for the given answers. Pure, performs no I/O.

    Args:
        fields: Snapshot of the FieldStore
        mod_types: Mod type items in display order
        stop_patterns: Stop pattern items in display order
        references: Store / catalog data, used to check the store selection

    Returns:
        Compiled GameSpec
    """
    game_path = fields.get(FieldKey.GAME_PATH) or ''
    catalog_domain = fields.get(FieldKey.CATALOG_DOMAIN)

    game_id = deduce_id(fields.get(FieldKey.NAME), catalog_domain)
    executable = relativize_executable(game_path, fields.get(FieldKey.EXE_PATH) or '')
    mod_path, mod_path_is_relative = relativize_mod_path(game_path, fields.get(FieldKey.MOD_PATH))
    merge_mods = fields.get(FieldKey.MERGE_MODS)

    details: Dict[str, Any] = {}
    environment: Dict[str, str] = {}
    discovery_ids: List[str] = []

    selection = fields.get(FieldKey.STORE_GAME)
    if not is_empty(selection):
        store_id, app_id = parse_store_selection(selection)
        if references is not None and find_store_entry(references, selection) is None:
            logger.info("store game %s not among discovered games", selection)

        discovery_ids.append(app_id)
        enricher = STORE_ENRICHERS.get(store_id)
        if enricher is not None:
            enricher(details, environment, app_id)

    if not is_empty(catalog_domain):
        details['nexusPageId'] = catalog_domain

    if stop_patterns:
        details['stopPatterns'] = [pattern.value for pattern in stop_patterns]

    game = GameInfo(
        id=game_id,
        name=fields.get(FieldKey.NAME) or '',
        executable=executable,
        logo=logo_filename(game_id, fields.get(FieldKey.IMAGE_URL)),
        merge_mods=True if merge_mods is None else bool(merge_mods),
        mod_path=mod_path,
        mod_path_is_relative=mod_path_is_relative,
        required_files=[executable],
        details=details,
        environment=environment,
    )

    return GameSpec(
        game=game,
        discovery=DiscoverySpec(ids=discovery_ids, names=[]),
        mod_types=list(mod_types) if mod_types else None,
    )
