"""Catalog and store reference data used to pre-fill the wizard.

The host looks these up (remote catalog, installed store games) and pushes
them in through ``ReferenceData``; the wizard only ever reads snapshots.
"""

import logging
from typing import Callable, Dict, Iterable, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator

from gamewizard.config import GAME_STORES

logger = logging.getLogger(__name__)

CATALOG_IMAGE_URL = 'https://staticdelivery.nexusmods.com/Images/games/cover_{id}.jpg'


class CatalogEntry(BaseModel):
    """Game as listed in the remote mod catalog."""

    model_config = ConfigDict(frozen=True)

    id: int = Field(..., description="Numeric catalog id")
    domain_name: str = Field(..., description="URL token of the game, e.g. 'skyrimspecialedition'")
    name: str = Field(..., description="Display name")


class StoreEntry(BaseModel):
    """Game found installed through a store / launcher."""

    model_config = ConfigDict(frozen=True)

    app_id: str = Field(..., description="Store specific application id")
    name: Optional[str] = Field(None, description="Display name")
    game_path: Optional[str] = Field(None, description="Install location")

    @field_validator('app_id', mode='before')
    @classmethod
    def _app_id_as_string(cls, value):
        return str(value)


class ReferenceSnapshot(BaseModel):
    """Immutable view of all reference data at one point in time."""

    model_config = ConfigDict(frozen=True)

    catalog: Tuple[CatalogEntry, ...] = ()
    stores: Dict[str, Tuple[StoreEntry, ...]] = Field(default_factory=dict)


class ReferenceData:
    """
    Reference data owned by one wizard session.

    Created when the wizard opens, closed when it is dismissed. Readers get
    immutable snapshots; the host pushes updates through the setters.
    Games of stores outside ``game_stores`` are still accepted, with a warning.
    """

    def __init__(self, catalog: Iterable[CatalogEntry] = (),
                 stores: Optional[Dict[str, Iterable[StoreEntry]]] = None,
                 game_stores: Optional[Iterable[str]] = None):
        self.game_stores = list(GAME_STORES if game_stores is None else game_stores)
        self._snapshot = ReferenceSnapshot()
        self._listeners: List[Callable[[ReferenceSnapshot], None]] = []
        self.closed = False
        self.set_catalog(catalog)
        for store_id, entries in (stores or {}).items():
            self.set_store_games(store_id, entries)

    def snapshot(self) -> ReferenceSnapshot:
        return self._snapshot

    def set_catalog(self, entries: Iterable[CatalogEntry]) -> None:
        catalog = tuple(_coerce(CatalogEntry, entry) for entry in entries)
        self._publish(self._snapshot.model_copy(update={'catalog': catalog}))

    def set_store_games(self, store_id: str, entries: Iterable[StoreEntry]) -> None:
        """Replace the games of one store, dropping duplicate app ids (first wins)."""
        if store_id not in self.game_stores:
            logger.warning("unknown game store %s", store_id)

        unique: Dict[str, StoreEntry] = {}
        for entry in entries:
            entry = _coerce(StoreEntry, entry)
            unique.setdefault(entry.app_id, entry)

        stores = dict(self._snapshot.stores)
        stores[store_id] = tuple(unique.values())
        self._publish(self._snapshot.model_copy(update={'stores': stores}))

    def subscribe(self, listener: Callable[[ReferenceSnapshot], None]) -> None:
        self._listeners.append(listener)

    def close(self) -> None:
        """Drop listeners and data; further updates are ignored."""
        self._listeners.clear()
        self._snapshot = ReferenceSnapshot()
        self.closed = True

    def _publish(self, snapshot: ReferenceSnapshot) -> None:
        if self.closed:
            logger.debug("reference update after close ignored")
            return
        self._snapshot = snapshot
        for listener in list(self._listeners):
            listener(snapshot)


def _coerce(model, entry):
    return entry if isinstance(entry, model) else model(**entry)


def parse_store_selection(selection: str) -> Tuple[str, str]:
    """Split a store option value 'steam:489830' into (store_id, app_id)."""
    store_id, sep, app_id = selection.partition(':')
    if not sep or not store_id or not app_id:
        raise ValueError(f"Invalid store selection: {selection!r}")
    return store_id, app_id


def find_store_entry(snapshot: ReferenceSnapshot, selection: Optional[str]) -> Optional[StoreEntry]:
    if not selection:
        return None
    store_id, app_id = parse_store_selection(selection)
    for entry in snapshot.stores.get(store_id, ()):
        if entry.app_id == app_id:
            return entry
    return None


def find_catalog_entry(snapshot: ReferenceSnapshot, domain: Optional[str]) -> Optional[CatalogEntry]:
    if not domain:
        return None
    for entry in snapshot.catalog:
        if entry.domain_name == domain:
            return entry
    return None


def catalog_image_url(entry: CatalogEntry) -> str:
    return CATALOG_IMAGE_URL.format(id=entry.id)


def store_options(snapshot: ReferenceSnapshot) -> List[Dict[str, str]]:
    """Selectable store games as [{'label': name, 'value': 'store:appid'}], sorted by label."""
    options = []
    for store_id, entries in snapshot.stores.items():
        for entry in entries:
            if entry.name is None:
                logger.warning("invalid game entry %s", entry.model_dump_json())
                continue
            options.append({'label': entry.name, 'value': f"{store_id}:{entry.app_id}"})

    return sorted(options, key=lambda option: option['label'].casefold())


def suggest_domains(options: Iterable[str], value: Optional[str]) -> List[str]:
    """Autosuggest for the catalog domain input.

    Suggestions appear once more than one character is typed. A single
    suggestion equal to the typed value counts as a hit and hides the list.
    """
    if value is None or len(value) <= 1:
        return []

    suggestions = [option for option in options if value in option]
    if len(suggestions) == 1 and suggestions[0] == value:
        return []
    return suggestions
