"""Tests for the helper snippets embedded in generated extensions."""

import re

import pytest

from gamewizard.services.export.helpers import HELPER_SOURCES, HELPERS_VERSION, helper_slots
from gamewizard.services.export.template import SLOTS


class FakeStoreHelper:
    def __init__(self, by_id=None, by_name=None):
        self.by_id = by_id or {}
        self.by_name = by_name or {}

    def find_by_app_id(self, ids):
        for app_id in ids:
            if app_id in self.by_id:
                return self.by_id[app_id]
        raise LookupError(ids)

    def find_by_name(self, names):
        for name in names:
            if name in self.by_name:
                return self.by_name[name]
        return None


class FakeApi:
    def __init__(self, store_helper=None):
        self.store_helper = store_helper or FakeStoreHelper()

    def get_discovered_path(self, game_id):
        return f"/games/{game_id}"

    def get_path(self, name):
        return f"/home/user/{name}"


@pytest.fixture
def helpers():
    """Namespace with all helper functions defined, as in a generated module."""
    namespace = {'re': re, 'TOOLS': []}
    for source in helper_slots().values():
        exec(compile(source, '<helper>', 'exec'), namespace)
    return namespace


def test_helpers_cover_all_function_slots():
    assert set(HELPER_SOURCES) == set(SLOTS) - {'spec'}
    assert HELPERS_VERSION


def test_helper_slots_are_stripped():
    for source in helper_slots().values():
        assert source == source.strip()
        assert source.startswith('def ')


def test_mod_type_priority(helpers):
    assert helpers['mod_type_priority']('high') == 25
    assert helpers['mod_type_priority']('low') == 75


def test_path_pattern_substitutes_known_tokens(helpers):
    game = {'id': 'foo'}

    result = helpers['path_pattern'](FakeApi(), game, '{gamePath}/mods/{documents}/{unknown}')

    assert result == '/games/foo/mods//home/user/documents/{unknown}'


def test_query_path_prefers_store_ids(helpers):
    api = FakeApi(FakeStoreHelper(by_id={'489830': {'gamePath': '/steam/skyrim'}}))
    spec = {'discovery': {'ids': ['489830'], 'names': []}}

    assert helpers['make_find_game'](api, spec)() == '/steam/skyrim'


def test_query_path_falls_back_to_names(helpers):
    api = FakeApi(FakeStoreHelper(by_name={'Skyrim': {'gamePath': '/gog/skyrim'}}))
    spec = {'discovery': {'ids': ['1'], 'names': ['Skyrim']}}

    assert helpers['make_find_game'](api, spec)() == '/gog/skyrim'


def test_query_path_not_found(helpers):
    spec = {'discovery': {'ids': [], 'names': []}}

    assert helpers['make_find_game'](FakeApi(), spec)() is None


def test_query_mod_path_relative(helpers):
    spec = {'game': {'id': 'foo', 'modPath': 'Data', 'modPathIsRelative': True}}

    assert helpers['make_get_mod_path'](FakeApi(), spec)() == 'Data'


def test_query_mod_path_absolute_pattern(helpers):
    spec = {'game': {'id': 'foo', 'modPath': '{documents}/Foo/Mods', 'modPathIsRelative': False}}

    assert helpers['make_get_mod_path'](FakeApi(), spec)() == '/home/user/documents/Foo/Mods'


def test_requires_launcher_default(helpers):
    assert helpers['requires_launcher']('/games/foo') is None
