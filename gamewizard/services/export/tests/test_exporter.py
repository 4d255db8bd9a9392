"""Tests for export_game - stages, notifications and the generated module."""

import json
import os

import pytest

from gamewizard.config import WizardSettings
from gamewizard.engine.errors import ExportError
from gamewizard.engine.runner import MockActionRunner, RealActionRunner
from gamewizard.engine.schema import DiscoverySpec, GameInfo, GameSpec, ModTypeSpec
from gamewizard.services.export import ExportResult, export_game, make_info, render_module
from gamewizard.services.export.exporter import WIKI_URL, extension_dir, normalize_logo

IMAGE_URL = 'https://example.com/cover.jpg'


@pytest.fixture
def spec():
    return GameSpec(
        game=GameInfo(
            id='samplegame',
            name='Sample Game',
            executable='bin/run.exe',
            logo='samplegame.jpg',
            required_files=['bin/run.exe'],
            details={'steamAppId': 1234, 'stopPatterns': ['*.pak']},
            environment={'SteamAPPId': '1234'},
        ),
        discovery=DiscoverySpec(ids=['1234']),
        mod_types=[
            ModTypeSpec(id='samplegame-a', name='Maps', priority='high', target_path='{gamePath}/maps'),
            ModTypeSpec(id='samplegame-b', name='Saves', priority='low', target_path='{documents}/Sample'),
        ],
    )


@pytest.fixture
def settings(tmp_path):
    return WizardSettings(extensions_root=tmp_path / 'extensions', user_name='tester')


@pytest.fixture
def mock_runner():
    return MockActionRunner()


def _notifications(runner):
    return [call for call in runner.calls if call[0] == 'notify']


class FakeContext:
    """Host side of a generated extension."""

    class Api:
        def get_discovered_path(self, game_id):
            return f"/games/{game_id}"

        def get_path(self, name):
            return f"/home/{name}"

    def __init__(self):
        self.api = self.Api()
        self.games = []
        self.mod_types = []

    def register_game(self, game):
        self.games.append(game)

    def register_mod_type(self, mod_type_id, priority, is_supported, get_path, test, options):
        self.mod_types.append((mod_type_id, priority, is_supported, get_path, options))


def test_make_info():
    game = GameInfo(id='foo', name='Foo', executable='foo.exe', logo='gameart.jpg')

    assert make_info(game, 'tester') == {
        'name': 'Game: Foo',
        'author': 'tester',
        'version': '1.0.0',
        'description': 'Support for Foo',
    }


@pytest.mark.parametrize('logo', ['C:\\art\\samplegame.jpg', '/art/samplegame.jpg', 'samplegame.jpg'])
def test_normalize_logo_strips_directories(spec, logo):
    spec = spec.model_copy(update={'game': spec.game.model_copy(update={'logo': logo})})

    assert normalize_logo(spec).game.logo == 'samplegame.jpg'


def test_export_success_writes_all_files(spec, settings, mock_runner):
    mock_runner.responses['fetch'] = b'jpeg-bytes'

    result = export_game(spec, IMAGE_URL, mock_runner, settings)

    export_path = os.path.join(str(settings.extensions_root), 'game-samplegame')
    assert result == ExportResult(success=True, path=export_path)
    assert ('ensure_dir', export_path) in mock_runner.calls
    assert ('fetch', IMAGE_URL) in mock_runner.calls
    assert mock_runner.files[os.path.join(export_path, 'samplegame.jpg')] == b'jpeg-bytes'

    info = json.loads(mock_runner.files[os.path.join(export_path, 'info.json')])
    assert info['author'] == 'tester'
    assert info['name'] == 'Game: Sample Game'


def test_export_success_notification(spec, settings, mock_runner):
    result = export_game(spec, None, mock_runner, settings)

    notifications = _notifications(mock_runner)
    assert len(notifications) == 1
    _, kind, title, message, actions = notifications[0]
    assert (kind, title, message) == ('success', 'Export successful.', result.path)
    assert actions[0]['title'] == 'Further steps'
    assert result.path in actions[0]['text']
    assert WIKI_URL in actions[0]['text']


def test_export_without_image_skips_fetch(spec, settings, mock_runner):
    export_game(spec, None, mock_runner, settings)

    assert not [call for call in mock_runner.calls if call[0] in ('fetch', 'write_bytes')]


@pytest.mark.parametrize('stage, collaborator', [
    ('load_template', 'read_file'),
    ('create_directory', 'ensure_dir'),
    ('write_module', 'write_file'),
    ('fetch_image', 'fetch'),
    ('write_image', 'write_bytes'),
])
def test_export_failure_is_reported_once(spec, settings, mock_runner, stage, collaborator):
    """Any failing stage aborts the export with a single error notification."""
    mock_runner.responses[collaborator] = OSError("boom")

    result = export_game(spec, IMAGE_URL, mock_runner, settings)

    assert result.success is False
    assert isinstance(result.error, ExportError)
    assert result.error.stage == stage
    assert isinstance(result.error.cause, OSError)
    assert _notifications(mock_runner) == [
        ('notify', 'error', 'Failed to export game', f"{stage} failed: boom", None)]


def test_export_failure_stops_later_stages(spec, settings, mock_runner):
    mock_runner.responses['ensure_dir'] = PermissionError("read-only")

    export_game(spec, IMAGE_URL, mock_runner, settings)

    assert not [call for call in mock_runner.calls if call[0] in ('write_file', 'fetch')]


@pytest.mark.parametrize('game_id', ['../../escaped', '', 'a/../../b'])
def test_export_outside_extensions_root_fails(spec, settings, mock_runner, game_id):
    spec = spec.model_copy(update={'game': spec.game.model_copy(update={'id': game_id})})

    result = export_game(spec, None, mock_runner, settings)

    assert result.success is False
    assert result.error.stage == 'create_directory'
    assert isinstance(result.error.cause, ValueError)
    assert not [call for call in mock_runner.calls if call[0] in ('ensure_dir', 'write_file')]


def test_extension_dir_is_child_of_root(tmp_path):
    assert extension_dir(str(tmp_path), 'samplegame') == os.path.join(str(tmp_path), 'game-samplegame')


def test_template_without_slots_fails_render(spec, settings, mock_runner):
    mock_runner.responses['read_file'] = "SPEC = {spec}\n"

    result = export_game(spec, None, mock_runner, settings)

    assert result.error.stage == 'render_module'
    assert 'missing slots' in str(result.error)


def test_export_to_disk(spec, settings):
    """The real runner creates the folder idempotently and writes the files."""
    runner = RealActionRunner()
    os.makedirs(os.path.join(str(settings.extensions_root), 'game-samplegame'))

    result = export_game(spec, None, runner, settings)

    assert result.success
    assert sorted(os.listdir(result.path)) == ['index.py', 'info.json']


def test_generated_module_registers_game(spec, settings, mock_runner):
    """The rendered module runs stand-alone and registers game and mod types."""
    template = mock_runner.read_file(str(settings.template_path))
    code = render_module(spec, template)

    namespace = {'__name__': 'generated'}
    exec(compile(code, 'index.py', 'exec'), namespace)
    context = FakeContext()

    assert namespace['main'](context) is True
    assert namespace['SPEC'] == spec.to_dict()

    game = context.games[0]
    assert game['id'] == 'samplegame'
    assert game['executable']() == 'bin/run.exe'
    assert game['queryModPath']() == '.'
    assert game['supportedTools'] == []

    assert [(m[0], m[1]) for m in context.mod_types] == [('samplegame-a', 25), ('samplegame-b', 76)]
    _, _, is_supported, get_path, options = context.mod_types[0]
    assert is_supported('samplegame') is True
    assert is_supported('other') is False
    assert get_path({'id': 'samplegame'}) == '/games/samplegame/maps'
    assert options == {'name': 'Maps'}
    assert context.mod_types[1][3]({'id': 'samplegame'}) == '/home/documents/Sample'
