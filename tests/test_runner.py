"""Tests for ActionRunner interface and implementations."""

import pytest
import requests

from gamewizard.engine import runner as runner_module
from gamewizard.engine.runner import ActionRunner, RealActionRunner, MockActionRunner


class FakeResponse:
    def __init__(self, content=b'', status_code=200):
        self.content = content
        self.status_code = status_code

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error")


def test_action_runner_is_abstract():
    """ActionRunner cannot be instantiated directly."""
    with pytest.raises(TypeError):
        ActionRunner()


def test_mock_runner_records_write_file():
    """MockActionRunner records write_file calls and keeps the content."""
    mock = MockActionRunner()

    mock.write_file('extensions/game-foo/index.py', 'SPEC = {}')

    assert mock.calls == [('write_file', 'extensions/game-foo/index.py', 'SPEC = {}')]
    assert mock.files['extensions/game-foo/index.py'] == 'SPEC = {}'


def test_mock_runner_fetch_default_response():
    mock = MockActionRunner()

    assert mock.fetch('https://example.com/a.jpg') == b''
    assert mock.calls[0] == ('fetch', 'https://example.com/a.jpg')


def test_mock_runner_raises_scripted_exceptions():
    """Exceptions given as responses are raised by the call."""
    mock = MockActionRunner()
    mock.responses['ensure_dir'] = PermissionError("read-only")

    with pytest.raises(PermissionError):
        mock.ensure_dir('/readonly/game-foo')

    assert mock.calls == [('ensure_dir', '/readonly/game-foo')]


def test_mock_runner_input_queue_and_default():
    mock = MockActionRunner()
    mock.input_queue = ['typed', '']

    assert mock.get_input('Name', 'default') == 'typed'
    assert mock.get_input('Name', 'default') == 'default'
    assert mock.get_input('Name') == ''


def test_mock_runner_select_path_list_consumed_in_order():
    mock = MockActionRunner()
    mock.responses['select_path'] = ['/g', '/g/run.exe']

    assert mock.select_path('directory') == '/g'
    assert mock.select_path('file') == '/g/run.exe'
    assert mock.select_path('file') is None


def test_mock_runner_records_notify():
    mock = MockActionRunner()

    mock.notify('error', 'Failed to export game', 'fetch_image failed: timeout')

    assert mock.calls == [('notify', 'error', 'Failed to export game',
                           'fetch_image failed: timeout', None)]


def test_real_runner_writes_files(tmp_path):
    runner = RealActionRunner()
    target = tmp_path / 'game-foo'

    runner.ensure_dir(str(target))
    runner.ensure_dir(str(target))
    runner.write_file(str(target / 'info.json'), '{}')
    runner.write_bytes(str(target / 'foo.jpg'), b'\xff\xd8')

    assert runner.read_file(str(target / 'info.json')) == '{}'
    assert (target / 'foo.jpg').read_bytes() == b'\xff\xd8'


def test_real_runner_fetch_returns_content(monkeypatch):
    calls = []

    def fake_get(url, timeout):
        calls.append((url, timeout))
        return FakeResponse(b'image-bytes')

    monkeypatch.setattr(runner_module.requests, 'get', fake_get)

    assert RealActionRunner().fetch('https://example.com/cover.jpg', timeout=5) == b'image-bytes'
    assert calls == [('https://example.com/cover.jpg', 5)]


def test_real_runner_fetch_raises_http_errors(monkeypatch):
    monkeypatch.setattr(runner_module.requests, 'get',
                        lambda url, timeout: FakeResponse(status_code=404))

    with pytest.raises(requests.HTTPError):
        RealActionRunner().fetch('https://example.com/missing.jpg')


def test_real_runner_get_input_uses_default(monkeypatch):
    monkeypatch.setattr('builtins.input', lambda prompt: '')

    assert RealActionRunner().get_input('Merge Mods', True) is True
    assert RealActionRunner().get_input('Name', 'Foo') == 'Foo'


def test_real_runner_select_path_blank_cancels(monkeypatch):
    monkeypatch.setattr('builtins.input', lambda prompt: '')

    assert RealActionRunner().select_path('directory') is None


def test_real_runner_select_path_warns_missing(monkeypatch, tmp_path, capsys):
    missing = tmp_path / 'missing.exe'
    monkeypatch.setattr('builtins.input', lambda prompt: str(missing))

    selected = RealActionRunner().select_path(
        'file', filters=[{'name': 'Executables', 'extensions': ['exe']}])

    assert selected == str(missing)
    assert f"Warning: {missing} does not exist" in capsys.readouterr().out


def test_real_runner_verbose_from_environment(monkeypatch):
    monkeypatch.setenv('GAMEWIZARD_VERBOSE', '1')

    assert RealActionRunner().verbose is True


def test_real_runner_notify_prints_actions(capsys):
    RealActionRunner().notify('success', 'Export successful.', '/ext/game-foo',
                              actions=[{'title': 'Further steps', 'text': 'Zip it.'}])

    out = capsys.readouterr().out
    assert '✓ Export successful.' in out
    assert '/ext/game-foo' in out
    assert '[Further steps]' in out
    assert 'Zip it.' in out
