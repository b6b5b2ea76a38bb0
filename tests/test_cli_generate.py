import importlib
import json
import sys

import pytest

# run.py is imported as a module; the server path is exercised with a patched
# start_server so no networking happens.


@pytest.fixture()
def run_module():
    if 'run' in sys.modules:
        del sys.modules['run']
    return importlib.import_module('run')


def test_version_flag_outputs_version(run_module, capsys):
    with pytest.raises(SystemExit) as exc:
        run_module.parse_args(['--version'])
    assert exc.value.code == 0
    out = capsys.readouterr().out
    assert run_module.__version__ in out
    assert 'Roomcrawl' in out


def test_default_command_is_server(run_module):
    assert run_module.parse_args([]).command == 'server'


def test_generate_json_output(run_module, capsys):
    exit_code = run_module.main(['generate', '--depth', '1', '--seed', '31337', '--json'])
    assert exit_code == 0
    out = capsys.readouterr().out
    # structured log lines come first; the JSON dump starts at the first brace
    payload = json.loads(out[out.index('{'):])
    assert payload['depth'] == 1
    assert payload['seed'] >= 31337
    assert payload['metrics']['attempts'] >= 1
    assert payload['start_room'] != payload['end_room']


def test_generate_banner(run_module, capsys):
    assert run_module.main(['generate', '--seed', '5']) == 0
    out = capsys.readouterr().out
    assert 'Roomcrawl Level' in out
    assert 'Rooms:' in out


def test_generate_exhausted_budget_returns_error(run_module, capsys):
    code = run_module.main(['generate', '--seed', '1', '--attempts', '0'])
    assert code == 1
    assert '[ERROR]' in capsys.readouterr().err


def test_server_main_invokes_start_server(monkeypatch, run_module):
    calls = {}

    def fake_start_server(host, port, debug):
        calls.update(host=host, port=port, debug=debug)

    monkeypatch.setenv('PORT', '5555')
    monkeypatch.setenv('HOST', '127.0.0.1')
    import roomcrawl.server as server_mod
    monkeypatch.setattr(server_mod, 'start_server', fake_start_server)

    assert run_module.main(['server', '--debug']) == 0
    assert calls == {'host': '127.0.0.1', 'port': 5555, 'debug': True}
