from __future__ import annotations

from alpsdrive import __main__ as entrypoint
from alpsdrive import main


def test_importing_main_builds_no_app():
    assert not hasattr(main, 'app')


def test_main_configures_logging_then_serves_app_factory(monkeypatch):
    calls = []

    monkeypatch.setattr(entrypoint, 'configure_logging', lambda level: calls.append(('logging', level)))
    monkeypatch.setattr(entrypoint.uvicorn, 'run', lambda target, **kwargs: calls.append(('run', target, kwargs)))

    entrypoint.main()

    assert calls[0] == ('logging', entrypoint.settings.log_level)
    assert calls[1][1] == 'alpsdrive.main:create_app'
    assert calls[1][2]['factory'] is True
    assert calls[1][2]['port'] == entrypoint.settings.app_port
