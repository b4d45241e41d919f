from __future__ import annotations

import tempfile
from pathlib import Path

import pytest
from pydantic import ValidationError

from alpsdrive.config import Settings
from alpsdrive.main import _parse_cors_origins


def test_defaults_point_at_temp_dir(monkeypatch):
    monkeypatch.delenv('DRIVE_ROOT', raising=False)

    settings = Settings(_env_file=None)

    assert settings.drive_root == Path(tempfile.gettempdir()) / 'alpsdrive'
    assert settings.staging_dirname == 'tmp'
    assert settings.app_port == 3000


def test_drive_root_from_environment(monkeypatch, tmp_path):
    monkeypatch.setenv('DRIVE_ROOT', str(tmp_path / 'custom'))

    assert Settings(_env_file=None).drive_root == tmp_path / 'custom'


def test_staging_dirname_must_be_single_segment():
    with pytest.raises(ValidationError):
        Settings(_env_file=None, staging_dirname='../elsewhere')


def test_parse_cors_origins():
    assert _parse_cors_origins('*') == ['*']
    assert _parse_cors_origins('http://a, http://b ,') == ['http://a', 'http://b']
