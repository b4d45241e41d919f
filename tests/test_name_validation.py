from __future__ import annotations

import pytest

from alpsdrive.services.drive import is_valid_name


@pytest.mark.parametrize('name', ['report_v2.txt', 'foo', 'my-folder', 'a1', 'archive.tar_gz', 'X-1.y-2'])
def test_accepts_safe_names(name):
    assert is_valid_name(name) is True


@pytest.mark.parametrize(
    'name',
    [
        '',
        'a',
        '../etc',
        'a.b.c',
        '.hidden',
        'trailing.',
        'with space',
        'dir/file',
        'dir\\file',
        'semi;colon',
        'café',
        'name\n',
    ],
)
def test_rejects_unsafe_names(name):
    assert is_valid_name(name) is False


def test_rejects_non_string():
    assert is_valid_name(None) is False
