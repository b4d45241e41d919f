from __future__ import annotations

import pytest

from alpsdrive.errors import InvalidNameError, NotFoundError, PathEscapeError
from alpsdrive.services import drive


def test_validate_path_blocks_traversal(tmp_path):
    with pytest.raises(PathEscapeError):
        drive.validate_path(tmp_path.resolve(), '../../etc/passwd')


def test_validate_path_blocks_absolute_segment(tmp_path):
    with pytest.raises(PathEscapeError):
        drive.validate_path(tmp_path.resolve(), '/etc/passwd')


def test_resolve_shapes(tmp_path):
    root = drive.DriveRoot(tmp_path)

    assert root.resolve() == root.path
    assert root.resolve(name='notes.txt') == root.path / 'notes.txt'
    assert root.resolve('docs', 'notes.txt') == root.path / 'docs' / 'notes.txt'


def test_resolve_normalizes_inside_root(tmp_path):
    root = drive.DriveRoot(tmp_path)

    assert root.resolve('docs', '../notes.txt') == root.path / 'notes.txt'
    assert root.resolve('docs', '..') == root.path


def test_resolve_rejects_escape_even_without_validation(tmp_path):
    root = drive.DriveRoot(tmp_path / 'drive')

    with pytest.raises(PathEscapeError):
        root.resolve(name='..')
    with pytest.raises(PathEscapeError):
        root.resolve('..', 'sibling')


def test_resolve_validates_created_name(tmp_path):
    root = drive.DriveRoot(tmp_path)

    with pytest.raises(InvalidNameError):
        root.resolve('docs', 'bad name', validate=True)
    assert root.resolve('bad folder', 'good', validate=True) == root.path / 'bad folder' / 'good'


def test_resolve_rejects_empty_segment(tmp_path):
    root = drive.DriveRoot(tmp_path)

    with pytest.raises(InvalidNameError):
        root.resolve(name='')


def test_path_escape_maps_to_bad_request():
    assert PathEscapeError('x').status_code == 400


def test_resolve_hides_reserved_names(tmp_path):
    root = drive.DriveRoot(tmp_path, reserved=['tmp'])

    for segments in [('tmp', None), ('tmp', 'slot'), ('docs', '../tmp')]:
        with pytest.raises(NotFoundError):
            root.resolve(*segments)
    assert root.resolve() == root.path
    assert root.resolve('docs', 'tmp') == root.path / 'docs' / 'tmp'
