#!/usr/bin/env python3
"""
Test Configuration
==================
"""

import json

import pytest

from config import Config


@pytest.fixture
def restore_search_config():
    saved = dict(Config.SEARCH)
    yield
    Config.SEARCH.clear()
    Config.SEARCH.update(saved)


def test_get_dotted_keys():
    assert Config.get('COORDINATES.max_value') == 32767
    assert Config.get('SEARCH.qbits') == 0
    assert Config.get('SEARCH.missing', 'fallback') == 'fallback'
    assert Config.get('NOT_A_SECTION.key') is None


def test_set_dotted_key(restore_search_config):
    Config.set('SEARCH.progress_interval', 50)
    assert Config.SEARCH['progress_interval'] == 50

    with pytest.raises(KeyError):
        Config.set('NOT_A_SECTION.key', 1)


def test_to_dict_contains_sections():
    data = Config.to_dict()
    for section in ('SEARCH', 'COORDINATES', 'LOGGING', 'VISUALIZATION'):
        assert section in data


def test_from_json_merges_sections(tmp_path, restore_search_config):
    path = tmp_path / "config.json"
    path.write_text(json.dumps({'SEARCH': {'qbits': 2}, 'UNKNOWN': 1}))

    Config.from_file(str(path))

    assert Config.SEARCH['qbits'] == 2
    # Keys not in the file keep their values
    assert Config.SEARCH['bound_tolerance'] == 1e-6
    assert not hasattr(Config, 'UNKNOWN')


def test_from_yaml(tmp_path, restore_search_config):
    pytest.importorskip('yaml')
    path = tmp_path / "config.yaml"
    path.write_text("SEARCH:\n  strict_bounds: true\n")

    Config.from_file(str(path))

    assert Config.SEARCH['strict_bounds'] is True


def test_unsupported_format(tmp_path):
    path = tmp_path / "config.ini"
    path.write_text("[SEARCH]\n")
    with pytest.raises(ValueError):
        Config.from_file(str(path))
