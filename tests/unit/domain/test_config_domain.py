from __future__ import annotations

"""
Unit tests for the Config Domain.

Verifies:
1. Default configuration generation.
2. Project file discovery and merging.
3. Resilience against corrupted config files (lenient vs strict).
4. Persistence of configuration dumps.
"""

import json

import pytest

from memoguard.domain.config import (
    find_config_file,
    get_default_config,
    load_config,
    save_config,
)
from memoguard.domain.constants import CONFIG_FILE_NAME, CURRENT_CONFIG_VERSION
from memoguard.domain.errors import ConfigError


def test_default_config_integrity():
    cfg = get_default_config()

    assert cfg["version"] == CURRENT_CONFIG_VERSION
    assert cfg["policy"] == "strict"
    assert cfg["unresolved"] == "warning"
    assert "create_element" in cfg["element_factories"]
    assert cfg["component_decorators"] == ["component"]


def test_default_config_returns_fresh_copies():
    first = get_default_config()
    first["extensions"].append(".pyi")
    assert get_default_config()["extensions"] == [".py"]


def test_load_config_without_file_uses_defaults(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    assert find_config_file() is None
    assert load_config()["policy"] == "strict"


def test_load_config_discovers_project_file(tmp_path, monkeypatch):
    (tmp_path / CONFIG_FILE_NAME).write_text(
        json.dumps({"policy": "element-permissive", "max_workers": 2}), encoding="utf-8"
    )
    monkeypatch.chdir(tmp_path)

    cfg = load_config()

    assert cfg["policy"] == "element-permissive"
    assert cfg["max_workers"] == 2
    assert cfg["unresolved"] == "warning"


def test_load_corrupted_config_is_lenient_by_default(tmp_path):
    bad = tmp_path / "broken.json"
    bad.write_text("{ not json", encoding="utf-8")

    cfg = load_config(str(bad))
    assert cfg == get_default_config()


def test_load_corrupted_config_strict_raises(tmp_path):
    bad = tmp_path / "broken.json"
    bad.write_text("[1, 2, 3]", encoding="utf-8")

    with pytest.raises(ConfigError):
        load_config(str(bad), strict=True)

    with pytest.raises(ConfigError):
        load_config(str(tmp_path / "missing.json"), strict=True)


def test_save_config_roundtrip(tmp_path):
    target = tmp_path / "nested" / CONFIG_FILE_NAME
    cfg = get_default_config()
    cfg["policy"] = "element-permissive"

    assert save_config(cfg, str(target)) is True
    assert load_config(str(target))["policy"] == "element-permissive"
