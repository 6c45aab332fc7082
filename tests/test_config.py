"""Tests for settings loading."""

import pytest
import yaml

from goreorder.config import CONFIG_FILE_NAME, Settings, dump_settings, load_settings


def test_defaults(tmp_path):
    assert load_settings(cwd=tmp_path, environ={}) == Settings()


def test_file_values(tmp_path):
    (tmp_path / CONFIG_FILE_NAME).write_text(
        "format: gofmt\nwrite: true\nreorder-types: yes\norder:\n  - type\n  - var\n  - const\nunknown: 1\n"
    )
    settings = load_settings(cwd=tmp_path, environ={})
    assert settings.format == "gofmt"
    assert settings.write is True
    assert settings.reorder_types is True
    assert settings.order == ["type", "var", "const"]


def test_precedence(tmp_path):
    (tmp_path / CONFIG_FILE_NAME).write_text("write: true\ndiff: true\norder: [type]\n")
    environ = {"GOREORDER_WRITE": "false", "GOREORDER_ORDER": "func,const"}

    settings = load_settings(cwd=tmp_path, environ=environ)
    assert settings.write is False
    assert settings.diff is True
    assert settings.order == ["func", "const"]

    settings = load_settings({"write": True, "order": None}, cwd=tmp_path, environ=environ)
    assert settings.write is True
    assert settings.order == ["func", "const"]


def test_invalid_order(tmp_path):
    with pytest.raises(ValueError, match="invalid order name"):
        load_settings({"order": "const,struct"}, cwd=tmp_path, environ={})


def test_invalid_bool(tmp_path):
    with pytest.raises(ValueError, match="write must be a boolean"):
        load_settings(cwd=tmp_path, environ={"GOREORDER_WRITE": "maybe"})


def test_config_file_must_be_a_mapping(tmp_path):
    (tmp_path / CONFIG_FILE_NAME).write_text("- write\n")
    with pytest.raises(ValueError, match="expected a mapping"):
        load_settings(cwd=tmp_path, environ={})


def test_dump_uses_file_keys():
    data = yaml.safe_load(dump_settings(Settings(reorder_types=True)))
    assert data["reorder-types"] is True
    assert data["format"] == "builtin"
    assert data["order"] == ["const", "var", "interface", "type", "func"]
