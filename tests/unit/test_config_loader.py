import pathlib
import sys

import pytest

# Ensure src/ is importable
REPO_ROOT = pathlib.Path(__file__).resolve().parents[2]
SRC_DIR = REPO_ROOT / "src"
sys.path.append(str(SRC_DIR))

import config_loader  # type: ignore


def write_config(path, embed_defaults=""):
    path.write_text(
        "project:\n"
        "  name: test\n"
        "  version: 1\n"
        "api:\n"
        "  google_maps_api_key_env: TEST_MAPS_KEY\n"
        + embed_defaults
        + "iframe:\n"
        "  width: 800\n"
        "  height: 400\n",
        encoding="utf-8",
    )
    return str(path)


def test_repo_config_loads_with_builder_defaults():
    cfg = config_loader.load_config(str(REPO_ROOT / "config" / "config.yml"))
    assert cfg.api.google_maps_api_key_env == "GOOGLE_MAPS_API_KEY"
    assert cfg.embed_defaults.zoom == 12
    assert cfg.embed_defaults.avoid == []
    assert cfg.iframe.width == 600


def test_embed_defaults_seed_the_builder(tmp_path, monkeypatch):
    path = write_config(
        tmp_path / "config.yml",
        "embed_defaults:\n"
        "  zoom: 40\n"
        "  maptype: satellite\n"
        "  language: en\n"
        "  mode: bicycling\n"
        "  avoid: [ferries]\n"
        "  units: imperial\n"
        "  heading: 180\n",
    )
    monkeypatch.setenv("TEST_MAPS_KEY", "ENVKEY")
    cfg = config_loader.load_config(path)
    assert cfg.project_version == "1"

    client = config_loader.build_client(cfg)
    assert client.get_api_key() == "ENVKEY"
    assert client.get_zoom() == 21  # clamped
    assert client.get_map_type() == "satellite"
    assert client.get_language() == "en"
    assert client.get_region() == ""
    assert client.get_travel_mode() == "bicycling"
    assert client.get_avoid() == ["ferries"]
    assert client.get_units() == "imperial"
    assert client.get_heading() == 180
    assert client.get_fov() == 90


def test_explicit_key_wins_over_environment(tmp_path, monkeypatch):
    monkeypatch.setenv("TEST_MAPS_KEY", "ENVKEY")
    cfg = config_loader.load_config(write_config(tmp_path / "c.yml"))
    assert config_loader.build_client(cfg, api_key="ARG").get_api_key() == "ARG"


def test_missing_env_key_gives_empty_key(tmp_path, monkeypatch):
    monkeypatch.delenv("TEST_MAPS_KEY", raising=False)
    cfg = config_loader.load_config(write_config(tmp_path / "c.yml"))
    assert config_loader.build_client(cfg).get_api_key() == ""


def test_invalid_embed_default_is_rejected(tmp_path):
    path = write_config(tmp_path / "c.yml", "embed_defaults:\n  units: parsecs\n")
    with pytest.raises(ValueError, match="embed_defaults"):
        config_loader.load_config(path)


def test_missing_required_key(tmp_path):
    path = tmp_path / "c.yml"
    path.write_text("project:\n  name: x\n", encoding="utf-8")
    with pytest.raises(KeyError, match="version"):
        config_loader.load_config(str(path))


def test_iframe_size_must_be_positive(tmp_path):
    path = tmp_path / "c.yml"
    path.write_text(
        "project: {name: x, version: 1}\n"
        "api: {google_maps_api_key_env: K}\n"
        "iframe: {width: 0, height: 10}\n",
        encoding="utf-8",
    )
    with pytest.raises(ValueError, match="iframe.width"):
        config_loader.load_config(str(path))


def test_scalar_avoid_default_reports_string(tmp_path):
    path = write_config(tmp_path / "c.yml", "embed_defaults:\n  avoid: tolls\n")
    with pytest.raises(ValueError, match="got a string"):
        config_loader.load_config(path)
