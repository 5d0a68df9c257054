# tests/test_config.py
from pathlib import Path

import pytest

from panchang.main import create_app
from panchang.utils.config import AttrDict, config_path, load_config


def _write(tmp_path, text):
    p = tmp_path / "panchang.yaml"
    p.write_text(text, encoding="utf-8")
    return str(p)


def test_yaml_values_with_attribute_access(tmp_path):
    cfg = load_config(_write(tmp_path, "ayanamsa: 5\nevaluate_at: instant\nextra:\n  nested: [1, {a: 2}]\n"))
    assert isinstance(cfg, AttrDict)
    assert cfg.ayanamsa == 5 and cfg["evaluate_at"] == "instant"
    assert cfg.extra.nested[1].a == 2
    with pytest.raises(AttributeError):
        cfg.missing


def test_env_wins_per_key(tmp_path, monkeypatch):
    monkeypatch.setenv("PANCHANG_EVALUATE_AT", " instant ")
    monkeypatch.setenv("PANCHANG_DEFAULT_TZ", "Asia/Kolkata")
    monkeypatch.setenv("PANCHANG_DEFAULT_TIME", "")
    cfg = load_config(_write(tmp_path, "evaluate_at: sunrise\ntimezone: UTC\ndefault_time: '06:00'\n"))
    assert cfg.evaluate_at == "instant"
    assert cfg.timezone == "Asia/Kolkata"
    assert cfg.default_time == "06:00"


def test_empty_file_is_empty_config(tmp_path):
    assert load_config(_write(tmp_path, "")) == {}


def test_config_path_from_env(monkeypatch):
    assert config_path() == "config/defaults.yaml"
    monkeypatch.setenv("PANCHANG_CONFIG", "/etc/panchang.yaml")
    assert config_path() == "/etc/panchang.yaml"


def test_app_survives_missing_config(monkeypatch, tmp_path):
    monkeypatch.setenv("PANCHANG_CONFIG", str(tmp_path / "absent.yaml"))
    app = create_app()
    assert app.cfg == {}


def test_api_uses_configured_defaults(monkeypatch, tmp_path):
    monkeypatch.setenv("PANCHANG_BACKEND", "portable")
    monkeypatch.setenv("PANCHANG_CONFIG", _write(tmp_path, "evaluate_at: instant\nayanamsa: raman\n"))
    client = create_app().test_client()
    rv = client.get("/api/panchanga", query_string={
        "date": "2025-07-20", "tz": "America/Vancouver", "lat": 49.888, "lon": -119.496,
    })
    assert rv.status_code == 200
    p = rv.get_json()["panchanga"]
    assert p["evaluation_basis"] == "instant"
    assert p["ayanamsa"]["name"].lower().startswith("raman")


def test_package_metadata_points_at_shipped_files():
    tomllib = pytest.importorskip("tomllib")
    root = Path(__file__).resolve().parents[1]
    with open(root / "pyproject.toml", "rb") as f:
        project = tomllib.load(f)["project"]
    readme = project.get("readme")
    assert readme is None or (root / readme).is_file()
    assert readme != "SPEC_FULL.md"
    assert "skyfield" in " ".join(project["dependencies"])
