import logging

import pytest

from ledger_tracker.config import DEFAULT_CONFIG, configure_logging, load_config


def test_missing_config_file_returns_defaults(tmp_path):
    cfg = load_config(tmp_path / "absent.yaml")

    assert cfg == DEFAULT_CONFIG
    assert cfg is not DEFAULT_CONFIG
    assert load_config(None)["storage"]["backend"] == "json"


def test_config_merges_nested_defaults(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text(
        "storage:\n"
        "  backend: sqlite\n"
        "categories:\n"
        "  expense:\n"
        "    Food: [bakery]\n"
    )

    cfg = load_config(path)

    assert cfg["storage"] == {"backend": "sqlite", "path": "./data"}
    assert cfg["categories"]["expense"]["Food"] == ["bakery"]
    assert "Housing" in cfg["categories"]["expense"]
    assert "Salary" in cfg["categories"]["income"]
    assert cfg["output_modules"]["csv"].endswith("CSVOutput")


def test_config_must_be_a_mapping(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("- just\n- a list\n")

    with pytest.raises(ValueError):
        load_config(path)


def test_env_overrides_log_level(monkeypatch):
    calls = {}
    monkeypatch.setattr(logging, "basicConfig", lambda **kw: calls.update(kw))
    monkeypatch.setenv("POCKETLEDGER_LOG_LEVEL", "debug")

    configure_logging({"log_level": "WARNING"})

    assert calls["level"] == "DEBUG"

    monkeypatch.delenv("POCKETLEDGER_LOG_LEVEL")
    configure_logging({"log_level": "info"})
    assert calls["level"] == "INFO"


def test_unknown_log_level_falls_back_to_warning(monkeypatch, caplog):
    calls = {}
    monkeypatch.setattr(logging, "basicConfig", lambda **kw: calls.update(kw))
    monkeypatch.setenv("POCKETLEDGER_LOG_LEVEL", "chatty")

    with caplog.at_level(logging.WARNING, logger="ledger_tracker.config"):
        configure_logging({"log_level": "INFO"})

    assert calls["level"] == "WARNING"
    assert "Unknown log level 'CHATTY'" in caplog.text
