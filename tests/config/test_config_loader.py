# tests/config/test_config_loader.py
import logging

import pytest

from faultdomain.config import (
    CONFIG_ENV_VAR,
    FaultDomainConfig,
    get_config,
    load_config,
    reset_config,
    set_config,
    validate_config,
)
from faultdomain.config.validator import has_errors
from faultdomain.core.errors import FaultDomainError, codes


@pytest.fixture
def isolated_home(tmp_path, monkeypatch):
    """No user config and no env override"""
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.delenv(CONFIG_ENV_VAR, raising=False)
    return tmp_path


def test_defaults_without_yaml(isolated_home):
    config = load_config()
    assert config == FaultDomainConfig()
    assert config.to_dict() == {
        "auto_install": True,
        "unattributed": "delegate",
        "late_callback": "warn",
        "log_faults": False,
    }


def test_yaml_overrides_defaults(tmp_path):
    path = tmp_path / "faultdomain.yml"
    path.write_text("late_callback: raise\nlog_faults: true\nsomething_else: 1\n", encoding="utf-8")

    config = load_config(path)

    assert config.late_callback == "raise"
    assert config.log_faults is True
    assert config.unattributed == "delegate"


def test_env_var_and_home_lookup(isolated_home, monkeypatch):
    home_cfg = isolated_home / ".faultdomain" / "config.yml"
    home_cfg.parent.mkdir()
    home_cfg.write_text("unattributed: stop\n", encoding="utf-8")
    assert load_config().unattributed == "stop"

    env_cfg = isolated_home / "env.yml"
    env_cfg.write_text("late_callback: ignore\n", encoding="utf-8")
    monkeypatch.setenv(CONFIG_ENV_VAR, str(env_cfg))

    config = load_config()
    assert config.late_callback == "ignore"
    assert config.unattributed == "delegate"


def test_unreadable_yaml_falls_back_to_defaults(tmp_path, caplog):
    broken = tmp_path / "broken.yml"
    broken.write_text("late_callback: [unclosed\n", encoding="utf-8")
    listing = tmp_path / "list.yml"
    listing.write_text("- a\n- b\n", encoding="utf-8")

    with caplog.at_level(logging.WARNING, logger="faultdomain.config.loader"):
        assert load_config(broken) == FaultDomainConfig()
        assert load_config(listing) == FaultDomainConfig()

    assert "Ignoring unreadable config" in caplog.text
    assert "top level must be a mapping" in caplog.text


def test_validation_issues():
    assert validate_config(FaultDomainConfig()) == []

    issues = validate_config(FaultDomainConfig(unattributed="explode", log_faults="yes"))
    assert {issue.path for issue in issues} == {"unattributed", "log_faults"}
    assert has_errors(issues)

    issues = validate_config(FaultDomainConfig(auto_install=False, unattributed="stop"))
    assert [issue.level for issue in issues] == ["warn", "warn"]
    assert not has_errors(issues)
    assert str(issues[0]).startswith("[warn] [auto_install]")


def test_strict_preset_and_merge():
    strict = FaultDomainConfig.strict()
    assert (strict.unattributed, strict.late_callback, strict.log_faults) == ("stop", "raise", True)
    assert strict.validate() == []

    relaxed = strict.merged(late_callback="warn")
    assert relaxed.late_callback == "warn"
    assert strict.late_callback == "raise"


def test_set_config_returns_previous(isolated_home):
    reset_config()
    loaded = get_config()
    assert loaded == FaultDomainConfig()

    strict = FaultDomainConfig.strict()
    assert set_config(strict) == loaded
    assert get_config() is strict


def test_set_config_rejects_invalid_config():
    before = get_config()

    with pytest.raises(FaultDomainError) as info:
        set_config(FaultDomainConfig(late_callback="sometimes"))

    assert info.value.error_code == codes.INVALID_CONFIG
    assert info.value.is_usage_error
    assert "late_callback" in info.value.details["issues"][0]
    assert get_config() is before


def test_invalid_values_fall_back_to_defaults(isolated_home, monkeypatch, caplog):
    bad = isolated_home / "bad.yml"
    bad.write_text("late_callback: sometimes\nunattributed: halt\nauto_install: 'no'\n", encoding="utf-8")
    monkeypatch.setenv(CONFIG_ENV_VAR, str(bad))
    reset_config()

    with caplog.at_level(logging.WARNING, logger="faultdomain.config.loader"):
        config = get_config()

    assert config == FaultDomainConfig()
    assert "Ignoring invalid config" in caplog.text
    assert "late_callback" in caplog.text
    assert "unattributed" in caplog.text
    assert "auto_install" in caplog.text
