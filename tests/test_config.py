"""Tests for the bootstrap settings loader."""

from importlib.resources import files

import pytest
import yaml

from argomatic.config import BootstrapSettings, load_settings


def test_default_yaml_loads():
    """Loading the built-in defaults should succeed and match the file."""
    settings = load_settings()
    with files("argomatic.resources").joinpath("defaults.yaml").open() as fh:
        expected = yaml.safe_load(fh)
    assert settings.toolkit_name == expected["toolkit_name"]
    assert settings.locale_candidates == expected["locale_candidates"]
    assert settings.locale_candidates[-1] == "C"


def test_explicit_path_wins_over_environment(tmp_path, monkeypatch):
    """Verify an explicit file takes precedence over $ARGOMATIC_CONFIG."""
    env_file = tmp_path / "env.yaml"
    env_file.write_text("toolkit_name: from-env\n")
    explicit = tmp_path / "explicit.yaml"
    explicit.write_text("toolkit_name: explicit\nrule_width: 40\n")
    monkeypatch.setenv("ARGOMATIC_CONFIG", str(env_file))

    assert load_settings().toolkit_name == "from-env"
    settings = load_settings(explicit)
    assert settings.toolkit_name == "explicit"
    assert settings.rule_width == 40


def test_empty_file_uses_model_defaults(tmp_path):
    """Verify an empty YAML document yields the model defaults."""
    empty = tmp_path / "empty.yaml"
    empty.write_text("")
    assert load_settings(empty) == BootstrapSettings()


@pytest.mark.parametrize(
    "content",
    [
        "locale_candidates: []\n",
        "rule_width: 2\n",
        "- just\n- a list\n",
        "toolkit_name: [unclosed\n",
    ],
)
def test_invalid_configuration(tmp_path, content):
    """Verify schema and syntax problems surface as RuntimeError."""
    bad = tmp_path / "bad.yaml"
    bad.write_text(content)
    with pytest.raises(RuntimeError, match="Invalid configuration"):
        load_settings(bad)


def test_missing_file_is_invalid(tmp_path):
    """Verify a non-existent explicit file is reported the same way."""
    with pytest.raises(RuntimeError, match="Invalid configuration"):
        load_settings(tmp_path / "absent.yaml")
