import logging

import pytest

from argomatic.config import BootstrapSettings
from argomatic.environment import ProcessEnvironment
from argomatic.errors import UserError
from argomatic.protocol import State
from argomatic.reporting import FailureReporter
from argomatic.startup import StartupSequencer, run
from argomatic.utils.logging import DEBUG_PATTERN

from ._programs import BareTool, DynamicTool, RaisingTool, StaticTool


@pytest.fixture
def sequencer():
    return StartupSequencer(environment=ProcessEnvironment(), reporter=FailureReporter())


def test_debug_level_selects_debug_pattern(sequencer):
    """Verify --logging_level DEBUG dispatches with the verbose pattern."""
    program = BareTool()
    assert sequencer.start(program, ["--logging_level", "DEBUG"]) == 0

    env = sequencer.environment
    assert program.logging_level == "DEBUG"
    assert env.level == logging.DEBUG
    assert env.pattern == DEBUG_PATTERN
    assert env.file_sinks == []
    assert program.executed
    assert sequencer.result == 0
    assert sequencer.session.state is State.DISPATCHED


def test_help_exits_zero_without_dispatch(sequencer, capsys):
    """Verify --help renders help and never executes the tool."""
    program = BareTool()
    assert sequencer.start(program, ["--help"]) == 0
    out = capsys.readouterr().out
    assert "--logging_level" in out
    assert "--quiet_output_mode" in out
    assert not program.executed


def test_help_ignores_missing_and_unknown_arguments(sequencer, capsys):
    """Verify help wins over arguments that would fail validation."""
    program = StaticTool()
    assert sequencer.start(program, ["--count", "--bogus", "-h"]) == 0
    assert "--input" in capsys.readouterr().out
    assert not program.executed


def test_unopenable_log_file_is_internal_fault(sequencer, tmp_path, capsys):
    """Verify a bad --log_to_file path reports a runtime error with trace."""
    program = BareTool()
    target = tmp_path / "nonexistent" / "out.log"
    assert sequencer.start(program, ["--log_to_file", str(target)]) == 1

    err = capsys.readouterr().err
    assert "##### ERROR stack trace" in err
    assert "SinkOpenError" in err
    assert "RUNTIME ERROR" in err
    assert f"Unable to re-route log output to {target}" in err
    assert not program.executed


def test_unknown_level_is_user_fault(sequencer, capsys):
    """Verify an unknown logging level names the value in a user error."""
    program = BareTool()
    assert sequencer.start(program, ["--logging_level", "VERBOSE"]) == 1

    err = capsys.readouterr().err
    assert "USER ERROR" in err
    assert "MESSAGE: Unable to match: VERBOSE to a logging level" in err
    assert err.index("--logging_level") < err.index("USER ERROR")
    assert "stack trace" not in err
    assert not program.executed


def test_execute_result_becomes_exit_status(sequencer):
    """Verify the integer returned by execute() is the exit status."""
    assert sequencer.start(StaticTool(result=3), ["--input", "x"]) == 3
    assert sequencer.result == 3


@pytest.mark.parametrize(
    "error, banner",
    [(UserError("input file is empty"), "USER ERROR"), (ValueError("bug"), "RUNTIME ERROR")],
)
def test_execute_failures_are_reported(sequencer, capsys, error, banner):
    """Verify faults raised by execute() are classified and exit 1."""
    assert sequencer.start(RaisingTool(error), []) == 1
    err = capsys.readouterr().err
    assert banner in err
    assert f"MESSAGE: {error}" in err


def test_log_file_receives_header_and_is_released(sequencer, tmp_path):
    """Verify the header block is logged to the file sink before dispatch."""
    target = tmp_path / "run.log"
    assert sequencer.start(BareTool(), ["-log", str(target), "-quiet"]) == 0

    content = target.read_text()
    assert "Program Name: BareTool" in content
    assert "Program Args: -log" in content
    assert "Date/Time:" in content
    assert sequencer.environment.file_sinks == []
    assert sequencer.environment.console_handler is None
    assert not any(
        getattr(h, "baseFilename", None) == str(target) for h in logging.getLogger().handlers
    )


def test_dynamic_tool_dispatches_after_expansion(sequencer):
    """Verify a plugin tool runs once its plugin options are resolved."""
    program = DynamicTool()
    assert sequencer.start(program, ["-p", "Extra", "-xv", "value"]) == 0
    assert program.executed
    assert program.extra.extra_value == "value"


def test_run_exits_with_status():
    """Verify run() terminates the interpreter with the exit status."""
    with pytest.raises(SystemExit) as info:
        run(BareTool(), ["-h"])
    assert info.value.code == 0


def test_plugin_short_name_sharing_level_prefix(sequencer):
    """Verify -limit is handed to the plugin and the level stays INFO."""
    program = DynamicTool()
    assert sequencer.start(program, ["-p", "Extra", "-xv", "v", "-limit", "5"]) == 0
    assert program.extra.limit_count == 5
    assert program.logging_level == "INFO"
    assert sequencer.environment.level == logging.INFO


def test_invalid_settings_file_is_reported(tmp_path, monkeypatch, capsys):
    """Verify a broken $ARGOMATIC_CONFIG ends in a runtime banner, not a traceback."""
    config = tmp_path / "bad.yaml"
    config.write_text("rule_width: 1\n")
    monkeypatch.setenv("ARGOMATIC_CONFIG", str(config))

    program = BareTool()
    sequencer = StartupSequencer()
    assert sequencer.start(program, []) == 1
    assert sequencer.result == 1

    err = capsys.readouterr().err
    assert "A RUNTIME ERROR has occurred" in err
    assert "MESSAGE: Invalid configuration" in err
    assert not program.executed


def test_unusable_locale_is_reported(capsys):
    """Verify a locale failure during preparation is reported and exits 1."""
    environment = ProcessEnvironment(BootstrapSettings(locale_candidates=["xx_NOWHERE.bogus"]))
    sequencer = StartupSequencer(environment=environment, reporter=FailureReporter())
    program = BareTool()
    assert sequencer.start(program, []) == 1

    err = capsys.readouterr().err
    assert "InternalError" in err
    assert "None of the configured locales is available: xx_NOWHERE.bogus" in err
    assert sequencer.session is None
    assert not program.executed
