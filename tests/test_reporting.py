import pytest

from argomatic.config import BootstrapSettings
from argomatic.errors import ArgumentException, InternalError, SinkOpenError, UserError
from argomatic.protocol import Fault
from argomatic.reporting import EXIT_FAILURE, EXIT_SUCCESS, FailureReporter, FaultKind, classify


def _raised(exc):
    try:
        raise exc
    except Exception as caught:  # noqa: BLE001 - capture traceback for the report
        return caught


def _banner_lines(err):
    return [line for line in err.splitlines() if line.startswith("##### ERROR")]


@pytest.mark.parametrize(
    "exc, kind",
    [
        (UserError("bad input"), FaultKind.USER),
        (ArgumentException("bad flag"), FaultKind.USER),
        (SinkOpenError("no sink"), FaultKind.INTERNAL),
        (RuntimeError("boom"), FaultKind.INTERNAL),
    ],
)
def test_classify(exc, kind):
    """Verify the user-fault marker decides the fault kind."""
    assert classify(exc) == (kind, exc)


def test_user_fault_without_message_is_internal():
    """Verify a silent user fault is re-raised as an internal one."""
    original = UserError("   ")
    kind, error = classify(original)
    assert kind is FaultKind.INTERNAL
    assert isinstance(error, InternalError)
    assert str(error) == "UserError found with no message!"
    assert error.__cause__ is original


def test_report_help(capsys):
    """Verify help goes to stdout and exits successfully."""
    assert FailureReporter().report_help("usage: tool\n") == EXIT_SUCCESS
    assert capsys.readouterr().out == "usage: tool\n"


def test_report_user_error(capsys):
    """Verify the user banner carries guidance but no stack trace."""
    reporter = FailureReporter(BootstrapSettings(toolkit_name="kit", forum_url="https://forum"))
    code = reporter.report_user_error("bad input\n", help_text="usage: tool -x\n", version="1.2")
    err = capsys.readouterr().err

    assert code == EXIT_FAILURE
    assert err.startswith("usage: tool -x\n##### ERROR ---")
    lines = _banner_lines(err)
    assert "##### ERROR A USER ERROR has occurred (version 1.2): " in lines
    assert "##### ERROR Please do not post this error to the kit forum" in lines
    assert any("rerun with -h" in line for line in lines)
    assert any("https://forum" in line for line in lines)
    assert "##### ERROR MESSAGE: bad input" in lines
    assert "Traceback" not in err


def test_report_internal_error(capsys):
    """Verify the runtime banner includes the stack trace."""
    error = _raised(RuntimeError("boom"))
    code = FailureReporter().report_internal_error(error, version="1.2")
    err = capsys.readouterr().err

    assert code == EXIT_FAILURE
    assert "##### ERROR stack trace" in err
    assert "RuntimeError" in err
    assert "##### ERROR A RUNTIME ERROR has occurred (version 1.2):" in err
    assert "##### ERROR MESSAGE: boom" in err


def test_report_internal_error_without_message(capsys):
    """Verify message-less internal faults get the stock message."""
    FailureReporter().report_internal_error(_raised(KeyError()))
    err = capsys.readouterr().err
    assert "MESSAGE: Code exception (see stack trace for error itself)" in err


def test_report_dispatches_on_fault_kind(capsys):
    """Verify report() routes a fault to the matching banner."""
    reporter = FailureReporter()
    user = Fault(FaultKind.USER, "bad flag", ArgumentException("bad flag"), "usage: t\n")
    assert reporter.report(user) == EXIT_FAILURE
    assert "USER ERROR" in capsys.readouterr().err

    error = _raised(SinkOpenError("no sink"))
    assert reporter.report(Fault(FaultKind.INTERNAL, "no sink", error)) == EXIT_FAILURE
    err = capsys.readouterr().err
    assert "RUNTIME ERROR" in err and "SinkOpenError" in err
