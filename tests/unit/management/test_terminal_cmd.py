import pytest

from management.utils import TerminalCMDError, run_terminal_cmd


def test_returns_stdout(capsys):
    assert run_terminal_cmd('echo schema reset') == 'schema reset\n'
    assert capsys.readouterr().out == 'schema reset\n'


def test_non_zero_exit_raises():
    with pytest.raises(TerminalCMDError) as exc_info:
        run_terminal_cmd('exit 3')

    assert 'exited with 3' in str(exc_info.value)


def test_timeout_raises():
    with pytest.raises(TerminalCMDError):
        run_terminal_cmd('sleep 5', timeout=1)
