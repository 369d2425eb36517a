import shlex
import subprocess

from loguru import logger


class TerminalCMDError(Exception): ...


def run_terminal_cmd(cmd: str, timeout: int | None = None) -> str:
    """
    Runs a shell command for the management scripts, echoing and returning its
    stdout. A non zero exit or a timeout raises TerminalCMDError.
    """
    program = shlex.split(cmd)[0] if cmd.strip() else cmd
    try:
        completed = subprocess.run(cmd, shell=True, capture_output=True, text=True, timeout=timeout)
    except subprocess.TimeoutExpired as err:
        raise TerminalCMDError(f'{program} did not finish within {timeout}s') from err

    if completed.stdout:
        print(completed.stdout, end='')

    if completed.returncode != 0:
        logger.error(f'{program} exited with {completed.returncode}: {completed.stderr.strip()}')
        raise TerminalCMDError(f'{program} exited with {completed.returncode}')

    return completed.stdout
