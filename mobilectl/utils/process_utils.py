# mobilectl/utils/process_utils.py

"""External process execution"""

import asyncio
import logging
import os
import shlex
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Awaitable, Callable, Dict, Iterable, List, Optional, Union

from ..api.exceptions import ProcessError

logger = logging.getLogger(__name__)

MASK = "****"


@dataclass(frozen=True)
class ProcessResult:
    """Captured outcome of an external command"""

    command: List[str]
    returncode: int
    stdout: str = ""
    stderr: str = ""
    duration: float = 0.0
    timed_out: bool = False

    @property
    def success(self) -> bool:
        return self.returncode == 0 and not self.timed_out

    @property
    def output(self) -> str:
        """Combined stdout and stderr"""
        return "\n".join(part for part in (self.stdout, self.stderr) if part)

    def error_summary(self, limit: int = 20) -> str:
        """Last lines of output, for error messages"""
        if self.timed_out:
            return "timed out"
        lines = [line for line in self.output.splitlines() if line.strip()]
        tail = "\n".join(lines[-limit:])
        return tail or f"exit code {self.returncode}"


CommandRunner = Callable[..., Awaitable[ProcessResult]]


def mask_command(command: Iterable[str], secrets: Iterable[str] = ()) -> str:
    """
    Render a command line with secret values masked

    Args:
        command: Command arguments
        secrets: Values to hide wherever they appear in an argument

    Returns:
        Shell-quoted command string safe for logs
    """
    secrets = [secret for secret in secrets if secret]
    masked = []
    for arg in command:
        for secret in secrets:
            arg = arg.replace(secret, MASK)
        masked.append(arg)
    return " ".join(shlex.quote(arg) for arg in masked)


async def run_command(command: List[str],
                      cwd: Optional[Union[str, Path]] = None,
                      env: Optional[Dict[str, str]] = None,
                      timeout: Optional[float] = None,
                      secrets: Iterable[str] = ()) -> ProcessResult:
    """
    Run an external command and capture its output

    Args:
        command: Program and arguments
        cwd: Working directory
        env: Variables added on top of the current environment
        timeout: Seconds before the process is killed
        secrets: Values masked when the command is logged

    Returns:
        ProcessResult; a non-zero exit is not an exception

    Raises:
        ProcessError: If the program cannot be started
    """
    display = mask_command(command, secrets)
    logger.debug(f"Running: {display}")

    full_env = None
    if env:
        full_env = dict(os.environ)
        full_env.update(env)

    start = time.monotonic()
    try:
        process = await asyncio.create_subprocess_exec(
            *command,
            cwd=str(cwd) if cwd else None,
            env=full_env,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
    except (FileNotFoundError, PermissionError) as e:
        raise ProcessError(command[0], f"cannot execute ({e.strerror or e})")

    try:
        stdout, stderr = await asyncio.wait_for(process.communicate(), timeout=timeout)
    except asyncio.TimeoutError:
        process.kill()
        await process.wait()
        logger.error(f"Command timed out after {timeout}s: {display}")
        return ProcessResult(
            command=list(command),
            returncode=-1,
            duration=time.monotonic() - start,
            timed_out=True,
        )

    result = ProcessResult(
        command=list(command),
        returncode=process.returncode,
        stdout=stdout.decode('utf-8', errors='replace'),
        stderr=stderr.decode('utf-8', errors='replace'),
        duration=time.monotonic() - start,
    )
    logger.debug(f"Exit code {result.returncode} in {result.duration:.1f}s: {command[0]}")
    return result
