"""External Command Execution.

This module runs the external collaborators of the release pipeline (cargo,
rustup, bun, git, lipo) as blocking subprocesses.

Design:
    - Every invocation waits for completion; an optional timeout bounds it
    - On timeout or Ctrl-C the whole child process tree is terminated
    - Non-zero exit codes become ExternalToolError
    - working_directory() is the only way the pipeline changes the process cwd
"""

import logging
import os
import shutil
import subprocess
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, List, Optional, Sequence

import psutil

from .errors import ExternalToolError


@dataclass(frozen=True)
class CommandResult:
    """Result of one external command."""

    args: List[str]
    returncode: int
    stdout: str = ""
    stderr: str = ""


@contextmanager
def working_directory(path: Path) -> Iterator[Path]:
    """Temporarily switch the process working directory.

    The previous directory is restored on every exit path, including
    exceptions raised inside the block.
    """
    previous = Path.cwd()
    os.chdir(path)
    try:
        yield Path(path)
    finally:
        os.chdir(previous)


def terminate_process_tree(pid: int, timeout: float = 3.0) -> int:
    """Terminate a process and all of its descendants.

    Children are terminated before their parents; anything still alive after
    ``timeout`` seconds is killed.

    Returns:
        Number of processes signalled
    """
    try:
        root = psutil.Process(pid)
    except psutil.NoSuchProcess:
        return 0

    try:
        children = root.children(recursive=True)
    except psutil.NoSuchProcess:
        children = []

    processes = list(reversed(children)) + [root]
    signalled = 0
    for proc in processes:
        try:
            proc.terminate()
            signalled += 1
        except psutil.NoSuchProcess:
            pass  # Already dead

    _gone, alive = psutil.wait_procs(processes, timeout=timeout)
    for proc in alive:
        try:
            proc.kill()
        except psutil.NoSuchProcess:
            pass

    return signalled


class CommandRunner:
    """Runs external commands and reports failures as ExternalToolError."""

    def __init__(self, timeout: Optional[float] = None):
        """Initialize command runner.

        Args:
            timeout: Per-command timeout in seconds (None waits forever)
        """
        self.timeout = timeout

    def run(
        self,
        command: Sequence[str],
        cwd: Optional[Path] = None,
        capture_output: bool = False,
    ) -> CommandResult:
        """Run a command to completion.

        Args:
            command: Executable followed by its arguments
            cwd: Working directory for the child (default: current directory)
            capture_output: Capture stdout/stderr instead of streaming them

        Returns:
            CommandResult for a zero exit code

        Raises:
            ExternalToolError: If the command is missing, times out or fails
        """
        args = [str(part) for part in command]
        if not args:
            raise ExternalToolError(args, None, "empty command")

        # Resolve through PATH so .cmd/.bat shims work on Windows
        executable = shutil.which(args[0]) or args[0]
        logging.debug(f"Running: {' '.join(args)}" + (f" (in {cwd})" if cwd else ""))

        pipe = subprocess.PIPE if capture_output else None
        try:
            proc = subprocess.Popen(
                [executable] + args[1:],
                cwd=str(cwd) if cwd else None,
                stdout=pipe,
                stderr=pipe,
                text=True,
            )
        except FileNotFoundError as e:
            raise ExternalToolError(args, None, "executable not found") from e
        except OSError as e:
            raise ExternalToolError(args, None, str(e)) from e

        try:
            stdout, stderr = proc.communicate(timeout=self.timeout)
        except subprocess.TimeoutExpired as e:
            terminate_process_tree(proc.pid)
            proc.communicate()
            raise ExternalToolError(args, None, f"timed out after {self.timeout:g}s") from e
        except KeyboardInterrupt:
            terminate_process_tree(proc.pid)
            proc.wait()
            raise

        result = CommandResult(
            args=args,
            returncode=proc.returncode,
            stdout=stdout or "",
            stderr=stderr or "",
        )
        if result.returncode != 0:
            detail = result.stderr.strip().splitlines()[-1] if result.stderr.strip() else ""
            raise ExternalToolError(args, result.returncode, detail)
        return result
