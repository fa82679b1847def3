"""
External process execution.

The build drives ``configure`` and ``make`` as opaque blocking steps. Each
call waits for the process to exit; there is no timeout, so callers that
need a deadline impose their own around the compile stage.
"""

import logging
import os
import subprocess
from pathlib import Path
from typing import Callable, Mapping, Optional, Sequence

from codeckit.core.exceptions import ExternalToolError

logger = logging.getLogger(__name__)

# Signature shared by run_command and test doubles
CommandRunner = Callable[[Sequence[str], Path, Mapping[str, str]], None]


def run_command(
    argv: Sequence[str],
    cwd: Path,
    env: Optional[Mapping[str, str]] = None,
) -> None:
    """
    Run one external command to completion.

    Output is inherited from the current process so long-running builds
    stream progress to the terminal.

    Args:
        argv: Command and arguments
        cwd: Working directory for the process
        env: Full environment for the process (default: inherit)

    Raises:
        ExternalToolError: If the command exits nonzero or cannot be started
    """
    logger.debug(f"Running in {cwd}: {' '.join(argv)}")

    try:
        result = subprocess.run(
            list(argv),
            cwd=str(cwd),
            env=dict(env) if env is not None else None,
        )
    except FileNotFoundError as e:
        logger.error(f"Executable not found: {argv[0]}")
        raise ExternalToolError(argv, None) from e

    if result.returncode != 0:
        logger.error(f"{argv[0]} exited with status {result.returncode}")
        raise ExternalToolError(argv, result.returncode)


def default_jobs() -> int:
    """Number of parallel compile jobs (all host cores)."""
    return os.cpu_count() or 1
