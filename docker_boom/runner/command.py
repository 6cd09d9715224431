from __future__ import annotations

import logging
import subprocess
import sys
from concurrent.futures import ThreadPoolExecutor
from typing import IO

import pendulum

from ..capture.tail import DEFAULT_LINES, capture_tail
from ..models import Invocation, RunResult

logger = logging.getLogger(__name__)

# Exit code reported when the wrapped command could not be started or waited on.
SETUP_FAILURE = -1


def _exit_code(returncode: int) -> int:
    # Popen reports death by signal N as -N; use the shell's 128+N instead.
    if returncode < 0:
        return 128 - returncode
    return returncode


def _drain(pipe: IO[bytes], echo: IO[bytes], limit: int) -> list[str]:
    # An early stop must not leave the child blocked on a full, unread pipe.
    try:
        return capture_tail(pipe, echo, limit)
    finally:
        pipe.close()


def run_command(
    invocation: Invocation,
    limit: int = DEFAULT_LINES,
    stdout: IO[bytes] | None = None,
    stderr: IO[bytes] | None = None,
) -> RunResult:
    """Run ``invocation``, echoing its output live and keeping the last ``limit`` lines.

    Both pipes are drained concurrently before the child is waited on, so a
    chatty child can never block on a full pipe buffer.
    """
    out = stdout or sys.stdout.buffer
    err = stderr or sys.stderr.buffer

    started = pendulum.now()
    try:
        proc = subprocess.Popen(
            invocation.argv,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
        )
    except OSError as exc:
        logger.error("Could not start %r: %s", invocation.display(), exc)
        return RunResult(exit_code=SETUP_FAILURE)

    logger.debug("Started %r (pid %d)", invocation.display(), proc.pid)

    with ThreadPoolExecutor(max_workers=2, thread_name_prefix="drain") as pool:
        stdout_job = pool.submit(_drain, proc.stdout, out, limit)
        stderr_job = pool.submit(_drain, proc.stderr, err, limit)
        stdout_tail = stdout_job.result()
        stderr_tail = stderr_job.result()

    try:
        exit_code = _exit_code(proc.wait())
    except OSError as exc:
        logger.error("Waiting for %r failed: %s", invocation.display(), exc)
        exit_code = SETUP_FAILURE

    elapsed = pendulum.now() - started
    logger.debug(
        "%r exited with %d after %s",
        invocation.display(),
        exit_code,
        elapsed.in_words(),
    )

    return RunResult(stdout_tail=stdout_tail, stderr_tail=stderr_tail, exit_code=exit_code)
