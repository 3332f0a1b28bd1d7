"""Scanner process execution harness.

Provides:
- ExecutionRequest: Immutable description of one scanner invocation
- ExecutionResult / ExecutionStatus: Structured outcome of an invocation
- run_scanner: Buffered execution with optional console echo
- stream_scanner: Execution with a real-time line handler
- check_binary / check_binary_installed: Presence probes

Every invocation drains stdout and stderr concurrently and only returns once
the child has exited and both streams hit EOF, so no output is lost and the
child never blocks on a full pipe. Failures are reported on the result rather
than raised.
"""

import asyncio
import os
import shutil
import signal
import time
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType

import structlog

from scancore.core.config import Config, load_config
from scancore.core.exceptions import ExecutionError, ScannerStartError, ScannerTimeoutError
from scancore.tools.capture import OutputHandler, capture_stream

logger = structlog.get_logger()

# Upper bound on waiting for a killed child when unwinding on an exception
_REAP_GRACE_SECONDS = 5.0


class ExecutionStatus(str, Enum):
    """Terminal state of a scanner invocation."""
    COMPLETED = "completed"  # ran to exit, any exit code
    FAILED = "failed"  # could not be started
    KILLED = "killed"  # deadline expired


@dataclass(frozen=True)
class ExecutionRequest:
    """One scanner invocation.

    Attributes:
        binary: Scanner binary name or path
        args: Arguments, in order
        workdir: Working directory; empty inherits the caller's
        env: Variables merged over the inherited environment
        timeout: Deadline in seconds; 0 means no deadline
        verbose: Echo output lines to the console while buffering
    """
    binary: str
    args: Sequence[str] = ()
    workdir: str = ""
    env: Mapping[str, str] = field(default_factory=dict)
    timeout: float = 0.0
    verbose: bool = False

    def __post_init__(self):
        object.__setattr__(self, "args", tuple(self.args))
        object.__setattr__(self, "workdir", os.fspath(self.workdir))
        object.__setattr__(self, "env", MappingProxyType(dict(self.env)))

    @property
    def command(self) -> list[str]:
        return [self.binary, *self.args]


@dataclass(frozen=True)
class ExecutionResult:
    """Outcome of one scanner invocation.

    A non-zero ``exit_code`` is ordinary data: many scanners exit 1 when they
    report findings. ``error`` is only set when the process could not be
    started (``FAILED``) or was killed at its deadline (``KILLED``); in both
    cases ``exit_code`` stays 0.

    Attributes:
        status: Terminal state
        exit_code: Process exit code (negative when killed by a signal)
        stdout: Captured standard output
        stderr: Captured standard error
        duration_ms: Wall-clock duration, always set
        error: Start failure or timeout
    """
    status: ExecutionStatus
    exit_code: int = 0
    stdout: bytes = b""
    stderr: bytes = b""
    duration_ms: int = 0
    error: ExecutionError | None = None

    @property
    def ok(self) -> bool:
        """True when the scanner ran to completion and exited 0."""
        return self.status == ExecutionStatus.COMPLETED and self.exit_code == 0

    @property
    def timed_out(self) -> bool:
        return self.status == ExecutionStatus.KILLED

    @property
    def stdout_text(self) -> str:
        return self.stdout.decode("utf-8", errors="replace")

    @property
    def stderr_text(self) -> str:
        return self.stderr.decode("utf-8", errors="replace")

    def raise_for_status(self) -> None:
        """Raise the invocation error, if any.

        Raises:
            ScannerStartError: If the scanner could not be started
            ScannerTimeoutError: If the scanner was killed at its deadline
        """
        if self.error is not None:
            raise self.error


def check_binary(binary_name: str) -> bool:
    """Check if binary exists on PATH.

    Args:
        binary_name: Name or path of binary to check (e.g., "semgrep")

    Returns:
        True if binary is available, False otherwise
    """
    return shutil.which(binary_name) is not None


def _elapsed_ms(start: float) -> int:
    return int((time.monotonic() - start) * 1000)


def _kill(process: asyncio.subprocess.Process, process_group: bool) -> None:
    """Kill the child, and its process group when it leads one.

    The group is signalled even after the leader has exited: descendants
    that inherited the pipes keep the group alive.
    """
    if process_group:
        try:
            os.killpg(process.pid, signal.SIGKILL)
            return
        except ProcessLookupError:
            return
        except PermissionError:
            # killpg can be refused once the leader is a zombie
            pass
    if process.returncode is not None:
        return
    try:
        process.kill()
    except ProcessLookupError:
        pass


async def _reap(supervisor: asyncio.Future, process: asyncio.subprocess.Process) -> None:
    """Wait for the readers and the killed child before unwinding."""
    waiter = asyncio.ensure_future(process.wait())
    _, pending = await asyncio.wait([supervisor, waiter], timeout=_REAP_GRACE_SECONDS)
    if waiter in pending:
        waiter.cancel()
        logger.warning("scanner_reap_timeout", pid=process.pid)
    if supervisor.done() and not supervisor.cancelled():
        supervisor.exception()


async def _drain_and_wait(
    process: asyncio.subprocess.Process,
    handler: OutputHandler | None,
    echo: bool,
) -> tuple[bytes, bytes, int]:
    stdout, stderr = await asyncio.gather(
        capture_stream(process.stdout, is_error=False, handler=handler, echo=echo),
        capture_stream(process.stderr, is_error=True, handler=handler, echo=echo),
    )
    # Both pipes are drained, so waiting cannot deadlock on a full pipe
    returncode = await process.wait()
    return stdout, stderr, returncode


async def _execute(
    request: ExecutionRequest,
    handler: OutputHandler | None,
    echo: bool,
    config: Config | None,
) -> ExecutionResult:
    config = config or load_config()
    log = logger.bind(binary=request.binary, timeout=request.timeout)
    process_group = config.kill_process_group and os.name == "posix"
    env = {**os.environ, **request.env} if request.env else None

    start = time.monotonic()
    try:
        process = await asyncio.create_subprocess_exec(
            *request.command,
            stdin=asyncio.subprocess.DEVNULL,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
            cwd=request.workdir or None,
            env=env,
            limit=config.stream_limit_bytes,
            start_new_session=process_group,
        )
    except (OSError, ValueError) as e:
        log.error("scanner_start_failed", error=str(e))
        error = ScannerStartError(f"failed to start scanner: {e}", binary=request.binary)
        error.__cause__ = e
        return ExecutionResult(
            status=ExecutionStatus.FAILED,
            duration_ms=_elapsed_ms(start),
            error=error,
        )

    log = log.bind(pid=process.pid)
    log.debug("scanner_start", arg_count=len(request.args))

    supervisor = asyncio.ensure_future(_drain_and_wait(process, handler, echo))
    timed_out = False
    try:
        try:
            await asyncio.wait_for(
                asyncio.shield(supervisor),
                timeout=request.timeout if request.timeout > 0 else None,
            )
        except asyncio.TimeoutError:
            timed_out = True
            log.warning("scanner_timeout")
            _kill(process, process_group)
        # After a kill the readers see EOF and return their partial output
        stdout, stderr, returncode = await supervisor
    except BaseException:
        # Caller cancelled or a line handler raised: never leave the child behind
        _kill(process, process_group)
        await _reap(supervisor, process)
        raise

    duration_ms = _elapsed_ms(start)

    if timed_out:
        return ExecutionResult(
            status=ExecutionStatus.KILLED,
            stdout=stdout,
            stderr=stderr,
            duration_ms=duration_ms,
            error=ScannerTimeoutError(
                f"scanner killed after {request.timeout}s timeout",
                binary=request.binary,
                timeout=request.timeout,
            ),
        )

    log.info(
        "scanner_complete",
        exit_code=returncode,
        duration_ms=duration_ms,
        stdout_len=len(stdout),
        stderr_len=len(stderr),
    )
    return ExecutionResult(
        status=ExecutionStatus.COMPLETED,
        exit_code=returncode,
        stdout=stdout,
        stderr=stderr,
        duration_ms=duration_ms,
    )


async def run_scanner(
    request: ExecutionRequest,
    config: Config | None = None,
) -> ExecutionResult:
    """Run a scanner and buffer its output.

    Uses asyncio.create_subprocess_exec (never a shell). With
    ``request.verbose`` every line is also echoed to the console as it
    arrives; the returned bytes are the same either way.

    Args:
        request: Invocation to run
        config: Harness configuration (default: load_config())

    Returns:
        ExecutionResult; never raises for start failures or timeouts

    Example:
        >>> result = await run_scanner(
        ...     ExecutionRequest("semgrep", ["--json", "."], timeout=600)
        ... )
        >>> findings = json.loads(result.stdout) if result.status == "completed" else None
    """
    return await _execute(request, handler=None, echo=request.verbose, config=config)


async def stream_scanner(
    request: ExecutionRequest,
    handler: OutputHandler,
    config: Config | None = None,
) -> ExecutionResult:
    """Run a scanner, passing each output line to ``handler`` as it arrives.

    ``handler(line, is_error)`` runs on the event loop inside the reader
    for that stream, so it must not block. Lines of one stream arrive in
    order; stdout and stderr lines are not ordered relative to each other.
    An exception from the handler kills the scanner and propagates.

    Args:
        request: Invocation to run (``verbose`` is ignored)
        handler: Line callback
        config: Harness configuration (default: load_config())

    Returns:
        ExecutionResult with the full captured output
    """
    return await _execute(request, handler=handler, echo=False, config=config)


async def check_binary_installed(
    binary: str,
    *version_args: str,
    config: Config | None = None,
) -> tuple[bool, str]:
    """Probe whether a scanner is installed and read its version.

    Runs ``binary --version`` (or the given arguments). Any failure, whether
    missing binary, non-zero exit or timeout, reports "not installed" and is
    never raised.

    Args:
        binary: Binary name or path
        *version_args: Arguments that print the version (default: --version)
        config: Harness configuration (default: load_config())

    Returns:
        Tuple of (installed, first line of stdout)
    """
    config = config or load_config()
    if not check_binary(binary):
        return False, ""

    request = ExecutionRequest(
        binary=binary,
        args=version_args or ("--version",),
        timeout=config.probe_timeout_seconds,
    )
    result = await run_scanner(request, config=config)
    if not result.ok:
        logger.debug(
            "binary_probe_failed",
            binary=binary,
            status=result.status.value,
            exit_code=result.exit_code,
        )
        return False, ""

    lines = result.stdout_text.splitlines()
    return True, lines[0] if lines else ""
