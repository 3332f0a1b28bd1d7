"""Exception hierarchy for the scanner execution core.

The execution harness never raises these from ``run_scanner`` or
``stream_scanner``. It attaches them to ``ExecutionResult.error`` so callers
can decide whether an invocation failure is fatal. ``raise_for_status`` on the
result turns them back into exceptions for callers that prefer that style.
"""


class ScanCoreError(Exception):
    """Base exception for all scancore errors."""
    pass


# =============================================================================
# Execution Errors
# =============================================================================

class ExecutionError(ScanCoreError):
    """Scanner process did not complete normally.

    Attributes:
        binary: Binary that was being executed
    """

    def __init__(self, message: str, binary: str = ""):
        super().__init__(message)
        self.binary = binary


class ScannerStartError(ExecutionError):
    """Scanner could not be started (missing binary, permissions, bad cwd)."""
    pass


class ScannerTimeoutError(ExecutionError):
    """Scanner exceeded its deadline and was killed.

    Attributes:
        timeout: Configured deadline in seconds
    """

    def __init__(self, message: str, binary: str = "", timeout: float = 0.0):
        super().__init__(message, binary=binary)
        self.timeout = timeout
