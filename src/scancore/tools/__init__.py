"""Scanner process execution.

Provides:
- Execution request/result types
- Buffered and streaming scanner execution with timeouts
- Concurrent line capture of stdout and stderr
- Binary presence probes
"""

from .base import (
    ExecutionRequest,
    ExecutionResult,
    ExecutionStatus,
    check_binary,
    check_binary_installed,
    run_scanner,
    stream_scanner,
)
from .capture import OutputHandler, capture_stream

__all__ = [
    "ExecutionRequest",
    "ExecutionResult",
    "ExecutionStatus",
    "check_binary",
    "check_binary_installed",
    "run_scanner",
    "stream_scanner",
    "OutputHandler",
    "capture_stream",
]
