"""Configuration management for the scanner execution harness.

Loads harness tuning from environment variables using Pydantic models.
Every setting has a sensible default; per-invocation settings such as the
timeout and verbosity live on ``ExecutionRequest`` instead.

Provides:
- Config: Pydantic model with all harness settings
- load_config: Factory function to create Config instance
"""

import os

from pydantic import BaseModel, Field


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


class Config(BaseModel):
    """Harness configuration loaded from environment.

    Attributes:
        stream_limit_bytes: Read buffer limit per output stream. Longer lines
            are read in fragments and reassembled.
        probe_timeout_seconds: Deadline for presence probes (``--version`` runs)
        kill_process_group: Start scanners in their own session and kill the
            whole process group on timeout (POSIX only)
    """

    stream_limit_bytes: int = Field(
        default_factory=lambda: int(os.getenv("SCANCORE_STREAM_LIMIT_BYTES", "1048576")),
        gt=0,
    )
    probe_timeout_seconds: float = Field(
        default_factory=lambda: float(os.getenv("SCANCORE_PROBE_TIMEOUT", "10")),
        ge=0,
    )
    kill_process_group: bool = Field(
        default_factory=lambda: _env_bool("SCANCORE_KILL_PROCESS_GROUP", True)
    )


def load_config() -> Config:
    """Load configuration from environment.

    Returns:
        Populated Config instance
    """
    return Config()
