from __future__ import annotations

import os
from pathlib import Path


def env_name() -> str:
    return (os.getenv("MODBUILDER_ENV") or "dev").strip().lower()


def log_level() -> str:
    return (os.getenv("MODBUILDER_LOG_LEVEL") or "INFO").strip().upper()


def workspace_root() -> Path:
    """Root for module outputs requested over HTTP (MODBUILDER_WORKSPACE_ROOT, default ./workspace)."""
    raw = os.getenv("MODBUILDER_WORKSPACE_ROOT", "").strip()
    return Path(raw).resolve() if raw else (Path.cwd() / "workspace").resolve()


def server_host() -> str:
    return os.getenv("MODBUILDER_HOST", "0.0.0.0")


def server_port() -> int:
    return int(os.getenv("MODBUILDER_PORT", "8001"))


def input_root() -> Path:
    """Root that HTTP requests may read project files from (MODBUILDER_INPUT_ROOT, default the workspace root)."""
    raw = os.getenv("MODBUILDER_INPUT_ROOT", "").strip()
    return Path(raw).resolve() if raw else workspace_root()
