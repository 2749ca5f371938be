"""
Assembly request loader.

Reads a YAML or JSON file describing the project layout and module options:

    layout:
      group_id: com.acme
      artifact_id: orders
      version: 1.2.0
      build_directory: target
      classes_directory: target/classes
      script_source_roots: [src/main/scripts]
      dependencies:
        - {artifact_id: jackson-core, scope: compile, file: libs/jackson-core.jar}
    options:
      main: com.acme.OrdersVerticle
      worker: true

Relative paths are resolved against the directory holding the file.

Environment variable:
    MODBUILDER_CONFIG_FILE — path to the file when none is given.
    Default search path: <cwd>/modbuilder.yaml
"""
from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, Iterable, Optional

import yaml
from pydantic import ValidationError

from modbuilder.core.errors import ConfigError
from modbuilder.core.module_spec import AssemblyRequest

_log = logging.getLogger("modbuilder.config")

DEFAULT_CONFIG_NAME = "modbuilder.yaml"

# Build-host property names -> ModuleOptions fields
PROPERTY_ALIASES: Dict[str, str] = {
    "verticleName": "module_name",
    "verticleMain": "main",
    "worker": "worker",
    "preserveCwd": "preserve_cwd",
    "autoRedeploy": "auto_redeploy",
    "includes": "includes",
    "outputDirectory": "output_directory",
    "archive": "archive",
}

BOOL_OPTIONS = {"worker", "preserve_cwd", "auto_redeploy", "archive"}

_TRUE = ("1", "true", "yes", "on")
_FALSE = ("0", "false", "no", "off", "")


def parse_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    v = str(value).strip().lower()
    if v in _TRUE:
        return True
    if v in _FALSE:
        return False
    raise ConfigError(f"invalid boolean value {value!r}")


def _resolve_path(path: Optional[Path]) -> Path:
    if path is not None:
        return Path(path)
    env_path = os.getenv("MODBUILDER_CONFIG_FILE", "").strip()
    if env_path:
        return Path(env_path)
    return Path.cwd() / DEFAULT_CONFIG_NAME


def _parse_text(raw_text: str, source: Path) -> Any:
    # JSON first, YAML second (YAML would also accept most JSON but with looser typing)
    try:
        return json.loads(raw_text)
    except json.JSONDecodeError:
        pass
    try:
        return yaml.safe_load(raw_text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"failed to parse {source} as JSON or YAML: {exc}") from exc


def _rebase(value: Optional[str], base_dir: Path) -> Optional[str]:
    if not value:
        return value
    p = Path(value)
    if p.is_absolute():
        return value
    return str(base_dir / p)


def rebase_paths(request: AssemblyRequest, base_dir: Path) -> AssemblyRequest:
    """Return a copy of request with every relative path anchored at base_dir."""
    layout = request.layout.model_copy(deep=True)
    options = request.options.model_copy(deep=True)

    layout.build_directory = _rebase(layout.build_directory, base_dir)
    layout.classes_directory = _rebase(layout.classes_directory, base_dir)
    layout.script_source_roots = [_rebase(r, base_dir) for r in layout.script_source_roots]
    for res in layout.resources:
        if res is not None:
            res.target_path = _rebase(res.target_path, base_dir)
    for dep in layout.dependencies:
        if dep is not None:
            dep.file = _rebase(dep.file, base_dir)
    options.output_directory = _rebase(options.output_directory, base_dir)

    return AssemblyRequest(layout=layout, options=options)


def load_request(path: Optional[Path] = None) -> AssemblyRequest:
    """
    Load an AssemblyRequest from a YAML or JSON file.

    Unlike optional overlays, a missing or malformed request file is an error:
    there is nothing sensible to assemble without it.
    """
    resolved = _resolve_path(path)
    if not resolved.exists():
        raise ConfigError(f"config file not found: {resolved}")

    try:
        raw_text = resolved.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"cannot read config file {resolved}: {exc}") from exc

    data = _parse_text(raw_text, resolved)
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError(f"config file {resolved} must be a mapping, got {type(data).__name__}")

    try:
        request = AssemblyRequest(**data)
    except ValidationError as exc:
        raise ConfigError(f"invalid config file {resolved}: {exc}") from exc

    _log.info("Loaded assembly config from %s", resolved)
    return rebase_paths(request, resolved.resolve().parent)


def parse_property(text: str) -> tuple[str, str]:
    """'verticleMain=app.js' -> ('verticleMain', 'app.js')"""
    if "=" not in text:
        raise ConfigError(f"invalid property {text!r} (expected key=value)")
    key, value = text.split("=", 1)
    key = key.strip()
    if not key:
        raise ConfigError(f"invalid property {text!r} (empty key)")
    return key, value.strip()


def apply_properties(request: AssemblyRequest, properties: Iterable[str]) -> AssemblyRequest:
    """
    Override module options with host-style key=value properties.

    Keys may be build-host names (verticleName, preserveCwd, ...) or the
    option field names themselves (module_name, preserve_cwd, ...).
    """
    updates: Dict[str, Any] = {}
    for prop in properties or []:
        key, value = parse_property(prop)
        field_name = PROPERTY_ALIASES.get(key, key)
        if field_name not in type(request.options).model_fields:
            raise ConfigError(f"unknown property {key!r}")
        updates[field_name] = parse_bool(value) if field_name in BOOL_OPTIONS else value
        _log.debug("Property override %s -> %s=%r", key, field_name, updates[field_name])

    if not updates:
        return request
    options = request.options.model_copy(update=updates)
    return AssemblyRequest(layout=request.layout, options=options)
