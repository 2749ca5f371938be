from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict

from modbuilder.core.errors import AssemblyError
from modbuilder.core.module_spec import DESCRIPTOR_FILE, ModuleOptions

log = logging.getLogger("modbuilder.assembly")


def build_descriptor(options: ModuleOptions) -> Dict[str, Any]:
    """
    mod.json content. Fields are only present when set:
      main / includes  -> non-empty string
      worker / preserve-cwd / auto-redeploy -> true
    """
    params: Dict[str, Any] = {}

    if options.main:
        params["main"] = options.main

    if options.worker:
        params["worker"] = True

    if options.preserve_cwd:
        params["preserve-cwd"] = True

    if options.auto_redeploy:
        params["auto-redeploy"] = True

    if options.includes:
        params["includes"] = options.includes

    for key, value in params.items():
        log.info("Config param [%s]:[%s]", key, value)

    return params


def write_descriptor(module_dir: Path, descriptor: Dict[str, Any]) -> Path:
    path = Path(module_dir) / DESCRIPTOR_FILE
    try:
        path.write_text(json.dumps(descriptor, separators=(",", ":")), encoding="utf-8")
    except OSError as e:
        raise AssemblyError(f"unable to create module descriptor ({path}): {e}") from e

    log.info("Configuration written to: [%s]", path.resolve())
    return path
