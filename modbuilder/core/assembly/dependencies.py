from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Sequence

from modbuilder.core.assembly.copier import copy_file_to_directory
from modbuilder.core.errors import AssemblyError
from modbuilder.core.module_spec import LIB_DIR, PACKAGED_SCOPES, Dependency
from modbuilder.core.observability.metrics import inc_dependency_copied

log = logging.getLogger("modbuilder.assembly")


@dataclass
class DependencyCopyResult:
    lib_dir: Optional[Path] = None
    copied: List[Path] = field(default_factory=list)
    skipped: List[Dependency] = field(default_factory=list)


def is_packaged_scope(scope: Optional[str]) -> bool:
    if not scope:
        return False
    return scope in PACKAGED_SCOPES


def copy_dependencies(
    dependencies: Optional[Sequence[Optional[Dependency]]],
    module_dir: Path,
    module_name: str,
) -> DependencyCopyResult:
    """
    Copy compile/runtime dependency files into <module_dir>/lib.

    An empty dependency list leaves the module without a lib folder.
    Records without a file are ignored; records in other scopes are
    reported as skipped.
    """
    result = DependencyCopyResult()
    if not dependencies:
        return result

    lib_dir = Path(module_dir) / LIB_DIR
    try:
        lib_dir.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise AssemblyError(f"unable to create lib folder: {lib_dir}") from e
    result.lib_dir = lib_dir

    for dep in dependencies:
        if dep is None or not dep.file:
            continue
        if not is_packaged_scope(dep.scope):
            result.skipped.append(dep)
            continue

        dep_file = Path(dep.file)
        log.info("Copying dependency: [%s][%s] -> [%s]", dep_file.name, dep.scope, f"/{module_name}/{LIB_DIR}")
        try:
            result.copied.append(copy_file_to_directory(dep_file, lib_dir))
        except OSError as e:
            raise AssemblyError(f"unable to copy dependency ({dep_file}) to ({lib_dir}): {e}") from e
        inc_dependency_copied(str(dep.scope))

    return result
