from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

from modbuilder.core.assembly.archive import archive_module
from modbuilder.core.assembly.copier import copy_tree
from modbuilder.core.assembly.dependencies import copy_dependencies
from modbuilder.core.assembly.descriptor import build_descriptor, write_descriptor
from modbuilder.core.assembly.resources import copy_resources
from modbuilder.core.errors import AssemblyError
from modbuilder.core.module_spec import (
    AssemblyRequest,
    Dependency,
    resolve_module_name,
    resolve_output_directory,
)
from modbuilder.core.observability.metrics import inc_assembly

log = logging.getLogger("modbuilder.assembly")


@dataclass
class AssemblyResult:
    module_name: str
    module_dir: Path
    descriptor_path: Path
    descriptor: Dict[str, Any]
    copied_files: List[Path] = field(default_factory=list)
    copied_resources: List[Path] = field(default_factory=list)
    copied_dependencies: List[Path] = field(default_factory=list)
    skipped_dependencies: List[Dependency] = field(default_factory=list)
    archive_path: Optional[Path] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "module_name": self.module_name,
            "module_dir": str(self.module_dir),
            "descriptor_path": str(self.descriptor_path),
            "descriptor": dict(self.descriptor),
            "copied_files": [str(p) for p in self.copied_files],
            "copied_resources": [str(p) for p in self.copied_resources],
            "copied_dependencies": [str(p) for p in self.copied_dependencies],
            "skipped_dependencies": [d.model_dump() for d in self.skipped_dependencies],
            "archive_path": str(self.archive_path) if self.archive_path else None,
        }


def ensure_module_dir(output_directory: Path, module_name: str) -> Path:
    module_dir = Path(output_directory) / module_name
    if not module_dir.exists():
        try:
            module_dir.mkdir(parents=True)
        except OSError as e:
            raise AssemblyError(f"unable to create module folder: {module_dir}") from e
    elif not module_dir.is_dir():
        raise AssemblyError(f"unable to create module folder: {module_dir} exists and is not a directory")
    return module_dir


def _assemble(request: AssemblyRequest) -> AssemblyResult:
    layout = request.layout
    options = request.options

    module_name = resolve_module_name(request)
    module_dir = ensure_module_dir(resolve_output_directory(request), module_name)

    descriptor = build_descriptor(options)
    result = AssemblyResult(
        module_name=module_name,
        module_dir=module_dir,
        descriptor_path=write_descriptor(module_dir, descriptor),
        descriptor=descriptor,
    )

    for root in layout.script_source_roots:
        if not root:
            continue
        scripts_dir = Path(root)
        if scripts_dir.exists():
            result.copied_files.extend(copy_tree(scripts_dir, module_dir))
        else:
            log.debug("Script source root missing, skipped: %s", scripts_dir)

    if layout.classes_directory:
        classes_dir = Path(layout.classes_directory)
        if classes_dir.exists():
            result.copied_files.extend(copy_tree(classes_dir, module_dir))
        else:
            log.debug("Classes directory missing, skipped: %s", classes_dir)

    result.copied_resources = copy_resources(layout.resources, module_dir, module_name)

    deps = copy_dependencies(layout.dependencies, module_dir, module_name)
    result.copied_dependencies = deps.copied
    result.skipped_dependencies = deps.skipped

    if options.archive:
        result.archive_path = archive_module(module_dir)

    return result


def assemble_module(request: AssemblyRequest) -> AssemblyResult:
    """
    Assemble <output_directory>/<module_name>:

      1) module folder (created when missing)
      2) mod.json
      3) script source roots, then the classes directory (tree copy, overwrite)
      4) resources with a target path
      5) compile/runtime dependencies into lib/
      6) optional <module_name>.zip next to the folder
    """
    try:
        result = _assemble(request)
    except AssemblyError:
        inc_assembly("failed")
        raise

    inc_assembly("ok")
    log.info(
        "Assembled module [%s]: %d files, %d resources, %d dependencies",
        result.module_name,
        len(result.copied_files),
        len(result.copied_resources),
        len(result.copied_dependencies),
    )
    return result
