from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional, Sequence

from modbuilder.core.assembly.copier import copy_file_to_directory
from modbuilder.core.errors import AssemblyError
from modbuilder.core.module_spec import Resource

log = logging.getLogger("modbuilder.assembly")


def copy_resources(
    resources: Optional[Sequence[Optional[Resource]]],
    module_dir: Path,
    module_name: str,
) -> List[Path]:
    """Copy each resource's target_path file to the module root. Resources without one are ignored."""
    copied: List[Path] = []
    for res in resources or []:
        if res is None or not res.target_path:
            continue

        resource_file = Path(res.target_path)
        log.info("Copying resource: [%s] -> [%s]", resource_file.name, f"/{module_name}")
        try:
            copied.append(copy_file_to_directory(resource_file, module_dir))
        except OSError as e:
            raise AssemblyError(f"unable to copy resource ({resource_file}) to ({module_dir}): {e}") from e
    return copied
