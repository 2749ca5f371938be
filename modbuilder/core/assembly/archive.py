from __future__ import annotations

import logging
import zipfile
from pathlib import Path

from modbuilder.core.errors import AssemblyError

log = logging.getLogger("modbuilder.assembly")


def archive_module(module_dir: Path) -> Path:
    """
    Zip an assembled module folder to <module_dir>.zip.

    Entries are stored as <module_name>/..., so unpacking the archive
    into a modules directory recreates the module folder.
    """
    module_dir = Path(module_dir)
    if not module_dir.is_dir():
        raise AssemblyError(f"{module_dir} is not a directory")

    zip_path = module_dir.parent / f"{module_dir.name}.zip"
    base = module_dir.parent
    try:
        if zip_path.exists():
            zip_path.unlink()
        with zipfile.ZipFile(zip_path, "w", compression=zipfile.ZIP_DEFLATED) as zf:
            for f in sorted(module_dir.rglob("*")):
                if f.is_file():
                    zf.write(f, f.relative_to(base).as_posix())
    except OSError as e:
        raise AssemblyError(f"unable to archive module ({module_dir}) to ({zip_path}): {e}") from e

    log.info("Module archive written to: [%s]", zip_path.resolve())
    return zip_path
