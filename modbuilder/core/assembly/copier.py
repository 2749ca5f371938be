from __future__ import annotations

import logging
import os
import shutil
from pathlib import Path
from typing import Dict, FrozenSet, List, Tuple

from modbuilder.core.errors import AssemblyError
from modbuilder.core.observability.metrics import inc_files_copied

log = logging.getLogger("modbuilder.assembly")

_FileKey = Tuple[int, int]


def _require_directory(*paths: Path) -> None:
    for p in paths:
        if p is None or not Path(p).is_dir():
            raise AssemblyError(f"{p} is not a directory")


def _raise(err: OSError) -> None:
    raise err


def _file_key(path) -> _FileKey:
    st = os.stat(path)
    return st.st_dev, st.st_ino


def _root_chain(src: Path) -> FrozenSet[_FileKey]:
    # src itself plus every real parent, so a link to "/" or to any
    # directory above src counts as a loop too
    real = src.resolve()
    return frozenset(_file_key(p) for p in (real, *real.parents))


def copy_tree(src: Path, dst: Path) -> List[Path]:
    """
    Mirror every file under src into dst, keeping relative paths.

    - symlinks are followed (a linked directory is copied as a directory)
    - a link to a directory already on the current walk branch fails the copy
      before anything below it is visited
    - existing target files are replaced, nothing is ever deleted from dst
    - returns the copied target paths in walk order
    """
    src = Path(src)
    dst = Path(dst)
    _require_directory(src, dst)

    copied: List[Path] = []
    try:
        # walk root -> directories on the branch that leads to it
        branches: Dict[str, FrozenSet[_FileKey]] = {os.fspath(src): _root_chain(src)}

        for root, dirs, files in os.walk(src, followlinks=True, onerror=_raise):
            root_path = Path(root)
            target_root = dst / root_path.relative_to(src)
            branch = branches.pop(root)

            for d in dirs:
                child = os.path.join(root, d)
                key = _file_key(child)
                if key in branch:
                    raise AssemblyError(f"file system loop detected at {root_path / d}")
                branches[child] = branch | {key}
                target_dir = target_root / d
                if not target_dir.exists():
                    target_dir.mkdir()

            for name in files:
                target = target_root / name
                shutil.copyfile(root_path / name, target)
                log.info("Copied file [%s] -> [%s]", name, target.resolve())
                copied.append(target)
    except OSError as e:
        raise AssemblyError(f"unable to copy {src} to module folder {dst}: {e}") from e
    finally:
        inc_files_copied(len(copied))

    return copied


def copy_file_to_directory(file: Path, directory: Path) -> Path:
    """Copy one file into directory under its own name, replacing any existing file."""
    file = Path(file)
    directory = Path(directory)
    directory.mkdir(parents=True, exist_ok=True)
    target = directory / file.name
    shutil.copy2(file, target)
    return target
