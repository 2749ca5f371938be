from __future__ import annotations

import re
from pathlib import Path
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, Field

from modbuilder.core.assembly import assemble_module, build_descriptor
from modbuilder.core.config.loader import rebase_paths
from modbuilder.core.config.settings import input_root, workspace_root
from modbuilder.core.module_spec import (
    DESCRIPTOR_FILE,
    AssemblyRequest,
    ModuleOptions,
    resolve_module_name,
    resolve_output_directory,
)

router = APIRouter(prefix="/api/v1/modules", tags=["modules"])

_MODULE_NAME_RE = re.compile(r"^[A-Za-z0-9_.~\-]{1,200}$")


class DescriptorResponse(BaseModel):
    file: str
    descriptor: Dict[str, Any]


class AssembleResponse(BaseModel):
    message: str
    module_name: str
    module_dir: str
    descriptor_path: str
    descriptor: Dict[str, Any]
    copied_files: List[str] = Field(default_factory=list)
    copied_resources: List[str] = Field(default_factory=list)
    copied_dependencies: List[str] = Field(default_factory=list)
    skipped_dependencies: List[Dict[str, Any]] = Field(default_factory=list)
    archive_path: Optional[str] = None


def _within(path: str, allowed: Path, field: str, root_label: str) -> None:
    try:
        Path(path).resolve().relative_to(allowed)
    except ValueError:
        raise HTTPException(
            status_code=400,
            detail=f"Invalid {field}: must be within the allowed {root_label}",
        )


def _confine(req: AssemblyRequest) -> AssemblyRequest:
    """
    Anchor relative paths at the workspace root, reject module outputs that
    would land outside of it and reject project inputs outside the input root.
    """
    root = workspace_root()
    allowed_inputs = input_root()
    req = rebase_paths(req, root)

    name = resolve_module_name(req)
    out = resolve_output_directory(req)

    if not _MODULE_NAME_RE.match(name) or name in (".", ".."):
        raise HTTPException(
            status_code=400,
            detail="Invalid module_name: letters, digits, '.', '_', '-', '~' only, max 200 chars",
        )

    _within(str(out / name), root, "output_directory", "workspace root")

    layout = req.layout
    if layout.classes_directory:
        _within(layout.classes_directory, allowed_inputs, "classes_directory", "input root")
    for script_root in layout.script_source_roots:
        if script_root:
            _within(script_root, allowed_inputs, "script_source_roots", "input root")
    for resource in layout.resources:
        if resource is not None and resource.target_path:
            _within(resource.target_path, allowed_inputs, "resources", "input root")
    for dep in layout.dependencies:
        if dep is not None and dep.file:
            _within(dep.file, allowed_inputs, "dependencies", "input root")
    return req


@router.post("/descriptor", response_model=DescriptorResponse)
def preview_descriptor(options: ModuleOptions):
    return DescriptorResponse(file=DESCRIPTOR_FILE, descriptor=build_descriptor(options))


@router.post("/assemble", response_model=AssembleResponse)
def assemble(req: AssemblyRequest):
    result = assemble_module(_confine(req))
    return AssembleResponse(message="assembled", **result.to_dict())
