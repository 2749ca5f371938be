from .assembler import AssemblyResult, assemble_module
from .descriptor import build_descriptor, write_descriptor
from .copier import copy_tree, copy_file_to_directory
from .dependencies import copy_dependencies, is_packaged_scope
from .resources import copy_resources
from .archive import archive_module

__all__ = [
    "AssemblyResult",
    "assemble_module",
    "build_descriptor",
    "write_descriptor",
    "copy_tree",
    "copy_file_to_directory",
    "copy_dependencies",
    "is_packaged_scope",
    "copy_resources",
    "archive_module",
]
