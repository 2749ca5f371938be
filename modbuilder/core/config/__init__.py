from .loader import apply_properties, load_request, parse_bool, rebase_paths

__all__ = [
    "apply_properties",
    "load_request",
    "parse_bool",
    "rebase_paths",
]
