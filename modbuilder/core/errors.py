from __future__ import annotations


class AssemblyError(Exception):
    """Fails the module build; message is shown to the user as-is."""


class ConfigError(Exception):
    pass
