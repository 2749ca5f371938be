from __future__ import annotations

from collections import Counter
from typing import Dict

from prometheus_client import Counter as PromCounter

# Named counters (custom)
_NAMED = Counter()

_PROM_ASSEMBLIES = PromCounter(
    "modbuilder_assemblies_total",
    "Module assemblies attempted",
    ["outcome"],
)

_PROM_FILES_COPIED = PromCounter(
    "modbuilder_files_copied_total",
    "Files copied into module folders",
)

_PROM_DEPENDENCIES_COPIED = PromCounter(
    "modbuilder_dependencies_copied_total",
    "Dependency files copied into module lib folders",
    ["scope"],
)


def reset_metrics() -> None:
    """
    Test helper: clears in-process counters to avoid cross-test leakage.
    Prometheus counters are process-wide and are not reset.
    """
    _NAMED.clear()


def inc_named(name: str, value: int = 1) -> None:
    if not name:
        return
    _NAMED[name] += int(value)


def inc_assembly(outcome: str) -> None:
    inc_named(f"assemblies_{outcome}")
    _PROM_ASSEMBLIES.labels(outcome=outcome).inc()


def inc_files_copied(value: int = 1) -> None:
    inc_named("files_copied", value)
    _PROM_FILES_COPIED.inc(value)


def inc_dependency_copied(scope: str) -> None:
    inc_named("dependencies_copied")
    _PROM_DEPENDENCIES_COPIED.labels(scope=scope).inc()


def snapshot_named() -> Dict[str, int]:
    return dict(_NAMED)
