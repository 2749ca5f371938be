from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from modbuilder.core.assembly import assemble_module, build_descriptor
from modbuilder.core.config import apply_properties, load_request
from modbuilder.core.config.settings import log_level
from modbuilder.core.errors import AssemblyError, ConfigError

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def _build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="modbuilder", description="Assemble a deployable module folder")
    ap.add_argument(
        "--log-level",
        default=None,
        type=str.upper,
        choices=LOG_LEVELS,
        help="Logging level (default MODBUILDER_LOG_LEVEL or INFO)",
    )
    sub = ap.add_subparsers(dest="command", required=True)

    def _common(p: argparse.ArgumentParser) -> None:
        p.add_argument(
            "-c",
            "--config",
            default=None,
            help="YAML/JSON assembly config (default MODBUILDER_CONFIG_FILE or ./modbuilder.yaml)",
        )
        p.add_argument(
            "-D",
            "--define",
            action="append",
            default=[],
            metavar="KEY=VALUE",
            help="Override a module option, e.g. -D verticleMain=app.js -D worker=true",
        )

    p_asm = sub.add_parser("assemble", help="Assemble the module folder")
    _common(p_asm)
    p_asm.add_argument("--archive", action="store_true", help="Also write <module>.zip next to the folder")
    p_asm.add_argument("--json", action="store_true", help="Print the assembly result as JSON")

    p_desc = sub.add_parser("descriptor", help="Print the mod.json that would be written")
    _common(p_desc)

    return ap


def main(argv: Optional[List[str]] = None) -> int:
    args = _build_parser().parse_args(argv)

    level = args.log_level or log_level()
    if level not in LOG_LEVELS:
        print(f"ERROR: invalid log level: {level!r} (expected one of {', '.join(LOG_LEVELS)})", file=sys.stderr)
        return 1
    logging.basicConfig(level=level, format="[%(levelname)s] %(message)s")

    try:
        request = load_request(Path(args.config) if args.config else None)
        request = apply_properties(request, args.define)

        if args.command == "descriptor":
            print(json.dumps(build_descriptor(request.options), indent=2, sort_keys=True))
            return 0

        if args.archive:
            request.options.archive = True
        result = assemble_module(request)
    except (AssemblyError, ConfigError) as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 1

    if args.json:
        print(json.dumps(result.to_dict(), indent=2))
    else:
        print(f"Assembled: {result.module_dir}")
        if result.archive_path:
            print(f"Archive: {result.archive_path}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
