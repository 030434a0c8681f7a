"""Command-line interface for sabforge using argparse."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from sabforge import __version__
from sabforge.core.errors import SabError
from sabforge.core.settings import LoaderSettings
from sabforge.data.thermal_scattering import list_tables, load_thermal_scattering
from sabforge.data.tsl_names import get_tsl_entry
from sabforge.io.artifacts import read_artifact

logger = logging.getLogger("sabforge")


def _resolve_settings(args: argparse.Namespace) -> LoaderSettings:
    settings = LoaderSettings.from_env()
    if getattr(args, "settings", None):
        values = read_artifact(args.settings)
        file_settings = LoaderSettings.from_mapping(values)
        settings = settings.merged(
            **{key: getattr(file_settings, key) for key, value in values.items() if value is not None}
        )
    return settings.merged(
        temperature_tolerance=getattr(args, "tolerance", None),
        log_level=getattr(args, "log_level", None),
    )


def _library_path(args: argparse.Namespace, settings: LoaderSettings) -> Path:
    if args.library is not None:
        return args.library
    if settings.data_path is None:
        raise SabError("No library file given and SABFORGE_DATA is not set")
    return settings.data_path


def cmd_list(args: argparse.Namespace, settings: LoaderSettings) -> None:
    path = _library_path(args, settings)
    for name in list_tables(path):
        print(name)


def cmd_inspect(args: argparse.Namespace, settings: LoaderSettings) -> None:
    path = _library_path(args, settings)
    name = args.table
    if args.material:
        entry = get_tsl_entry(args.material)
        if entry is None:
            raise SabError(f"No thermal scattering table known for material '{args.material}'")
        name = entry.table_name

    table = load_thermal_scattering(path, args.temperature, name=name, settings=settings)
    summary = table.summary()
    if args.json:
        print(json.dumps(summary, indent=2))
        return

    print(f"{summary['name']}  AWR={summary['atomic_weight_ratio']:.4f}  "
          f"mode={summary['secondary_mode']}")
    print(f"  nuclides: {', '.join(summary['nuclides'])}")
    for entry in summary["temperatures"]:
        elastic = entry.get("elastic_mode", "none")
        print(
            f"  {entry['temperature_K']:8.2f} K  elastic={elastic:<8s} "
            f"E_el<={entry['threshold_elastic_eV']:.4g} eV  "
            f"E_inel<={entry['threshold_inelastic_eV']:.4g} eV"
        )


def cmd_material(args: argparse.Namespace, settings: LoaderSettings) -> None:
    entry = get_tsl_entry(args.material)
    if entry is None:
        raise SabError(f"No thermal scattering table known for material '{args.material}'")
    print(f"{entry.table_name}: {entry.description} ({', '.join(entry.nuclides)})")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="S(alpha,beta) thermal scattering table loader")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--settings", type=Path, help="JSON or YAML settings file")
    parser.add_argument("--log-level", choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    subparsers = parser.add_subparsers(dest="command", required=True)

    list_cmd = subparsers.add_parser("list", help="List the tables in an HDF5 library")
    list_cmd.add_argument("library", type=Path, nargs="?")
    list_cmd.set_defaults(func=cmd_list)

    inspect = subparsers.add_parser("inspect", help="Load a table and summarize it")
    inspect.add_argument("library", type=Path, nargs="?")
    which = inspect.add_mutually_exclusive_group()
    which.add_argument("--table", help="Table name, e.g. c_H_in_H2O")
    which.add_argument("--material", help="Material name, e.g. water")
    inspect.add_argument("-T", "--temperature", type=float, action="append", required=True,
                         help="Requested temperature in K (repeatable)")
    inspect.add_argument("--tolerance", type=float, help="Temperature tolerance in K")
    inspect.add_argument("--json", action="store_true", help="Print the summary as JSON")
    inspect.set_defaults(func=cmd_inspect)

    material = subparsers.add_parser("material", help="Show the table used for a material")
    material.add_argument("material")
    material.set_defaults(func=cmd_material)
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        settings = _resolve_settings(args)
    except (OSError, ValueError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2

    logging.basicConfig(
        level=getattr(logging, settings.log_level),
        format="%(levelname)s %(name)s: %(message)s",
    )
    try:
        args.func(args, settings)
    except (SabError, OSError) as exc:
        logger.debug("Command failed", exc_info=True)
        print(f"error: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
