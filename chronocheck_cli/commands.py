# SPDX-License-Identifier: AGPL-3.0-or-later
# Copyright (c) 2025 Chronocheck Contributors
"""
Chronocheck CLI Commands

- registry list: List technologies with tier and eras
- registry validate: Validate a profiles directory (all-or-nothing)
- assess: Assess one claim and print the Assessment as JSON
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import NoReturn

from chronocheck_core.config import ChronocheckConfig
from chronocheck_core.engine import ChronocheckEngine
from chronocheck_core.errors import InvalidInput, RegistryLoadError
from chronocheck_core.registry.loader import build_snapshot, load_profiles_from_dir


def _engine_from_args(args: argparse.Namespace) -> ChronocheckEngine:
    config = ChronocheckConfig(
        profiles_dir=args.profiles_dir,
        include_bundled_profiles=False if args.no_bundled else None,
    )
    return ChronocheckEngine(config)


def _read_evidence(args: argparse.Namespace) -> list[str]:
    evidence = list(args.evidence or [])
    for file_name in args.evidence_file or []:
        evidence.append(Path(file_name).read_text(encoding="utf-8"))
    return evidence


def cmd_registry_list(args: argparse.Namespace) -> int:
    """List technologies in the current registry."""
    try:
        engine = _engine_from_args(args)
    except RegistryLoadError as e:
        print(f"✗ {e}", file=sys.stderr)
        return 1

    snapshot = engine.store.current()
    if not len(snapshot):
        print("No technologies loaded", file=sys.stderr)
        return 1

    print(f"Registry v{snapshot.version}: {len(snapshot)} technologies")
    for name in snapshot.names():
        profile = snapshot.get(name)
        eras = ", ".join(era.label for era in profile.eras) or "-"
        print(f"  - {profile.name} [{profile.volatility_tier.value}] eras: {eras}")
    for w in snapshot.warnings:
        print(f"  ! {w.code} ({w.technology}): {w.message}")
    return 0


def cmd_registry_validate(args: argparse.Namespace) -> int:
    """Validate a directory of profile files."""
    profiles_dir = Path(args.profiles_dir_arg)
    try:
        records = load_profiles_from_dir(profiles_dir)
        snapshot = build_snapshot(records, source=str(profiles_dir))
    except RegistryLoadError as e:
        print(f"✗ Profiles in '{profiles_dir}' failed validation:", file=sys.stderr)
        for error in e.errors or [str(e)]:
            print(f"  - {error}", file=sys.stderr)
        return 1

    print(f"✓ {len(snapshot)} profile(s) in '{profiles_dir}' are valid")
    for name in snapshot.names():
        profile = snapshot.get(name)
        rules = sum(1 for _ in profile.iter_rules())
        facts = sum(1 for _ in profile.iter_facts())
        print(f"  {profile.name}: {len(profile.eras)} eras, {rules} signals, {facts} facts")
    if snapshot.warnings:
        print(f"  {len(snapshot.warnings)} warning(s):")
        for w in snapshot.warnings:
            print(f"  ! {w.code} ({w.technology}): {w.message}")
        if args.strict:
            return 2
    return 0


def cmd_assess(args: argparse.Namespace) -> int:
    """Assess one claim and print the result as JSON."""
    try:
        engine = _engine_from_args(args)
        evidence = _read_evidence(args)
    except RegistryLoadError as e:
        print(f"✗ {e}", file=sys.stderr)
        return 1
    except (OSError, UnicodeDecodeError) as e:
        print(f"✗ Failed to read evidence: {e}", file=sys.stderr)
        return 1

    try:
        assessment = engine.assess(args.technology, args.claim, evidence)
    except InvalidInput as e:
        print(f"✗ {e}", file=sys.stderr)
        return 1

    output = assessment.to_json(indent=2)
    if args.output:
        Path(args.output).write_text(output, encoding="utf-8")
        print(f"Assessment written to {args.output}")
    else:
        print(output)
    return 0


def _add_registry_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--profiles-dir",
        help="Extra profiles directory (overrides bundled profiles by name)",
    )
    parser.add_argument(
        "--no-bundled",
        action="store_true",
        help="Do not load the bundled profiles",
    )


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="chronocheck",
        description="Knowledge currency and conflict classification for technical claims",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")

    subparsers = parser.add_subparsers(dest="command", required=True)

    # registry commands
    registry_parser = subparsers.add_parser("registry", help="Registry management commands")
    registry_sub = registry_parser.add_subparsers(dest="registry_command", required=True)

    list_parser = registry_sub.add_parser("list", help="List technologies in the registry")
    _add_registry_options(list_parser)
    list_parser.set_defaults(func=cmd_registry_list)

    validate_parser = registry_sub.add_parser("validate", help="Validate a directory of profile files")
    validate_parser.add_argument("profiles_dir_arg", metavar="profiles_dir", help="Directory with *.yml profiles")
    validate_parser.add_argument(
        "--strict",
        action="store_true",
        help="Exit with status 2 when ambiguity warnings are reported",
    )
    validate_parser.set_defaults(func=cmd_registry_validate)

    # assess command
    assess_parser = subparsers.add_parser("assess", help="Assess a claim about a technology")
    assess_parser.add_argument("technology", help="Technology name or alias")
    assess_parser.add_argument("claim", help="Asserted fact, e.g. 'DataFrame.append'")
    assess_parser.add_argument(
        "--evidence", "-e",
        action="append",
        help="Evidence fragment (code, version string, error text); repeatable",
    )
    assess_parser.add_argument(
        "--evidence-file", "-f",
        action="append",
        help="Read an evidence fragment from a file; repeatable",
    )
    assess_parser.add_argument("--output", "-o", help="Write JSON to this path (default: stdout)")
    _add_registry_options(assess_parser)
    assess_parser.set_defaults(func=cmd_assess)

    return parser


def main(argv: list[str] | None = None) -> NoReturn:
    """Main entry point for the CLI."""
    parser = create_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        exit_code = args.func(args)
        sys.exit(exit_code)
    except KeyboardInterrupt:
        print("\nInterrupted", file=sys.stderr)
        sys.exit(130)
