"""Sandbox seeder command line interface.

Usage:
    # Seed every entity type in dependency order
    sandbox-seed all

    # Wipe and reseed products with 25 records
    sandbox-seed products --clear --count=25

    # Everything except config, reproducibly
    sandbox-seed all --skip-config --seed 42
"""

from __future__ import annotations

import argparse
import asyncio
import sys

from app.core.config import Settings, get_settings
from app.core.exceptions import SandboxError
from app.core.gateway import build_gateway
from app.core.logging import configure_logging
from app.shared.gateway import DocumentGateway
from app.shared.seeder import (
    AggregateSummary,
    SeederRegistry,
    SeedOptions,
    SeedOrchestrator,
    TemplateStore,
    default_registry,
)
from app.shared.seeder.core import ALL


def create_parser(registry: SeederRegistry) -> argparse.ArgumentParser:
    """Create argument parser for CLI.

    One ``--skip-<entity>`` flag is added per registered entity type.
    """
    parser = argparse.ArgumentParser(
        prog="sandbox-seed",
        description="Seed the local document store emulator with sandbox data",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Seed everything
  sandbox-seed all

  # Reset products only
  sandbox-seed products --clear --count=25

  # Skip orders, reproducible output
  sandbox-seed all --skip-orders --seed 7

  # Show document counts
  sandbox-seed --status
        """,
    )

    parser.add_argument(
        "target",
        nargs="?",
        default=ALL,
        help=f"Entity type to seed or 'all' (choices: {', '.join([ALL, *registry.names()])})",
    )

    # Seeding options
    parser.add_argument(
        "--clear",
        action="store_true",
        help="Delete existing documents before seeding",
    )
    parser.add_argument(
        "--count",
        type=int,
        help="Records per entity type (default: each module's default)",
    )
    for name in registry.names():
        parser.add_argument(
            f"--skip-{name}",
            dest=f"skip_{name}",
            action="store_true",
            help=f"Leave {name} out of an 'all' run",
        )
    parser.add_argument(
        "--seed",
        type=int,
        help="Random seed for reproducible output",
    )
    parser.add_argument(
        "--parallel",
        action="store_true",
        help="Run entity types without mutual dependencies concurrently",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        help="Limit in seconds for each document store call",
    )
    parser.add_argument(
        "--concurrency",
        type=int,
        help="Maximum in-flight writes per entity type",
    )
    parser.add_argument(
        "--backend",
        choices=["firestore", "memory"],
        help="Document store backend (default: GATEWAY_BACKEND)",
    )

    # Other operations (mutually exclusive)
    mode_group = parser.add_mutually_exclusive_group()
    mode_group.add_argument(
        "--reset",
        action="store_true",
        help="Clear and reseed every entity type",
    )
    mode_group.add_argument(
        "--status",
        action="store_true",
        help="Show current document counts",
    )
    mode_group.add_argument(
        "--list",
        action="store_true",
        help="List registered entity types",
    )

    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable detailed logging",
    )

    return parser


def print_banner(settings: Settings) -> None:
    """Print the seeder banner."""
    print()
    print("=" * 60)
    print(f"  {settings.app_name}")
    print("  Sandbox Document Store Seeder")
    print("=" * 60)
    print()


def print_options(target: str, options: SeedOptions, backend: str) -> None:
    """Print the effective options of a run."""
    print("Configuration:")
    print(f"  Target:      {target}")
    print(f"  Backend:     {backend}")
    print(f"  Clear:       {'yes' if options.clear else 'no'}")
    print(f"  Count:       {options.count if options.count is not None else 'default'}")
    print(f"  Seed:        {options.seed if options.seed is not None else 'random'}")
    print(f"  Parallel:    {'yes' if options.parallel else 'no'}")
    if options.skip_modules:
        print(f"  Skipping:    {', '.join(sorted(options.skip_modules))}")
    print()


def print_summary(summary: AggregateSummary) -> None:
    """Print one line per entity type followed by run totals."""
    for result in summary.results:
        if result.success:
            print(
                f"  ✓ {result.module:<12} created {result.created:>6,}  "
                f"deleted {result.deleted:>6,}  ({result.duration_ms}ms)"
            )
        else:
            print(
                f"  ✗ {result.module:<12} created {result.created:>6,}  "
                f"deleted {result.deleted:>6,}  ERROR: {result.error}"
            )

    print("\nSummary:")
    print("-" * 40)
    print(f"  Modules:          {len(summary.results):>8,}")
    print(f"  Succeeded:        {summary.success_count:>8,}")
    print(f"  Failed:           {summary.failure_count:>8,}")
    print(f"  Created:          {summary.total_created:>8,}")
    print(f"  Deleted:          {summary.total_deleted:>8,}")
    print(f"  Duration (ms):    {summary.total_duration_ms:>8,}")
    print("-" * 40)
    print()


def print_counts(counts: dict[str, int], title: str = "Current Document Counts") -> None:
    """Print collection counts in a formatted way."""
    print(f"\n{title}:")
    print("-" * 40)
    for collection, count in counts.items():
        print(f"  {collection:<30} {count:>8,}")
    print("-" * 40)
    print(f"  {'Total':<30} {sum(counts.values()):>8,}")
    print()


def print_modules(registry: SeederRegistry) -> None:
    """Print registered entity types with their dependencies."""
    print("Registered entity types:")
    print("-" * 40)
    for seeder in registry.seeders():
        deps = ", ".join(registry.dependencies_of(seeder.name)) or "-"
        print(f"  {seeder.name:<12} default {seeder.default_count:>4}  depends on: {deps}")
    print()


def build_options(
    args: argparse.Namespace,
    registry: SeederRegistry,
    settings: Settings,
) -> SeedOptions:
    """Translate parsed arguments into seeding options.

    Raises:
        InvalidConstraint: If a numeric option is out of range.
    """
    return SeedOptions(
        clear=args.clear,
        count=args.count,
        skip_modules=frozenset(
            name for name in registry.names() if getattr(args, f"skip_{name}", False)
        ),
        seed=args.seed if args.seed is not None else settings.seeder_random_seed,
        timeout_seconds=(
            args.timeout if args.timeout is not None else settings.seeder_persist_timeout_seconds
        ),
        max_concurrency=(
            args.concurrency if args.concurrency is not None else settings.seeder_max_concurrency
        ),
        parallel=args.parallel,
    )


async def execute(
    args: argparse.Namespace,
    gateway: DocumentGateway,
    registry: SeederRegistry,
    settings: Settings,
) -> int:
    """Run the operation selected by ``args`` against ``gateway``."""
    orchestrator = SeedOrchestrator(
        gateway,
        registry=registry,
        templates=TemplateStore(settings.seeder_templates_dir),
    )

    if args.status:
        print_counts(await orchestrator.collection_counts())
        return 0

    # Safety check for production
    if settings.is_production and not settings.seeder_allow_production:
        print("ERROR: Cannot run seeder in production environment.")
        print("Set SEEDER_ALLOW_PRODUCTION=true to override (not recommended).")
        return 1

    options = build_options(args, registry, settings)

    if args.reset:
        print("Resetting every entity type...")
        print()
        summary = await orchestrator.reset(options)
    else:
        print_options(args.target, options, settings.gateway_backend)
        summary = await orchestrator.run(args.target, options)

    print_summary(summary)
    return 0 if summary.succeeded else 1


async def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    registry = default_registry(default_count=get_settings().seeder_default_count)
    parser = create_parser(registry)

    try:
        args = parser.parse_args(argv)
    except SystemExit as e:
        # --help exits 0; argument errors exit 1 rather than argparse's 2
        return 0 if e.code in (0, None) else 1

    settings = get_settings()
    if args.backend:
        settings = settings.model_copy(update={"gateway_backend": args.backend})

    configure_logging("DEBUG" if args.verbose else "WARNING")
    print_banner(settings)

    if args.list:
        print_modules(registry)
        return 0

    if args.target != ALL and args.target not in registry:
        print(f"ERROR: Unknown target '{args.target}'.")
        print(f"Valid targets: {', '.join([ALL, *registry.names()])}")
        return 1

    gateway = build_gateway(settings)
    try:
        return await execute(args, gateway, registry, settings)
    except SandboxError as e:
        print(f"ERROR: {e.message}")
        return 1
    finally:
        await gateway.aclose()


def run() -> None:
    """Console script entry point."""
    sys.exit(asyncio.run(main()))


if __name__ == "__main__":
    run()
