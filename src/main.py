# src/main.py — v1
"""CLI entry point — provision and show commands.

Usage:
    sitestack provision <site> [--domain D] [--region R] [--repo owner/repo]
    sitestack show <site>
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path

from pydantic import ValidationError

from sitestack.config.settings import ConfigurationError, Settings, load_settings
from sitestack.core.models import ProvisioningReport, ProvisioningRequest, StepStatus
from sitestack.logging.logger import setup_logging
from sitestack.storage.base_site_store import SiteStoreError
from sitestack.storage.json_site_store import JsonSiteStore
from sitestack.version import __version__

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_USAGE = 2
EXIT_INTERRUPTED = 130


class UsageError(Exception):
    """Invalid command-line input."""


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    if not hasattr(args, "func"):
        parser.print_help()
        return EXIT_USAGE

    try:
        settings = _load_settings(args)
    except (ConfigurationError, ValidationError) as exc:
        print(f"Invalid configuration: {exc}", file=sys.stderr)
        return EXIT_USAGE

    setup_logging(
        level="DEBUG" if args.verbose else settings.log_level,
        log_format=settings.log_format,
        log_file=settings.log_file,
        rotation=settings.log_rotation,
        retention=settings.log_retention,
    )

    try:
        return asyncio.run(args.func(args, settings))
    except KeyboardInterrupt:
        logger.warning("Interrupted by user")
        return EXIT_INTERRUPTED
    except (UsageError, ValidationError) as exc:
        logger.error("Invalid input: %s", exc)
        return EXIT_USAGE
    except SiteStoreError as exc:
        logger.error("%s", exc)
        return EXIT_FAILED
    except Exception as exc:
        logger.error("Fatal error: %s", exc, exc_info=args.verbose)
        return EXIT_FAILED


def cli() -> None:
    """Console script wrapper."""
    sys.exit(main())


def _build_parser() -> argparse.ArgumentParser:
    """Build CLI argument parser."""
    parser = argparse.ArgumentParser(
        prog="sitestack",
        description=f"sitestack v{__version__} — Static site infrastructure provisioner",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true",
        help="Enable debug logging",
    )
    parser.add_argument(
        "--log-format", choices=["text", "json"], default=None,
        help="Log output format (default: LOG_FORMAT or text)",
    )
    parser.add_argument(
        "--store", type=Path, default=None,
        help="Site store file (default: SITE_STORE_PATH)",
    )

    subparsers = parser.add_subparsers(dest="command")

    # --- provision ---
    p_provision = subparsers.add_parser(
        "provision", help="Create the cloud resources for a static site",
    )
    p_provision.add_argument("site", help="Site name (lowercase, 3-40 chars)")
    p_provision.add_argument(
        "--domain", default=None,
        help="Custom domain (enables hosted zone, certificate and aliases)",
    )
    p_provision.add_argument(
        "--region", default=None,
        help="Bucket region (default: AWS_REGION)",
    )
    p_provision.add_argument(
        "--repo", dest="repository", default=None,
        help="GitHub repository owner/repo allowed to deploy",
    )
    p_provision.add_argument(
        "--cert-wait-minutes", type=int, default=None,
        help="Maximum wait for certificate issuance (default: 15)",
    )
    p_provision.set_defaults(func=_cmd_provision)

    # --- show ---
    p_show = subparsers.add_parser(
        "show", help="Show the stored resource record of a site",
    )
    p_show.add_argument("site", nargs="?", default=None,
                        help="Site name (lists all sites if omitted)")
    p_show.set_defaults(func=_cmd_show)

    return parser


def _load_settings(args: argparse.Namespace) -> Settings:
    """Settings from the environment with CLI flags applied on top."""
    overrides: dict[str, object] = {}
    if args.log_format:
        overrides["log_format"] = args.log_format
    if args.store:
        overrides["site_store_path"] = args.store
    if getattr(args, "cert_wait_minutes", None) is not None:
        overrides["certificate_max_wait_minutes"] = args.cert_wait_minutes
    return load_settings(**overrides)


async def _cmd_provision(args: argparse.Namespace, settings: Settings) -> int:
    """Provision all resources for one site."""
    from sitestack.clients.client_factory import create_clients
    from sitestack.pipeline.orchestrator import ProvisioningOrchestrator

    request = ProvisioningRequest(
        site_name=args.site,
        domain=args.domain,
        region=args.region or settings.aws_region,
        repository=args.repository,
    )
    clients = create_clients(settings, request.region)
    orchestrator = ProvisioningOrchestrator(
        clients, settings, store=JsonSiteStore(settings.site_store_path),
    )
    report = await orchestrator.run(request)
    _print_report(report)
    return report.exit_code


async def _cmd_show(args: argparse.Namespace, settings: Settings) -> int:
    """Print a stored record as JSON, or list the known sites."""
    store = JsonSiteStore(settings.site_store_path)
    if args.site is None:
        for name in await store.list_sites():
            print(name)
        return EXIT_OK

    record = await store.load(args.site)
    if record is None:
        raise UsageError(f"unknown site: {args.site}")
    print(json.dumps(record.model_dump(mode="json", exclude_none=True), indent=2))
    return EXIT_OK


def _print_report(report: ProvisioningReport) -> None:
    """Print a human-readable summary of a run."""
    marks = {
        StepStatus.SUCCEEDED: "ok",
        StepStatus.FAILED: "FAILED",
        StepStatus.SKIPPED: "skipped",
    }
    print(f"\nProvisioning {report.request.site_name}: {report.status.value}")
    for step in report.steps:
        detail = step.error or step.reason or ""
        line = f"  {step.name:32s} {marks[step.status]}"
        print(f"{line}  {detail}" if detail else line)

    record = report.record
    print()
    if record.distribution_domain:
        print(f"  Site URL:     https://{record.distribution_domain}")
    if record.name_servers:
        print(f"  Name servers: {', '.join(record.name_servers)}")
    if record.role_arn:
        print(f"  Deploy role:  {record.role_arn}")
    if record.bucket_name:
        print(f"  Bucket:       {record.bucket_name}")


if __name__ == "__main__":
    sys.exit(main())
