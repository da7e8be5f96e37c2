# -*- coding: utf-8 -*-
"""
Artifact Hub CLI - Manage catalogs and installed artifacts.

Usage::

    python -m arthub add https://example.com/catalog.json --id team
    python -m arthub search "code review" --type prompt
    python -m arthub install team review-helper
    python -m arthub updates
    python -m arthub uninstall team review-helper --yes

License
-------
MIT License
Copyright (c) 2024 geoint.org
See LICENSE file for full text.

Created
-------
2026-02-06

Modified
--------
2026-02-06
"""

# Standard library
import argparse
import logging
import sys
import threading
from pathlib import Path
from typing import List, Optional

# Third-party
import requests

# Artifact Hub internal
from arthub import __version__
from arthub.catalog.database import CatalogDatabase
from arthub.catalog.exceptions import ArthubError, ArtifactNotFoundError, CatalogNotFoundError
from arthub.catalog.http import AuthResolver, HttpClient
from arthub.catalog.installer import ArtifactInstaller
from arthub.catalog.models import (
    ARTIFACT_TYPES,
    SORT_ORDERS,
    AuthConfig,
    CatalogRepoConfig,
    ConflictResolution,
    InstallResult,
    SearchQuery,
)
from arthub.catalog.paths import resolve_catalog_path
from arthub.catalog.scheduler import RefreshScheduler
from arthub.catalog.service import CatalogService
from arthub.catalog.updater import UpdateChecker
from arthub.catalog.urls import generate_id_from_url
from arthub.core.config import ArthubConfig, default_config_path, load_config

logger = logging.getLogger(__name__)


class _Session:
    """Objects shared by one CLI invocation."""

    def __init__(self, args: argparse.Namespace) -> None:
        self.config_path: Path = args.config or default_config_path()
        self.config: ArthubConfig = load_config(self.config_path)
        db_path = args.catalog_db or resolve_catalog_path(self.config_path)
        db_path.parent.mkdir(parents=True, exist_ok=True)
        self.database = CatalogDatabase(db_path)
        self.http = HttpClient(timeout=self.config.request_timeout)
        self.auth = AuthResolver()
        self.service = CatalogService(self.database, self.http, self.auth)
        workspace = args.workspace or self.config.workspace()
        self.installer = ArtifactInstaller(
            self.database, workspace, http=self.http,
            credentials=self.auth.lookup(self.config.repositories),
        )

    def repository(self, catalog_id: str) -> CatalogRepoConfig:
        repo = self.config.get_repository(catalog_id)
        if repo is not None:
            return repo
        record = self.database.get_catalog(catalog_id)
        if record is None:
            raise CatalogNotFoundError(catalog_id)
        return CatalogRepoConfig(id=record.id, url=record.url, enabled=record.enabled)

    def close(self) -> None:
        self.database.close()
        self.http.close()


def _print_install(result: InstallResult) -> None:
    for dependency in result.dependencies:
        _print_install(dependency)
    for warning in result.warnings:
        print(f"warning: {warning}", file=sys.stderr)
    if result.success:
        print(f"Installed {result.artifact.id} {result.artifact.version} -> {result.path}")


def cmd_add(args: argparse.Namespace, session: _Session) -> int:
    catalog_id = args.id or generate_id_from_url(args.url)
    auth = AuthConfig(type='env', env_var=args.auth_env) if args.auth_env else None
    config = CatalogRepoConfig(
        id=catalog_id, url=args.url, enabled=not args.disabled, auth=auth,
    )
    record = session.service.add_catalog(config)
    session.config.repositories = [
        r for r in session.config.repositories if r.id != catalog_id
    ] + [config]
    session.config.save(session.config_path)
    print(f"Added catalog {record.id} ({record.artifact_count} artifacts)")
    return 0


def cmd_remove(args: argparse.Namespace, session: _Session) -> int:
    if not session.service.remove_catalog(args.catalog_id, confirmed=args.yes):
        print(
            f"Catalog {args.catalog_id} has installed artifacts; "
            f"re-run with --yes to delete them",
            file=sys.stderr,
        )
        return 1
    session.config.repositories = [
        r for r in session.config.repositories if r.id != args.catalog_id
    ]
    session.config.save(session.config_path)
    print(f"Removed catalog {args.catalog_id}")
    return 0


def cmd_refresh(args: argparse.Namespace, session: _Session) -> int:
    if args.catalog_id:
        record = session.service.refresh_catalog(session.repository(args.catalog_id))
        print(f"Refreshed {record.id} ({record.artifact_count} artifacts)")
        return 0

    outcome = session.service.refresh_all(session.config.repositories)
    for catalog_id, error in outcome.items():
        print(f"{catalog_id}: {error or 'ok'}")
    return 1 if any(outcome.values()) else 0


def cmd_list(args: argparse.Namespace, session: _Session) -> int:
    for record in session.service.list_catalogs():
        state = record.status if record.enabled else 'disabled'
        line = f"{record.id}\t{state}\t{record.artifact_count}\t{record.url}"
        if record.error:
            line += f"\t{record.error}"
        print(line)
    return 0


def cmd_search(args: argparse.Namespace, session: _Session) -> int:
    result = session.database.search(SearchQuery(
        query=args.query,
        types=args.type or [],
        tags=args.tag or [],
        catalog=args.catalog or [],
        sort_by=args.sort,
        page=args.page,
        page_size=args.page_size,
    ))
    for artifact in result.artifacts:
        print(
            f"{artifact.catalog_id}/{artifact.id}\t{artifact.artifact_type}\t"
            f"{artifact.version}\t{artifact.name}"
        )
    more = " (more available)" if result.has_more else ""
    print(f"{result.total} result(s), page {result.page}{more}")
    return 0


def cmd_install(args: argparse.Namespace, session: _Session) -> int:
    artifact = session.database.get_artifact(args.catalog_id, args.artifact_id)
    if artifact is None:
        raise ArtifactNotFoundError(args.catalog_id, args.artifact_id)

    handler = None
    if args.on_conflict:
        resolution = ConflictResolution(args.on_conflict, args.rename_to)
        handler = lambda artifact, path: resolution

    result = session.installer.install(
        artifact,
        install_root=args.install_root or session.config.install_root,
        resolve_conflict=handler,
    )
    _print_install(result)
    if not result.success:
        print(f"Error: {result.error}", file=sys.stderr)
        return 1
    return 0


def cmd_uninstall(args: argparse.Namespace, session: _Session) -> int:
    if not session.installer.uninstall(
        args.catalog_id, args.artifact_id, confirmed=args.yes
    ):
        print("Not uninstalled: re-run with --yes to confirm", file=sys.stderr)
        return 1
    print(f"Uninstalled {args.catalog_id}/{args.artifact_id}")
    return 0


def cmd_update(args: argparse.Namespace, session: _Session) -> int:
    result = session.installer.update(args.catalog_id, args.artifact_id)
    _print_install(result)
    if not result.success:
        print(f"Error: {result.error}", file=sys.stderr)
        return 1
    return 0


def cmd_updates(args: argparse.Namespace, session: _Session) -> int:
    checker = UpdateChecker(session.database)
    for result in checker.available(session.config.repositories):
        note = " (older than installed)" if result.is_downgrade else ""
        print(
            f"{result.installation.catalog_id}/{result.installation.artifact_id}\t"
            f"{result.current_version} -> {result.latest_version}{note}"
        )
    return 0


def cmd_installed(args: argparse.Namespace, session: _Session) -> int:
    for installation in session.installer.list_installations():
        print(
            f"{installation.catalog_id}/{installation.artifact_id}\t"
            f"{installation.version}\t{installation.installed_path}"
        )
    return 0


def cmd_watch(args: argparse.Namespace, session: _Session) -> int:
    if not session.config.auto_update:
        print("Automatic updates are disabled (auto_update)", file=sys.stderr)
        return 1

    scheduler = RefreshScheduler(
        session.service, lambda: session.config.repositories,
        interval=args.interval or session.config.update_interval,
    )
    try:
        outcome = scheduler.submit_refresh().result()
        for catalog_id, error in outcome.items():
            print(f"{catalog_id}: {error or 'ok'}")
        if args.once:
            return 1 if any(outcome.values()) else 0
        scheduler.start()
        threading.Event().wait()
    except KeyboardInterrupt:
        pass
    finally:
        scheduler.stop()
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="arthub",
        description="Artifact Hub: index catalogs and install artifacts.",
    )
    parser.add_argument("--version", action="version", version=__version__)
    parser.add_argument(
        "--config", type=Path, default=None,
        help="Config file (default ~/.arthub/config.json).",
    )
    parser.add_argument(
        "--catalog-db", type=Path, default=None,
        help="Catalog database file.",
    )
    parser.add_argument(
        "--workspace", type=Path, default=None,
        help="Workspace root to install into (default: current directory).",
    )
    parser.add_argument(
        "--verbose", "-v", action="store_true", help="Debug logging.",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("add", help="Register a catalog and index it.")
    p.add_argument("url")
    p.add_argument("--id", default=None, help="Catalog id (derived from URL).")
    p.add_argument("--disabled", action="store_true")
    p.add_argument(
        "--auth-env", default=None, metavar="VAR",
        help="Environment variable holding a bearer token.",
    )
    p.set_defaults(func=cmd_add)

    p = sub.add_parser("remove", help="Remove a catalog.")
    p.add_argument("catalog_id")
    p.add_argument("--yes", action="store_true", help="Also delete installed files.")
    p.set_defaults(func=cmd_remove)

    p = sub.add_parser("refresh", help="Re-fetch one or all catalogs.")
    p.add_argument("catalog_id", nargs="?")
    p.set_defaults(func=cmd_refresh)

    p = sub.add_parser("list", help="List registered catalogs.")
    p.set_defaults(func=cmd_list)

    p = sub.add_parser("search", help="Search artifacts.")
    p.add_argument("query", nargs="?")
    p.add_argument("--type", action="append", choices=ARTIFACT_TYPES)
    p.add_argument("--tag", action="append")
    p.add_argument("--catalog", action="append")
    p.add_argument("--sort", choices=SORT_ORDERS, default="relevance")
    p.add_argument("--page", type=int, default=1)
    p.add_argument("--page-size", type=int, default=20)
    p.set_defaults(func=cmd_search)

    p = sub.add_parser("install", help="Install an artifact.")
    p.add_argument("catalog_id")
    p.add_argument("artifact_id")
    p.add_argument("--install-root", default=None)
    p.add_argument(
        "--on-conflict", choices=("replace", "keep", "rename"), default=None,
        help="What to do if the target file exists (default: fail).",
    )
    p.add_argument("--rename-to", default=None)
    p.set_defaults(func=cmd_install)

    p = sub.add_parser("uninstall", help="Uninstall an artifact.")
    p.add_argument("catalog_id")
    p.add_argument("artifact_id")
    p.add_argument("--yes", action="store_true", help="Confirm deletion.")
    p.set_defaults(func=cmd_uninstall)

    p = sub.add_parser("update", help="Update an installed artifact.")
    p.add_argument("catalog_id")
    p.add_argument("artifact_id")
    p.set_defaults(func=cmd_update)

    p = sub.add_parser("updates", help="List available updates.")
    p.set_defaults(func=cmd_updates)

    p = sub.add_parser("watch", help="Refresh catalogs periodically.")
    p.add_argument("--interval", type=float, default=None,
                   help="Seconds between refreshes (default from config).")
    p.add_argument("--once", action="store_true", help="Run one sweep and exit.")
    p.set_defaults(func=cmd_watch)

    p = sub.add_parser("installed", help="List installed artifacts.")
    p.set_defaults(func=cmd_installed)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        session = _Session(args)
    except ArthubError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    try:
        return args.func(args, session)
    except (ArthubError, ValueError, requests.RequestException) as e:
        logger.debug("Command %s failed", args.command, exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        return 1
    finally:
        session.close()


if __name__ == "__main__":
    sys.exit(main())
