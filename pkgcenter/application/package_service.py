from dataclasses import dataclass
from typing import Callable

from logly import logger

from pkgcenter.core.ansi import scrub
from pkgcenter.core.installed_status import resolve_installed
from pkgcenter.core.package_types import PackageRecord
from pkgcenter.core.yay_search_parser import parse_yay_search
from pkgcenter.infra.commands import (
    build_clean_orphans_argv,
    build_install_argv,
    build_remove_argv,
    build_search_argv,
    build_sudo_validate_argv,
)
from pkgcenter.infra.package_db import is_package_installed
from pkgcenter.infra.process_runner import (
    ChunkCallback,
    run_capturing,
    run_for_status,
    run_sudo_primed,
)


@dataclass(slots=True)
class Session:
    """Per-window state shared by privileged operations.

    Attributes:
        sudo_password: Password collected once at startup, kept in memory only.
    """

    sudo_password: str = ""

    def has_credentials(self) -> bool:
        return bool(self.sudo_password)


def search_packages(
    query: str,
    on_chunk: ChunkCallback | None = None,
    is_installed: Callable[[str], bool] = is_package_installed,
) -> list[PackageRecord]:
    """Runs `yay -Ss` and returns records with authoritative installed flags.

    A blank query returns an empty list without running anything. A failed
    search is indistinguishable from a search without matches.
    """
    q = query.strip()
    if not q:
        return []

    raw = run_capturing(build_search_argv(q), on_chunk)
    records = parse_yay_search(scrub(raw))
    records = resolve_installed(records, is_installed)
    logger.info(
        f"Search {q!r}: {len(records)} results, "
        f"{sum(r.installed for r in records)} installed"
    )
    return records


def _run_privileged(
    session: Session, argv: list[str], on_chunk: ChunkCallback | None
) -> bool:
    """Pre-authenticates sudo, then runs `argv` as the current user."""
    if not run_sudo_primed(session.sudo_password, build_sudo_validate_argv()):
        logger.warning("sudo pre-authentication failed")
        return False

    ok = run_for_status(argv, on_chunk)
    logger.info(f"{' '.join(argv)} -> {'ok' if ok else 'failed'}")
    return ok


def install_package(
    session: Session, name: str, on_chunk: ChunkCallback | None = None
) -> bool:
    """Installs a package without interactive prompts."""
    return _run_privileged(session, build_install_argv(name), on_chunk)


def remove_package(
    session: Session, name: str, on_chunk: ChunkCallback | None = None
) -> bool:
    """Removes a package together with dependencies nothing else needs."""
    return _run_privileged(session, build_remove_argv(name), on_chunk)


def clean_orphans(session: Session, on_chunk: ChunkCallback | None = None) -> bool:
    """Removes orphaned dependencies (`yay -Yc`)."""
    return _run_privileged(session, build_clean_orphans_argv(), on_chunk)
