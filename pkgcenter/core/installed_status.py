from dataclasses import replace
from typing import Callable, Iterable

from .package_types import PackageRecord


def resolve_installed(
    records: Iterable[PackageRecord], is_installed: Callable[[str], bool]
) -> list[PackageRecord]:
    """Replaces the parser's installed guess with an authoritative check.

    Args:
        records: Parsed records.
        is_installed: Check keyed by package name only.

    Returns:
        New records in the same order, each with `installed` set from the check.
    """
    return [
        replace(record, installed=bool(is_installed(record.name)))
        for record in records
    ]
