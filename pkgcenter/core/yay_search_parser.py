from dataclasses import replace

from logly import logger

from .package_types import PackageRecord

_INSTALLED_MARKERS = ("[installed]", "(installed)")
_INDENT = " \t"


def _parse_header(line: str) -> PackageRecord | None:
    """Decodes a `repo/name version [extra...]` header line.

    Args:
        line: A non-blank, non-indented line.

    Returns:
        A record without description, or None if the line is not a header.
    """
    parts = line.split(None, 2)
    if len(parts) < 2:
        return None

    repo_name, version = parts[0], parts[1]
    repository, sep, name = repo_name.partition("/")
    if not sep or not repository or not name:
        return None

    rest = parts[2] if len(parts) == 3 else ""
    installed = any(marker in rest for marker in _INSTALLED_MARKERS)
    return PackageRecord(
        repository=repository,
        name=name,
        version=version,
        installed=installed,
    )


def parse_yay_search(text: str) -> list[PackageRecord]:
    """Parses `yay -Ss` output into package records.

    The input must already be scrubbed of escape sequences. Each package is a
    header line followed by an indented description line. A header that never
    receives its description (blank line, another header or end of input) is
    dropped.

    Args:
        text: Scrubbed `yay -Ss` stdout.

    Returns:
        Records in the order they appear in the output.
    """
    records: list[PackageRecord] = []
    pending: PackageRecord | None = None

    for line in text.split("\n"):
        line = line.removesuffix("\r")
        if not line:
            pending = None
            continue

        if line[0] in _INDENT:
            if pending is None:
                continue
            description = line.lstrip(_INDENT) or line
            records.append(replace(pending, description=description))
            pending = None
            continue

        header = _parse_header(line)
        if header is None:
            logger.debug(f"Skipping unrecognized search line: {line!r}")
            continue
        pending = header

    return records
