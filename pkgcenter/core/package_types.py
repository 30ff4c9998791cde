from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class PackageRecord:
    """Represents one package block from `yay -Ss` output.

    Attributes:
        repository: Source repository (e.g. "extra" or "aur").
        name: Package name.
        version: Version string, stored verbatim.
        description: One-line summary.
        installed: Installed flag. Provisional after parsing, authoritative after
            `resolve_installed`.
    """

    repository: str
    name: str
    version: str
    description: str = ""
    installed: bool = False
