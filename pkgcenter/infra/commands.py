import shutil

from pkgcenter.config import load_settings

_NO_PROMPT_ANSWERS: tuple[str, ...] = (
    "--answerclean",
    "None",
    "--answerdiff",
    "None",
    "--answeredit",
    "None",
)


def find_aur_helper(name: str | None = None) -> str:
    """Finds the AUR helper executable.

    Args:
        name: Helper name or path. Defaults to the configured helper (`yay`).

    Returns:
        The resolved executable path, or the bare name if it is not on PATH.
    """
    helper = name or load_settings().aur_helper
    return shutil.which(helper) or helper


def build_search_argv(query: str, helper: str | None = None) -> list[str]:
    """Builds `yay -Ss <terms...>`.

    The query is split on whitespace into separate search terms. No shell is
    involved, so metacharacters in the query are passed through literally.

    Args:
        query: Free-text search terms.
        helper: AUR helper executable. If omitted, it will be auto-detected.
    """
    return [helper or find_aur_helper(), "-Ss", *query.split()]


def build_install_argv(name: str, helper: str | None = None) -> list[str]:
    """Builds a non-interactive `yay -S` for one package."""
    return [helper or find_aur_helper(), "-S", "--noconfirm", *_NO_PROMPT_ANSWERS, name]


def build_remove_argv(name: str, helper: str | None = None) -> list[str]:
    """Builds `yay -Rns`, which also removes now-unused dependencies."""
    return [helper or find_aur_helper(), "-Rns", "--noconfirm", name]


def build_clean_orphans_argv(helper: str | None = None) -> list[str]:
    return [helper or find_aur_helper(), "-Yc", "--noconfirm"]


def build_sudo_validate_argv() -> list[str]:
    """Builds `sudo -S -v`, which reads the password from stdin and refreshes the
    sudo timestamp so the helper's own `sudo pacman` calls do not prompt."""
    return ["sudo", "-S", "-v"]


def build_installed_check_argv(name: str) -> list[str]:
    return ["pacman", "-Qi", name]
