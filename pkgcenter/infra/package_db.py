from .commands import build_installed_check_argv
from .process_runner import run_for_status


def is_package_installed(name: str) -> bool:
    """Asks pacman's local database whether a package is installed."""
    if not name:
        return False
    return run_for_status(build_installed_check_argv(name))
