from pathlib import Path

from logly import _LoggerProxy, logger

from pkgcenter.config import load_settings


def init_logger(log_dir: Path | None = None, level: str | None = None) -> _LoggerProxy:
    """Initialize the logger.

    Configures console output and a rotating `app.log` file sink.

    Args:
        log_dir: Directory for `app.log`. Defaults to the configured log directory.
        level: Log level name. Defaults to the configured level.
    """
    settings = load_settings()
    log_dir = log_dir or settings.log_dir
    log_dir.mkdir(parents=True, exist_ok=True)

    logger.configure(
        level=level or settings.log_level,
        color=True,
        console=True,
        auto_sink=True,
    )

    logger.add(f"{log_dir}/app.log", size_limit="10MB", retention=3)

    logger.success("logger initialized!")

    return logger
