import subprocess
from typing import Callable, Final, Sequence

from logly import logger

Command = str | Sequence[str]
ChunkCallback = Callable[[bytes], None]

_CHUNK_SIZE: Final[int] = 4096


def _describe(command: Command) -> str:
    return command if isinstance(command, str) else " ".join(command)


def _decode(data: bytes) -> str:
    return data.decode("utf-8", errors="replace")


def _spawn(command: Command, **kwargs) -> subprocess.Popen | None:
    """Starts a child process, or returns None if it cannot be started.

    A string is run through the shell; a sequence is executed directly.
    """
    shell = isinstance(command, str)
    argv = command if shell else list(command)
    try:
        return subprocess.Popen(argv, shell=shell, **kwargs)
    except OSError:
        logger.warning(f"Failed to start process: {_describe(command)}")
        return None


def _stream(
    command: Command,
    on_chunk: ChunkCallback | None,
    keep_output: bool,
    merge_stderr: bool,
) -> tuple[bytes, int | None]:
    """Runs a command and drains its stdout chunk by chunk.

    With `merge_stderr` stderr goes into the same pipe, otherwise it is left
    attached to the parent's stderr.

    `on_chunk` is called once per chunk, in output order, before the next read.

    Returns:
        The collected output (empty unless `keep_output`) and the return code, or
        None as return code if the process could not be started.
    """
    proc = _spawn(
        command,
        stdout=subprocess.PIPE,
        stderr=subprocess.STDOUT if merge_stderr else None,
    )
    if proc is None:
        return b"", None

    logger.debug(f"Started process pid={proc.pid} cmd={_describe(command)}")
    chunks: list[bytes] = []
    stdout = proc.stdout
    try:
        if stdout is not None:
            for chunk in iter(lambda: stdout.readline(_CHUNK_SIZE), b""):
                if keep_output:
                    chunks.append(chunk)
                if on_chunk is not None:
                    on_chunk(chunk)
    except OSError:
        logger.warning(f"Lost output pipe of {_describe(command)}")
    finally:
        if stdout is not None:
            stdout.close()

    returncode = proc.wait()
    logger.debug(f"Process finished returncode={returncode} cmd={_describe(command)}")
    return b"".join(chunks), returncode


def run_capturing(command: Command, on_chunk: ChunkCallback | None = None) -> str:
    """Runs a command and returns its standard output.

    stderr is not captured, so diagnostics never end up in the parsed text.

    Args:
        command: Argument vector, or a shell command line.
        on_chunk: Called with each raw chunk as soon as it is read.

    Returns:
        The decoded output, or "" if the process could not be started.
    """
    output, _ = _stream(command, on_chunk, keep_output=True, merge_stderr=False)
    return _decode(output)


def run_for_status(command: Command, on_chunk: ChunkCallback | None = None) -> bool:
    """Runs a command and reports whether it exited with code 0.

    stdout and stderr are merged and only handed to `on_chunk`. Non-zero exit,
    death by signal and spawn failure all count as failure.
    """
    _, returncode = _stream(command, on_chunk, keep_output=False, merge_stderr=True)
    return returncode == 0


def run_sudo_primed(password: str, command: Command) -> bool:
    """Feeds a password to a command's stdin and reports success.

    Used with `sudo -S -v` to cache sudo credentials before running the AUR
    helper as the normal user.

    Args:
        password: Password to write, followed by a newline.
        command: Command that reads the password from stdin.

    Returns:
        True if the command exited with code 0. False without spawning anything if
        the password is empty.
    """
    if not password:
        return False

    proc = _spawn(
        command,
        stdin=subprocess.PIPE,
        stdout=subprocess.DEVNULL,
        stderr=subprocess.DEVNULL,
    )
    if proc is None:
        return False

    try:
        proc.communicate(input=f"{password}\n".encode("utf-8"))
    except OSError:
        logger.warning(f"Failed to write to stdin of {_describe(command)}")
        proc.wait()

    if proc.returncode != 0:
        logger.info(
            f"Process failed returncode={proc.returncode} cmd={_describe(command)}"
        )
    return proc.returncode == 0
