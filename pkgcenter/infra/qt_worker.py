from typing import Callable

from logly import logger
from PySide6.QtCore import QObject, Signal, Slot

from .process_runner import ChunkCallback

Job = Callable[[ChunkCallback], object]


class JobWorker(QObject):
    """Runs a package job in a background Qt thread.

    The worker is meant to be moved to a `QThread` and started via a signal/slot.
    The job receives a chunk callback; every chunk is re-emitted as `output` so the
    GUI can show progress while the child process runs.
    """

    output = Signal(bytes)
    finished = Signal(int, object)  # job_id, result

    def __init__(self, job: Job, job_id: int = 0):
        super().__init__()
        self._job = job
        self._job_id = job_id

    def _emit_chunk(self, chunk: bytes) -> None:
        self.output.emit(chunk)

    @Slot()
    def run(self):
        """Executes the job and emits `finished` with its result."""
        logger.info(f"Starting job id={self._job_id}")
        try:
            result = self._job(self._emit_chunk)
        except Exception:
            logger.exception("Job execution failed")
            result = None
        logger.info(f"Job finished id={self._job_id}")
        self.finished.emit(self._job_id, result)
