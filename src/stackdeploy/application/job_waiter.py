"""Blocking wait on control-plane async jobs."""
import logging
import threading
import time

from stackdeploy.domain.base.ports import ControlPlanePort
from stackdeploy.domain.core.exceptions import JobTimeoutError
from stackdeploy.domain.provisioning.jobs import AsyncJobHandle, JobStatus

logger = logging.getLogger(__name__)


class AsyncJobWaiter:
    """
    Polls an async job until it leaves the pending state.

    The wait sleeps on an event rather than ``time.sleep`` so ``cancel`` can
    interrupt it. A cancelled or expired wait is reported as a timeout, never
    as still pending.
    """

    def __init__(self, client: ControlPlanePort, poll_interval: float = 2.0,
                 clock=time.monotonic):
        if poll_interval <= 0:
            raise ValueError("Poll interval must be positive")
        self._client = client
        self._poll_interval = poll_interval
        self._clock = clock
        self._cancelled = threading.Event()

    def cancel(self) -> None:
        """Interrupt any wait in progress."""
        self._cancelled.set()

    def wait(self, job: AsyncJobHandle, timeout: float) -> JobStatus:
        """
        Block until the job is terminal.

        Args:
            job: Handle returned by a create or destroy call
            timeout: Maximum number of seconds to wait

        Returns:
            The terminal job status

        Raises:
            JobTimeoutError: If the job is still pending after the timeout
        """
        deadline = self._clock() + timeout
        logger.debug(f"Waiting up to {timeout:g}s for async job {job}")

        while True:
            status = self._client.query_async_job(job)
            if status.is_terminal:
                logger.info(f"Async job {job} finished with status {status.name}")
                return status

            remaining = deadline - self._clock()
            if remaining <= 0 or self._cancelled.is_set():
                logger.warning(f"Async job {job} still pending, giving up")
                raise JobTimeoutError(str(job), timeout)

            if self._cancelled.wait(min(self._poll_interval, remaining)):
                logger.warning(f"Wait for async job {job} was cancelled")
                raise JobTimeoutError(str(job), timeout)
