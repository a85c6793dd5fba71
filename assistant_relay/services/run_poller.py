"""Fixed-interval polling of a remote run until it settles."""

import asyncio
from enum import Enum
from typing import Awaitable, Callable

from .thread_client import Run, RunStatus, ThreadClient
from ..errors import RunFailedError, RunTimeoutError
from ..utils.logger import get_app_logger


DEFAULT_INTERVAL = 1.0
DEFAULT_MAX_ATTEMPTS = 30

TERMINAL_FAILURES = frozenset({
    RunStatus.FAILED.value,
    RunStatus.CANCELLED.value,
    RunStatus.EXPIRED.value,
})


class PollState(str, Enum):
    """States of the polling loop."""

    POLLING = "polling"
    COMPLETED = "completed"
    FAILED = "failed"
    TIMED_OUT = "timed_out"


class RunPoller:
    """
    Drive a run to a terminal state by polling its status.

    Polls every ``interval`` seconds, at most ``max_attempts`` times, with no
    backoff and no jitter. A timed-out run is left alone on the remote side.
    """

    def __init__(
        self,
        thread_client: ThreadClient,
        interval: float = DEFAULT_INTERVAL,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep
    ):
        """
        Initialize the poller.

        Args:
            thread_client: Client used to fetch run status
            interval: Seconds to wait before each status check
            max_attempts: Maximum number of status checks
            sleep: Awaitable sleep function (injected by tests)
        """
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        if interval < 0:
            raise ValueError("interval must not be negative")

        self.thread_client = thread_client
        self.interval = interval
        self.max_attempts = max_attempts
        self._sleep = sleep
        self.logger = get_app_logger()

    def next_state(self, status: str, attempts: int) -> PollState:
        """
        Work out where the loop goes after observing a status.

        Args:
            status: Latest run status
            attempts: Status checks made so far

        Returns:
            The next PollState
        """
        if status == RunStatus.COMPLETED.value:
            return PollState.COMPLETED
        if status in TERMINAL_FAILURES:
            return PollState.FAILED
        if attempts >= self.max_attempts:
            return PollState.TIMED_OUT
        return PollState.POLLING

    async def wait(self, run: Run) -> Run:
        """
        Poll a run until it completes, fails, or the attempt ceiling is reached.

        Args:
            run: Run as returned by its creation call

        Returns:
            The completed Run

        Raises:
            RunFailedError: If the run ends failed, cancelled or expired
            RunTimeoutError: If the run is still unsettled after max_attempts checks
            RemoteDependencyError: If a status check fails
        """
        attempts = 0
        state = self.next_state(run.status, attempts)

        while state is PollState.POLLING:
            await self._sleep(self.interval)
            run = await self.thread_client.get_run(run.thread_id, run.id)
            attempts += 1
            run.attempts = attempts
            self.logger.debug(f"[RunPoller] Run {run.id} status={run.status} attempt={attempts}")
            state = self.next_state(run.status, attempts)

        if state is PollState.COMPLETED:
            self.logger.info(f"[RunPoller] Run {run.id} completed after {attempts} checks")
            return run

        if state is PollState.FAILED:
            self.logger.warning(f"[RunPoller] Run {run.id} ended {run.status}")
            raise RunFailedError(run.status, run.id)

        self.logger.warning(f"[RunPoller] Run {run.id} timed out after {attempts} checks (status={run.status})")
        raise RunTimeoutError(attempts, run.id)
