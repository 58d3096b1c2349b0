"""Background task helpers for Appcast Notifier.

Provides fire-and-forget worker threads for running update checks
without blocking the application.
"""

import logging
import threading
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Generic, Optional, TypeVar

from appcast_notifier.updater.checker import CheckOutcome, UpdateChecker
from appcast_notifier.updater.exceptions import UpdateCheckError

logger = logging.getLogger("appcast_notifier.threading")


T = TypeVar("T")

CHECK_THREAD_NAME = "appcast update check"


class TaskStatus(Enum):
    """Status of a background task."""
    PENDING = "pending"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"


@dataclass
class TaskResult(Generic[T]):
    """Result of a background task."""
    status: TaskStatus
    result: Optional[T] = None
    error: Optional[Exception] = None


class ThreadedTask(Generic[T]):
    """
    Runs a callable in a daemon thread.

    The thread signals readiness as soon as it starts, before the target
    does any work, and start() returns at that point. Nobody has to join
    the thread; it finishes on its own.

    Usage:
        task = ThreadedTask(long_operation, on_complete=handle_result)
        task.start()
    """

    def __init__(
        self,
        target: Callable[..., T],
        args: tuple = (),
        kwargs: Optional[dict] = None,
        on_complete: Optional[Callable[[TaskResult[T]], None]] = None,
        name: Optional[str] = None
    ):
        """
        Initialize a threaded task.

        Args:
            target: Callable to run in background
            args: Positional arguments for target
            kwargs: Keyword arguments for target
            on_complete: Callback when task finishes (called from worker thread)
            name: Thread name
        """
        self._target = target
        self._args = args
        self._kwargs = kwargs or {}
        self._on_complete = on_complete
        self._name = name

        self._thread: Optional[threading.Thread] = None
        self._ready = threading.Event()
        self._result: Optional[TaskResult[T]] = None
        self._status = TaskStatus.PENDING

    @property
    def status(self) -> TaskStatus:
        """Current task status."""
        return self._status

    @property
    def is_running(self) -> bool:
        """True if task is currently running."""
        return self._status == TaskStatus.RUNNING

    @property
    def is_ready(self) -> bool:
        """True once the worker thread has started executing."""
        return self._ready.is_set()

    def start(self, ready_timeout: Optional[float] = None) -> bool:
        """
        Start the background task and wait until its thread is running.

        Args:
            ready_timeout: Maximum time to wait for the thread (None = forever)

        Returns:
            True if the thread signalled readiness in time
        """
        if self._status != TaskStatus.PENDING:
            raise RuntimeError("Task already started")

        self._status = TaskStatus.RUNNING
        self._thread = threading.Thread(target=self._run, name=self._name, daemon=True)
        self._thread.start()
        return self._ready.wait(timeout=ready_timeout)

    def _run(self) -> None:
        """Internal method that runs in the background thread."""
        # Nothing to initialize, so signal readiness immediately
        self._ready.set()

        try:
            result = self._target(*self._args, **self._kwargs)
            self._result = TaskResult(status=TaskStatus.COMPLETED, result=result)
            self._status = TaskStatus.COMPLETED

        except UpdateCheckError as e:
            logger.error(f"Background task '{self._name}' failed: {e}")
            self._fail(e)

        except Exception as e:
            logger.exception(f"Background task '{self._name}' failed: {e}")
            self._fail(e)

        if self._on_complete:
            self._on_complete(self._result)

    def _fail(self, error: Exception) -> None:
        self._result = TaskResult(status=TaskStatus.FAILED, error=error)
        self._status = TaskStatus.FAILED

    def wait(self, timeout: Optional[float] = None) -> TaskResult[T]:
        """
        Wait for task completion and return result.

        Args:
            timeout: Maximum time to wait (None = forever)

        Returns:
            TaskResult with status and result/error

        Raises:
            TimeoutError: If timeout expires before task completes
        """
        if self._thread:
            self._thread.join(timeout=timeout)
            if self._thread.is_alive():
                raise TimeoutError("Task did not complete within timeout")

        return self._result or TaskResult(status=TaskStatus.PENDING)


class CheckWorker(ThreadedTask[CheckOutcome]):
    """
    Runs one update check cycle in the background.

    Usage:
        worker = CheckWorker(UpdateChecker.manual(settings, client, notifier))
        worker.start()
    """

    def __init__(
        self,
        checker: UpdateChecker,
        on_complete: Optional[Callable[[TaskResult[CheckOutcome]], None]] = None
    ):
        """
        Initialize the worker.

        Args:
            checker: Checker to run
            on_complete: Callback when the check finishes (called from worker thread)
        """
        super().__init__(checker.run, on_complete=on_complete, name=CHECK_THREAD_NAME)
        self._checker = checker

    @property
    def checker(self) -> UpdateChecker:
        """The checker this worker runs."""
        return self._checker

    def wait_outcome(self, timeout: Optional[float] = None) -> Optional[CheckOutcome]:
        """
        Wait for the check and return its outcome.

        A failed check is reported as an ERROR outcome.

        Args:
            timeout: Maximum time to wait (None = forever)

        Returns:
            CheckOutcome, or None if the worker was never started
        """
        result = self.wait(timeout=timeout)
        return outcome_from_result(result)


def outcome_from_result(result: TaskResult[Any]) -> Optional[CheckOutcome]:
    """Convert a finished check task result into a CheckOutcome."""
    if result.status == TaskStatus.COMPLETED:
        return result.result
    if result.status == TaskStatus.FAILED:
        return CheckOutcome.error(str(result.error))
    return None
