"""
Line-by-line job driver.

Jobs process one scanline per step. In blocking mode the driver loops
until the last line; in non-blocking mode it hands the next step to a
host scheduling primitive (a Qt timer, an asyncio loop...) so the host
stays responsive. Abort requests are only honored between two lines, so
a line is either fully processed or not started.
"""

from abc import ABC, abstractmethod
from enum import Enum
from typing import Callable, Optional, Union
import asyncio
import logging

from .events import AbortEvent, Event, EventDispatcher, Handler

logger = logging.getLogger(__name__)

# Takes a zero-argument callback and runs it later on the host loop
Scheduler = Callable[[Callable[[], None]], None]

NO_EVENT_LOOP = "non-blocking runs need a QCoreApplication or an explicit scheduler"


def qt_application():
    """Return the running Qt application, or None."""
    from PyQt6.QtCore import QCoreApplication
    return QCoreApplication.instance()


def qt_scheduler(callback: Callable[[], None]):
    """
    Run callback on the next pass of the Qt event loop.

    Raises:
        RuntimeError: when no QCoreApplication exists
    """
    if qt_application() is None:
        raise RuntimeError(NO_EVENT_LOOP)

    from PyQt6.QtCore import QTimer
    QTimer.singleShot(0, callback)


def asyncio_scheduler(loop: Optional[asyncio.AbstractEventLoop] = None) -> Scheduler:
    """
    Build a scheduler that queues callbacks on an asyncio loop.

    Args:
        loop: Target loop (defaults to the running loop)
    """
    if loop is None:
        loop = asyncio.get_running_loop()

    def schedule(callback: Callable[[], None]):
        loop.call_soon(callback)

    return schedule


class JobState(Enum):
    """Job execution states."""
    IDLE = "idle"
    RUNNING = "running"
    DONE = "done"
    ABORTED = "aborted"


class LineJob(ABC):
    """
    Base class for jobs that process a grid one line at a time.

    Subclasses provide the number of lines, the work for one line and
    the payloads of their progress and done events.
    """

    def __init__(self, non_blocking: bool = True, scheduler: Optional[Scheduler] = None):
        self.non_blocking = non_blocking
        self.scheduler: Scheduler = scheduler or qt_scheduler
        self.events = EventDispatcher()
        self.state = JobState.IDLE

        self._line_index = 0
        self._last_percent = 0
        self._abort_requested = False

    @property
    @abstractmethod
    def total_lines(self) -> int:
        """Number of lines of a full run."""

    @property
    def lines_processed(self) -> int:
        return self._line_index

    @abstractmethod
    def _begin(self):
        """Reset the job output at the start of a run."""

    @abstractmethod
    def _process_line(self, index: int):
        """Process one line and return the payload of its progress event."""

    @abstractmethod
    def _progress_event(self, percent: int, payload):
        """Build the progress event of a processed line."""

    @abstractmethod
    def _done_event(self):
        """Build the done event of a completed run."""

    def on(self, event: Union[Event, str], handler: Handler):
        """
        Register an event handler.

        Args:
            event: Event or its name ('progress', 'done', 'abort')
            handler: Called with the event payload

        Returns:
            self, so registrations can be chained

        Raises:
            UnknownEventError: for names that are not events
        """
        self.events.on(event, handler)
        return self

    def abort(self):
        """Stop the running job before its next line."""
        if self.state == JobState.RUNNING:
            self._abort_requested = True

    def _start(self, non_blocking: Optional[bool] = None,
               progress: Optional[Handler] = None,
               done: Optional[Handler] = None,
               abort: Optional[Handler] = None) -> bool:
        """
        Start a run; return True when it finished before returning.
        """
        if self.state == JobState.RUNNING:
            raise RuntimeError(f"{type(self).__name__} is already running")

        if progress:
            self.on(Event.PROGRESS, progress)
        if done:
            self.on(Event.DONE, done)
        if abort:
            self.on(Event.ABORT, abort)

        if non_blocking is None:
            non_blocking = self.non_blocking

        if non_blocking and self.scheduler is qt_scheduler and qt_application() is None:
            raise RuntimeError(NO_EVENT_LOOP)

        self._line_index = 0
        self._last_percent = 0
        self._abort_requested = False
        self.state = JobState.RUNNING

        self._begin()
        logger.info("%s started: %d lines (%s)", type(self).__name__, self.total_lines,
                    "non-blocking" if non_blocking else "blocking")

        if non_blocking:
            if self._advance():
                self.scheduler(self._continue)
        else:
            while self._advance():
                pass

        return self.state != JobState.RUNNING

    def step(self) -> bool:
        """
        Process the next line.

        Returns:
            True while lines remain
        """
        if self.state != JobState.RUNNING:
            raise RuntimeError(f"{type(self).__name__} is not running")

        total = self.total_lines
        if self._line_index >= total:
            return False

        payload = self._process_line(self._line_index)
        self._line_index += 1

        percent = round(self._line_index / total * 100)
        if percent > self._last_percent:
            self.events.emit(Event.PROGRESS, self._progress_event(percent, payload))
        self._last_percent = percent

        return self._line_index < total

    def _advance(self) -> bool:
        """One driver slice; True when another slice must be scheduled."""
        if self._abort_requested:
            self.state = JobState.ABORTED
            logger.info("%s aborted after %d of %d lines",
                        type(self).__name__, self._line_index, self.total_lines)
            self.events.emit(Event.ABORT, AbortEvent(lines_processed=self._line_index))
            return False

        try:
            more = self.step()
        except Exception:
            # Bad grid data or a failing handler ends the run
            self.state = JobState.IDLE
            raise

        if more:
            return True

        self.state = JobState.DONE
        logger.info("%s done: %d lines", type(self).__name__, self._line_index)
        self.events.emit(Event.DONE, self._done_event())
        return False

    def _continue(self):
        if self._advance():
            self.scheduler(self._continue)
