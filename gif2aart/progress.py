"""
progress.py

Progress events published by the converter.

A sink is anything callable as sink(current, total, message). The simplest
one is a plain function; ProgressChannel buffers events in a bounded queue
so another thread can consume them without ever blocking the conversion.
"""

from dataclasses import dataclass
import queue
import threading
from typing import Iterator, List, Optional


@dataclass(frozen=True)
class ProgressEvent:
    current: int
    total: int
    message: str
    failed: bool = False

    @property
    def percent(self) -> float:
        return 100.0 * self.current / self.total if self.total else 100.0

    @property
    def done(self) -> bool:
        return self.current >= self.total

    @property
    def finished(self) -> bool:
        """Completed or failed; nothing more will be published."""
        return self.done or self.failed


class ProgressChannel:
    """
    Bounded queue of ProgressEvents.

    When the queue is full the oldest pending event is dropped to make room,
    so publishing never blocks and the final (completion or failure) event
    always survives. A failed conversion ends the stream with an event whose
    `failed` flag is set.

    Example:
        channel = ProgressChannel()
        worker = threading.Thread(target=convert_gif_to_frames,
                                  args=(src, opts), kwargs={"progress": channel})
        worker.start()
        for event in channel.events():
            print(f"{event.percent:.0f}% {event.message}")
    """

    def __init__(self, maxsize: int = 32):
        self._queue = queue.Queue(maxsize=maxsize)
        self._lock = threading.Lock()
        self.dropped = 0
        self._last = 0

    def __call__(self, current: int, total: int, message: str) -> None:
        self._last = current
        self.publish(ProgressEvent(current, total, message))

    def fail(self, message: str, total: int = 100) -> None:
        self.publish(ProgressEvent(self._last, total, message, failed=True))

    def publish(self, event: ProgressEvent) -> None:
        with self._lock:
            while True:
                try:
                    self._queue.put_nowait(event)
                    return
                except queue.Full:
                    try:
                        self._queue.get_nowait()
                        self.dropped += 1
                    except queue.Empty:
                        pass

    def get(self, timeout: Optional[float] = None) -> ProgressEvent:
        return self._queue.get(timeout=timeout)

    def drain(self) -> List[ProgressEvent]:
        """Everything currently buffered, without waiting."""
        out = []
        while True:
            try:
                out.append(self._queue.get_nowait())
            except queue.Empty:
                return out

    def events(self, timeout: Optional[float] = None) -> Iterator[ProgressEvent]:
        """Block on the queue and yield events up to and including the completion or failure event."""
        while True:
            event = self.get(timeout=timeout)
            yield event
            if event.finished:
                return
