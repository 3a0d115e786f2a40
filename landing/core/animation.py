"""
Cancellable per-frame animation task.
"""

import time
from typing import Any, Callable, Optional, Protocol


class FrameScheduler(Protocol):
    """Anything that can run a callback on the next display refresh"""

    def request_frame(self, callback: Callable[[], None]) -> Any:
        ...

    def cancel_frame(self, handle: Any) -> None:
        ...


class AnimationLoop:
    """
    Self-rescheduling frame task.

    Each tick checks `running`, requests the next frame, samples the clock
    and calls step(time). stop() clears the flag and cancels the pending
    request, so no step runs after it returns.
    """

    # Smallest step when the clock does not advance between frames
    MIN_TIME_STEP = 1e-6

    def __init__(self, scheduler: FrameScheduler, step: Callable[[float], None],
                 clock: Callable[[], float] = time.time):
        """
        Args:
            scheduler: Frame scheduler (usually the render host)
            step: Called once per frame with the time in seconds
            clock: Wall-clock source in seconds
        """
        self.scheduler = scheduler
        self.step = step
        self.clock = clock

        self.running = False
        self.frame_count = 0
        self.last_time: Optional[float] = None
        self._handle: Any = None

    def start(self):
        """Run the first frame now and keep rescheduling"""
        if self.running:
            return
        self.running = True
        self._tick()

    def _next_time(self) -> float:
        t = self.clock()
        if self.last_time is not None and t <= self.last_time:
            t = self.last_time + self.MIN_TIME_STEP
        self.last_time = t
        return t

    def _tick(self):
        if not self.running:
            return
        self._handle = self.scheduler.request_frame(self._tick)
        try:
            self.step(self._next_time())
        except Exception:
            self.stop()
            raise
        self.frame_count += 1

    def stop(self):
        """Stop the loop and cancel any pending frame request"""
        self.running = False
        if self._handle is not None:
            self.scheduler.cancel_frame(self._handle)
            self._handle = None
