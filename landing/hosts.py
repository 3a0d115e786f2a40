"""
Render hosts: what the scene renderer mounts into.

A host combines the container the surface output is attached to with the
window it lives in: viewport size, resize notifications and the display
refresh callback.
"""

import itertools
import logging
from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, List, Optional, Tuple

import moderngl as mgl

logger = logging.getLogger(__name__)

ResizeListener = Callable[[int, int], None]


class RenderHost(ABC):
    """
    Base host with frame scheduling, resize listeners and attached outputs.

    Subclasses decide where the context comes from and how an attached
    surface reaches the screen.
    """

    def __init__(self):
        self._frame_ids = itertools.count(1)
        self._pending_frames: Dict[int, Callable[[], None]] = {}
        # Callbacks of the refresh in progress
        self._running_frames: Dict[int, Callable[[], None]] = {}
        self._resize_listeners: List[ResizeListener] = []
        self._attached: List[Any] = []
        self.connected = True

    @abstractmethod
    def viewport_size(self) -> Tuple[int, int]:
        """Current (width, height) of the viewport"""
        pass

    def create_context(self) -> Optional[mgl.Context]:
        """Context to render with; None asks the engine for a standalone one"""
        return None

    def present(self, surface):
        """Show a rendered surface; hosts without a screen do nothing"""
        pass

    # Attached outputs

    def attach(self, surface):
        if surface not in self._attached:
            self._attached.append(surface)

    def detach(self, surface):
        self._attached.remove(surface)

    def holds(self, surface) -> bool:
        return self.connected and surface in self._attached

    @property
    def attached(self) -> List[Any]:
        return list(self._attached)

    def disconnect(self):
        """The host container went away; attached outputs are dropped"""
        self.connected = False
        self._attached.clear()

    # Resize notifications

    def add_resize_listener(self, listener: ResizeListener):
        self._resize_listeners.append(listener)

    def remove_resize_listener(self, listener: ResizeListener):
        if listener in self._resize_listeners:
            self._resize_listeners.remove(listener)

    @property
    def resize_listener_count(self) -> int:
        return len(self._resize_listeners)

    def notify_resize(self, width: int, height: int):
        for listener in list(self._resize_listeners):
            listener(width, height)

    # Frame scheduling

    def request_frame(self, callback: Callable[[], None]) -> int:
        handle = next(self._frame_ids)
        self._pending_frames[handle] = callback
        return handle

    def cancel_frame(self, handle: int):
        self._pending_frames.pop(handle, None)
        self._running_frames.pop(handle, None)

    @property
    def pending_frame_count(self) -> int:
        return len(self._pending_frames) + len(self._running_frames)

    def run_pending_frames(self) -> int:
        """
        Run the callbacks requested before this refresh.

        Callbacks requested while running wait for the next refresh. If a
        callback raises, the ones not yet run stay queued for the next refresh.

        Returns:
            Number of callbacks run
        """
        self._running_frames = self._pending_frames
        self._pending_frames = {}
        ran = 0
        try:
            while self._running_frames:
                handle = next(iter(self._running_frames))
                callback = self._running_frames.pop(handle)
                ran += 1
                callback()
        finally:
            if self._running_frames:
                self._running_frames.update(self._pending_frames)
                self._pending_frames = self._running_frames
            self._running_frames = {}
        return ran


class OffscreenHost(RenderHost):
    """
    Host without a window. Frames run only when pump() is called.
    """

    def __init__(self, width: int = 1280, height: int = 720,
                 ctx: Optional[mgl.Context] = None):
        """
        Args:
            width: Viewport width
            height: Viewport height
            ctx: Context to hand to the renderer (None for standalone)
        """
        super().__init__()
        self.width = width
        self.height = height
        self.ctx = ctx

    def viewport_size(self) -> Tuple[int, int]:
        return self.width, self.height

    def create_context(self) -> Optional[mgl.Context]:
        return self.ctx

    def resize(self, width: int, height: int):
        """Change the viewport and notify listeners synchronously"""
        self.width = width
        self.height = height
        self.notify_resize(width, height)

    def pump(self, frames: int = 1) -> int:
        """
        Simulate display refreshes.

        Returns:
            Total number of frame callbacks run
        """
        total = 0
        for _ in range(frames):
            total += self.run_pending_frames()
        return total
