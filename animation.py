import itertools
import logging

logger = logging.getLogger(__name__)


class FrameScheduler:
    """
    requestAnimationFrame-style scheduler driven by the window loop.

    ``schedule_next_frame`` registers a one-shot callback for the next
    ``tick``. Callbacks registered while a tick is running wait for the
    following tick, so each callback runs at most once per presented frame.
    """

    def __init__(self):
        self._pending = {}
        self._handles = itertools.count(1)

    def __len__(self):
        return len(self._pending)

    def schedule_next_frame(self, callback):
        handle = next(self._handles)
        self._pending[handle] = callback
        return handle

    def cancel(self, handle):
        self._pending.pop(handle, None)

    def tick(self, elapsed_ms):
        pending, self._pending = self._pending, {}
        for callback in pending.values():
            # One broken preview must not take the other down with it
            try:
                callback(elapsed_ms)
            except Exception:
                logger.exception("Frame callback %r failed, dropping it",
                                 callback)


class Animation:
    """
    Re-arms itself on the scheduler after every frame until stopped.

    ``draw`` is called with the elapsed time in milliseconds. If it raises,
    the exception propagates to the scheduler and the animation is not
    re-armed.
    """

    def __init__(self, scheduler, draw, name='animation'):
        self._scheduler = scheduler
        self._draw = draw
        self.name = name
        self._handle = None
        self._stopped = True
        self.frames = 0

    @property
    def running(self):
        return self._handle is not None

    def start(self):
        if self.running:
            return
        self._stopped = False
        self._handle = self._scheduler.schedule_next_frame(self._on_frame)

    def stop(self):
        self._stopped = True
        if self._handle is not None:
            self._scheduler.cancel(self._handle)
            self._handle = None

    def _on_frame(self, elapsed_ms):
        self._handle = None
        if self._stopped:
            return
        self._draw(elapsed_ms)
        self.frames += 1
        if not self._stopped:
            self._handle = self._scheduler.schedule_next_frame(self._on_frame)

    def __repr__(self):
        return f"Animation({self.name!r}, frames={self.frames})"
