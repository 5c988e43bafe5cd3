#
# Copyright (C) 2017 Satoru SATOH <ssato at redhat.com>
# License: GPLv3+
#
"""One-shot timers with an explicit state.

A :class:`TimerHandle` is created in the SCHEDULED state and moves to either
FIRED or CANCELLED exactly once. Cancelling a fired or cancelled handle does
nothing.

All timers share a :class:`Scheduler`, a single daemon thread waiting on a
queue of deadlines, so that pending timers don't cost a thread each.
"""
import heapq
import itertools
import logging
import threading
import time


LOG = logging.getLogger(__name__)

SCHEDULED = "scheduled"
FIRED = "fired"
CANCELLED = "cancelled"

# Cancelled timers stay in the queue until the queue is compacted.
COMPACT_MIN_CANCELLED = 64


class Scheduler(object):
    """Run callbacks of timers in one thread at their deadlines.
    """
    def __init__(self, name="timedmemo-scheduler"):
        self.name = name
        self._queue = []  # [(deadline, seq, handle)]
        self._seq = itertools.count()
        self._ncancelled = 0
        self._cond = threading.Condition()
        self._thread = None

    def __len__(self):
        with self._cond:
            return len(self._queue) - self._ncancelled

    def schedule(self, handle):
        """
        Queue `handle` to fire after its delay.

        :param handle: :class:`TimerHandle` object
        """
        deadline = time.monotonic() + handle.delay
        with self._cond:
            heapq.heappush(self._queue, (deadline, next(self._seq), handle))
            self._ensure_thread()
            self._cond.notify()

    def discard(self, handle):
        """Called when `handle` was cancelled.
        """
        with self._cond:
            self._ncancelled += 1
            if self._ncancelled >= max(COMPACT_MIN_CANCELLED,
                                       len(self._queue) // 2):
                self._queue = [ent for ent in self._queue if ent[2].active]
                heapq.heapify(self._queue)
                self._ncancelled = 0

    def _ensure_thread(self):
        if self._thread is None or not self._thread.is_alive():
            self._thread = threading.Thread(target=self._run, name=self.name)
            self._thread.daemon = True
            self._thread.start()

    def _next(self):
        """Wait for and pop the next handle to fire.
        """
        with self._cond:
            while True:
                if not self._queue:
                    self._cond.wait()
                    continue

                (deadline, _seq, handle) = self._queue[0]
                if not handle.active:
                    heapq.heappop(self._queue)
                    self._ncancelled = max(self._ncancelled - 1, 0)
                    continue

                delay = deadline - time.monotonic()
                if delay > 0:
                    self._cond.wait(delay)
                    continue

                heapq.heappop(self._queue)
                return handle

    def _run(self):
        while True:
            handle = self._next()
            try:
                handle._fire()  # pylint: disable=protected-access
            except Exception:  # pylint: disable=broad-except
                LOG.exception("Timer callback failed: %r", handle)


SCHEDULER = Scheduler()


class TimerHandle(object):
    """Scheduled callback runs in the scheduler thread after `delay` seconds.

    >>> handle = TimerHandle(3600, lambda: None).start()
    >>> handle.state
    'scheduled'
    >>> handle.cancel()
    True
    >>> handle.cancel()
    False
    >>> handle.state
    'cancelled'
    """
    def __init__(self, delay, callback, *args, **kwargs):
        """
        :param delay: Delay in seconds, a positive number
        :param callback: Callable to run on expiry
        :param args: Arguments passed to `callback`
        :param kwargs: Only 'scheduler', :class:`Scheduler` to use instead of
            the shared one, is accepted
        """
        if not callable(callback):
            raise ValueError("Given object is not callable!: %r" % callback)

        self.delay = delay
        self.callback = callback
        self.args = args
        self.scheduler = kwargs.pop("scheduler", None) or SCHEDULER
        if kwargs:
            raise TypeError("Unexpected keyword arguments: %r" % kwargs)

        self._state = SCHEDULED
        self._lock = threading.Lock()

    def __repr__(self):
        return "<%s delay=%r state=%s>" % (self.__class__.__name__,
                                            self.delay, self._state)

    @property
    def state(self):
        return self._state

    @property
    def active(self):
        return self._state == SCHEDULED

    @property
    def fired(self):
        return self._state == FIRED

    @property
    def cancelled(self):
        return self._state == CANCELLED

    def start(self):
        """Arm the timer.
        """
        self.scheduler.schedule(self)
        return self

    def _transit(self, state):
        """Move out of SCHEDULED state. Only the first transition succeeds.
        """
        with self._lock:
            if self._state != SCHEDULED:
                return False

            self._state = state
            return True

    def _fire(self):
        if not self._transit(FIRED):
            return  # Cancelled just before the deadline.

        self.callback(*self.args)

    def cancel(self):
        """
        Cancel this timer.

        :return: True if cancelled by this call, False if it had been fired or
            cancelled already
        """
        if not self._transit(CANCELLED):
            return False

        self.scheduler.discard(self)
        return True

# vim:sw=4:ts=4:et:
