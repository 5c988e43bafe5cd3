#
# Copyright (C) 2012 - 2017 Satoru SATOH <satoru.satoh@gmail.com>
# License: GPLv3+
#
"""Memoize module

Results are cached per argument tuple. Each cache entry has its own timer
which evicts it once the timeout elapses since the entry was last used; every
call with the same arguments, cache hit or miss, restarts the timer.

.. note::
   A result None can not be told from "not cached yet", so it's not cached
   and functions returning None are called every time.
"""
import functools
import logging
import numbers
import threading
import types
import weakref

import timedmemo.config
import timedmemo.timer
from timedmemo.globals import _


LOG = logging.getLogger(__name__)


class _Tag(object):
    """Markers to keep frozen containers apart from plain tuples.
    """
    def __init__(self, name):
        self.name = name

    def __repr__(self):
        return "<%s>" % self.name


_LIST = _Tag("list")
_DICT = _Tag("dict")
_BYTEARRAY = _Tag("bytearray")
_KWARGS = _Tag("kwargs")


class _Identity(object):
    """Key of an unhashable object which is not a known container, compared
    by identity. The object is kept referenced while it's a part of a key.
    """
    __slots__ = ("obj", )

    def __init__(self, obj):
        self.obj = obj

    def __hash__(self):
        return id(self.obj)

    def __eq__(self, other):
        return isinstance(other, _Identity) and other.obj is self.obj

    def __repr__(self):
        return "<identity of %r>" % (self.obj, )


def _freeze(obj):
    """
    Make up a hashable object equal to others iff `obj` is equal to theirs.
    Unhashable objects other than lists, dicts, sets and bytearrays are
    compared by identity.
    """
    if isinstance(obj, list):
        return (_LIST, tuple(_freeze(x) for x in obj))

    if isinstance(obj, tuple):
        return tuple(_freeze(x) for x in obj)

    if isinstance(obj, dict):
        return (_DICT, frozenset((_freeze(k), _freeze(v))
                                 for k, v in obj.items()))

    if isinstance(obj, (set, frozenset)):
        return frozenset(_freeze(x) for x in obj)

    if isinstance(obj, bytearray):
        return (_BYTEARRAY, bytes(obj))

    try:
        hash(obj)
        return obj
    except TypeError:  # Some other unhashable type.
        return _Identity(obj)


def make_key(args, kwargs=None):
    """
    Compute a cache key from arguments. Arguments are compared by value, not
    by identity, and their order matters. See :func:`_freeze` for exceptions.

    :param args: A tuple of positional arguments
    :param kwargs: A dict of keyword arguments or None

    >>> make_key((1, [2, 3])) == make_key((1, [2, 3]))
    True
    >>> make_key((1, 2)) == make_key((2, 1))
    False
    >>> make_key(([1, 2], )) == make_key(((1, 2), ))
    False
    >>> make_key((), dict(a=1, b=2)) == make_key((), dict(b=2, a=1))
    True
    """
    try:
        hash(args)
        key = args
    except TypeError:
        key = _freeze(args)

    if kwargs:
        key += (_KWARGS, ) + tuple((k, _freeze(kwargs[k]))
                                   for k in sorted(kwargs))
    return key


def resolve_timeout(timeout=None, default=None):
    """
    Resolve the timeout of a memoized function.

    :param timeout: Timeout in seconds. Any value other than a positive
        number means to use `default`.
    :param default: Default timeout, or None to use the process-wide default
        from :func:`timedmemo.config.get_default_timeout`
    :return: A positive float or None means entries never expire

    >>> resolve_timeout(10, 20)
    10.0
    >>> resolve_timeout(None, 20)
    20.0
    >>> resolve_timeout(0, "never") is None
    True
    """
    if isinstance(timeout, (numbers.Real, str)):
        timeout = timedmemo.config.normalize_timeout(timeout)
        if timeout is not None:
            return timeout

    if default is None:
        resolved = timedmemo.config.get_default_timeout()
    else:
        resolved = timedmemo.config.normalize_timeout(default)

    if resolved is None:
        LOG.warning(_("Cache entries never expire. The cache may grow "
                      "without bounds unless it's cleared explicitly."))
    return resolved


def _cancel_timers(timers):
    """Cancel pending timers of a memoized function being collected.
    """
    for handle in list(timers.values()):
        handle.cancel()


def _expire(wref, key):
    """Timer callback; `wref` is a weak reference to the memoized function.
    """
    wrapper = wref()
    if wrapper is not None:
        wrapper._evict(key)  # pylint: disable=protected-access


class MemoizedWrapper(object):
    """Callable caches results of `underlying` and expires them.

    Mutations of the cache and the timers are serialized with a lock per
    wrapper. The underlying function is called outside of the lock, so that
    concurrent calls with the same arguments not cached yet may compute the
    result twice; the last one is kept.
    """
    def __init__(self, fnc, timeout=None, default_timeout=None):
        """
        :param fnc: Function or callable object to memoize
        :param timeout: Timeout in seconds since last use of each entry
        :param default_timeout: Timeout used if `timeout` is not a positive
            number; see :func:`resolve_timeout`
        """
        if not callable(fnc):
            raise ValueError("Given object is not callable!: %r" % fnc)

        # Do not copy the instance dict of `fnc` which may be another wrapper.
        functools.update_wrapper(self, fnc, updated=())

        self.underlying = fnc
        self._name = getattr(fnc, "__name__", repr(fnc))
        self.timeout = resolve_timeout(timeout, default_timeout)
        self.cache = {}
        self.timers = {}
        self._lock = threading.Lock()

        weakref.finalize(self, _cancel_timers, self.timers)

    def __repr__(self):
        return "<%s of %r timeout=%r>" % (self.__class__.__name__,
                                          self.underlying, self.timeout)

    def __get__(self, obj, objtype=None):
        if obj is None:
            return self

        return types.MethodType(self, obj)

    def __len__(self):
        return len(self.cache)

    def __bool__(self):
        return True

    def __call__(self, *args, **kwargs):
        key = make_key(args, kwargs)
        try:
            with self._lock:
                value = self.cache.get(key)

            if value is None:
                LOG.debug("Cache miss: %s%r", self._name, args)
                value = self.underlying(*args, **kwargs)
                if value is not None:
                    with self._lock:
                        self.cache[key] = value
            else:
                LOG.debug("Cache hit: %s%r", self._name, args)

            return value
        finally:
            # Even when `underlying` failed; the timer of the entry cached
            # previously is also restarted.
            self._refresh(key)

    def _refresh(self, key):
        """Restart the timer for `key`.
        """
        with self._lock:
            handle = self.timers.pop(key, None)
            if handle is not None:
                handle.cancel()

            if self.timeout is None:
                return

            handle = timedmemo.timer.TimerHandle(self.timeout, _expire,
                                                 weakref.ref(self), key)
            self.timers[key] = handle.start()

    def _evict(self, key):
        """
        Remove the entry of `key`, called on expiry. Nothing is done if the
        timer was restarted after the one calls this fired.
        """
        with self._lock:
            handle = self.timers.get(key)
            if handle is None or not handle.fired:
                return

            del self.timers[key]
            self.cache.pop(key, None)

        LOG.debug("Expired: %s, key=%r", self._name, key)

    def is_cached(self, *args, **kwargs):
        """
        :return: True if a call with given arguments returns a cached result
        """
        with self._lock:
            return self.cache.get(make_key(args, kwargs)) is not None

    def clear(self):
        """Remove all cache entries and cancel their timers.
        """
        with self._lock:
            for handle in self.timers.values():
                handle.cancel()

            self.timers.clear()
            self.cache.clear()


def memoize(fnc, timeout=None, default_timeout=None):
    """memoization with expiration.

    :param fnc: Function to memoize
    :param timeout: Timeout in seconds since last use of each cache entry
    :param default_timeout: Used if `timeout` is not given; see
        :func:`resolve_timeout`
    :return: :class:`MemoizedWrapper` object wraps `fnc`
    """
    return MemoizedWrapper(fnc, timeout=timeout,
                           default_timeout=default_timeout)

# vim:sw=4:ts=4:et:
