#
# Copyright (C) 2015 - 2017 Satoru SATOH <ssato at redhat.com>
# License: GPLv3+
#
"""Registry of named functions can be replaced with memoized ones.

A :class:`FunctionRegistry` binds names to functions. It keeps functions in
its own table, or binds them as attributes of a target object such as a
module or a class. :meth:`FunctionRegistry.replace` swaps the function bound
to a name with a memoized version and saves the original one, which
:meth:`FunctionRegistry.restore` reinstalls later.

>>> reg = FunctionRegistry()
>>> fnc = reg.define("double", lambda x: x * 2)
>>> wrapper = reg.replace("double", 60)
>>> reg.call("double", 3)
6
>>> reg.is_memoized("double")
True
>>> fnc is reg.restore("double")
True
>>> reg.is_memoized("double")
False
"""
import inspect
import logging

import munch

import timedmemo.memoize
from timedmemo.globals import _


LOG = logging.getLogger(__name__)


class MemoizeError(RuntimeError):
    """Base class of errors about memoized functions in registries.
    """
    fmt = "%s"

    def __init__(self, name):
        super(MemoizeError, self).__init__(_(self.fmt) % name)
        self.name = name


class AlreadyMemoized(MemoizeError):
    """Raised when a function to memoize was memoized already.
    """
    fmt = "Function '%s' is already memoized. Restore it at first."


class NotMemoized(MemoizeError):
    """Raised when the original function to restore is not kept.
    """
    fmt = "No original function of '%s' is kept. It was not memoized, or " \
          "memoized without keeping the original."


class FunctionRegistry(object):
    """Named functions and their originals saved on memoization.
    """
    def __init__(self, target=None):
        """
        :param target: Object (module, class, etc.) holds functions as its
            attributes, or None to keep them in this registry itself
        """
        self.target = target
        self._definitions = {}
        self._annotations = {}  # name :: str -> munch.Munch

    def __repr__(self):
        return "<%s target=%r>" % (self.__class__.__name__, self.target)

    def __contains__(self, name):
        if self.target is None:
            return name in self._definitions

        return callable(getattr(self.target, name, None))

    def _fetch(self, name):
        if self.target is None:
            try:
                return self._definitions[name]
            except KeyError:
                raise KeyError(_("No such function: %s") % name)

        try:
            return getattr(self.target, name)
        except AttributeError:
            raise KeyError(_("No such function: %s") % name)

    def _fetch_raw(self, name):
        """
        Fetch the object bound to `name` as it is, e.g. staticmethod and
        classmethod objects in a class are not unwrapped.
        """
        if self.target is None:
            return self._fetch(name)

        try:
            return inspect.getattr_static(self.target, name)
        except AttributeError:
            raise KeyError(_("No such function: %s") % name)

    def _bind(self, name, fnc):
        if self.target is None:
            self._definitions[name] = fnc
        else:
            setattr(self.target, name, fnc)

    def names(self):
        """
        :return: A sorted list of names of functions in this registry
        """
        if self.target is None:
            return sorted(self._definitions)

        return sorted(n for n in dir(self.target) if n in self)

    def define(self, name, fnc):
        """
        Bind `fnc` to `name` as it is.

        :param name: Function name
        :param fnc: Function or callable object
        :return: `fnc`
        """
        if not callable(fnc):
            raise ValueError("Given object is not callable!: %r" % fnc)

        self._bind(name, fnc)
        return fnc

    def lookup(self, name):
        """
        :return: The function currently bound to `name`
        :raises: KeyError if nothing is bound to `name`
        """
        return self._fetch(name)

    def call(self, name, *args, **kwargs):
        """
        Call the function currently bound to `name`, original or memoized.
        """
        return self._fetch(name)(*args, **kwargs)

    def is_memoized(self, name):
        """
        :return: True if the original function of `name` is kept
        """
        ann = self._annotations.get(name)
        return ann is not None and ann.original is not None

    def replace(self, name, timeout=None, retain_original=True):
        """
        Replace the function bound to `name` with memoized one.

        :param name: Function name
        :param timeout: Timeout in seconds of cache entries; the default
            timeout is used if it's not a positive number
        :param retain_original: Keep the original function to restore it
            later with :meth:`restore` if True

        :return: :class:`timedmemo.memoize.MemoizedWrapper` object installed
        :raises: AlreadyMemoized, KeyError
        """
        if self.is_memoized(name):
            raise AlreadyMemoized(name)

        orig = self._fetch_raw(name)
        if isinstance(orig, (staticmethod, classmethod)):
            wrapper = timedmemo.memoize.memoize(orig.__func__, timeout=timeout)
            installed = type(orig)(wrapper)
        else:
            wrapper = timedmemo.memoize.memoize(orig, timeout=timeout)
            installed = wrapper

        if retain_original:
            doc = getattr(orig, "__doc__", None)
            self._annotations[name] = munch.Munch(original=orig, doc=doc)
        else:
            self._annotations.pop(name, None)

        self._bind(name, installed)
        LOG.info(_("Memoized: %s, timeout=%r"), name, wrapper.timeout)

        return wrapper

    def restore(self, name):
        """
        Restore the original function of `name` memoized with
        :meth:`replace`. It can be done only once for each replacement.

        :param name: Function name
        :return: The original function restored
        :raises: NotMemoized
        """
        if not self.is_memoized(name):
            raise NotMemoized(name)

        ann = self._annotations.pop(name)
        self._bind(name, ann.original)
        LOG.info(_("Restored: %s"), name)

        return ann.original

    def reset_cache(self, name, timeout=None):
        """
        Memoize the function currently bound to `name`, even if it's memoized
        already, and forget its original. The old cache is dropped with the
        old memoized function.

        :param name: Function name
        :param timeout: Timeout in seconds of cache entries
        :return: :class:`timedmemo.memoize.MemoizedWrapper` object installed
        """
        if self.is_memoized(name):
            self._annotations.pop(name)
        else:
            LOG.warning(_("Function '%s' was not memoized with replace; its "
                          "original can not be restored any more."), name)

        return self.replace(name, timeout=timeout, retain_original=False)


REGISTRY = FunctionRegistry()


def define(name, fnc):
    """:meth:`FunctionRegistry.define` of the default registry.
    """
    return REGISTRY.define(name, fnc)


def replace(name, timeout=None, retain_original=True):
    """:meth:`FunctionRegistry.replace` of the default registry.
    """
    return REGISTRY.replace(name, timeout=timeout,
                            retain_original=retain_original)


def restore(name):
    """:meth:`FunctionRegistry.restore` of the default registry.
    """
    return REGISTRY.restore(name)


def reset_cache(name, timeout=None):
    """:meth:`FunctionRegistry.reset_cache` of the default registry.
    """
    return REGISTRY.reset_cache(name, timeout=timeout)

# vim:sw=4:ts=4:et:
