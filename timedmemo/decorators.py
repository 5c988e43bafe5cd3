#
# Copyright (C) 2015 - 2017 Satoru SATOH <ssato@redhat.com>
# License: GPLv3+
#
"""Misc decorators
"""
import timedmemo.memoize
import timedmemo.registry


def memoized(fnc=None, timeout=None):
    """memoization decorator.

    It can be used as @memoized or @memoized(timeout=<seconds>).

    :param fnc: Function to decorate
    :param timeout: Timeout in seconds since last use of each cache entry
    """
    def decorator(fnc_):
        """Decorator"""
        return timedmemo.memoize.memoize(fnc_, timeout=timeout)

    if fnc is None:
        return decorator

    return decorator(fnc)


def memo_defun(registry=None, timeout=None):
    """
    Define the decorated function by its name in `registry` and replace it
    with memoized one at once. The original is not kept, so that it can not
    be restored.

    :param registry: :class:`timedmemo.registry.FunctionRegistry` object or
        None to use the default registry
    :param timeout: Timeout in seconds since last use of each cache entry
    """
    if registry is None:
        registry = timedmemo.registry.REGISTRY

    def decorator(fnc):
        """Decorator"""
        registry.define(fnc.__name__, fnc)
        return registry.replace(fnc.__name__, timeout=timeout,
                                retain_original=False)

    return decorator

# vim:sw=4:ts=4:et:
