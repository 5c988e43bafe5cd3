#
# Copyright (C) 2017 Satoru SATOH <ssato at redhat.com>
# License: GPLv3+
#
"""Memoization with expiration of cache entries.

.. note::
   The function :func:`timedmemo.memoize.memoize` is not exported here to
   keep the name `timedmemo.memoize` for the module; use :func:`memoized`.
"""
from timedmemo.config import get_default_timeout, set_default_timeout
from timedmemo.decorators import memoized, memo_defun
from timedmemo.memoize import MemoizedWrapper
from timedmemo.registry import (
    AlreadyMemoized, FunctionRegistry, MemoizeError, NotMemoized, REGISTRY
)

__version__ = "0.1"

__all__ = ["AlreadyMemoized", "FunctionRegistry", "MemoizeError",
           "MemoizedWrapper", "NotMemoized", "REGISTRY",
           "get_default_timeout", "memo_defun", "memoized",
           "set_default_timeout"]

# vim:sw=4:ts=4:et:
