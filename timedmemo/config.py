#
# -*- coding: utf-8 -*-
# Copyright (C) 2013 Satoru SATOH <ssato@redhat.com>
# Copyright (C) 2013 - 2017 Red Hat, Inc.
# License: GPLv3+
#
"""timedmemo central configuration.

The process-wide default expiration delay is resolved once, when it's first
needed, from :data:`DEFAULTS` overridden by the configuration file
(:data:`timedmemo.globals.TIMEDMEMO_CONF`, JSON by default). A broken
configuration file is logged and ignored. The default can be
changed later with :func:`set_default_timeout`; memoized functions read it
only when they are created.
"""
import logging
import numbers
import os.path
import threading

import anyconfig
import munch

import timedmemo.globals
from timedmemo.globals import _


LOG = logging.getLogger(__name__)

NEVER_STRINGS = ("never", "none", "")

DEFAULTS = dict(default_timeout=timedmemo.globals.DEFAULT_TIMEOUT)


def normalize_timeout(value):
    """
    Normalize a timeout value to a positive delay in seconds or None which
    means that entries never expire.

    :param value: A number, a numeric string, None or "never"
    :return: A positive float or None

    >>> normalize_timeout(10)
    10.0
    >>> normalize_timeout("2.5")
    2.5
    >>> normalize_timeout(0) is None
    True
    >>> normalize_timeout(-1) is None
    True
    >>> normalize_timeout("never") is None
    True
    >>> normalize_timeout(None) is None
    True
    """
    if value is None or isinstance(value, bool):
        return None

    if isinstance(value, str):
        if value.strip().lower() in NEVER_STRINGS:
            return None
        try:
            value = float(value)
        except ValueError:
            raise ValueError(_("Invalid timeout: %r") % value)

    if not isinstance(value, numbers.Real):
        raise ValueError(_("Invalid timeout: %r") % value)

    return float(value) if value > 0 else None


def load_config(conf_path=None):
    """
    Load configurations from given `conf_path`. Errors on loading are logged
    and the defaults are kept.

    :param conf_path: Configuration file path
    :return: A :class:`munch.Munch` object holds configurations
    """
    cnf = munch.Munch(DEFAULTS)

    if conf_path and os.path.exists(conf_path):
        try:
            diff = anyconfig.load(conf_path)
        except (IOError, OSError, ValueError, RuntimeError) as exc:
            LOG.warning(_("Could not load the config: %s, %s"),
                        conf_path, exc)
            return cnf

        if isinstance(diff, dict):
            cnf.update(diff)
        else:
            LOG.warning(_("Ignored the config not a mapping: %s"), conf_path)

    return cnf


def _load_default_timeout(conf_path):
    """
    :return: The default timeout configured in `conf_path`, or the built-in
        one if it's missing or invalid
    """
    value = load_config(conf_path).default_timeout
    try:
        return normalize_timeout(value)
    except ValueError:
        LOG.warning(_("Invalid default_timeout %r in %s, use %r instead"),
                    value, conf_path, timedmemo.globals.DEFAULT_TIMEOUT)
        return normalize_timeout(timedmemo.globals.DEFAULT_TIMEOUT)


_UNSET = object()
_DEFAULT_TIMEOUT = _UNSET
_LOCK = threading.Lock()


def get_default_timeout():
    """
    :return: The process-wide default timeout, a positive float or None
    """
    global _DEFAULT_TIMEOUT  # pylint: disable=global-statement

    with _LOCK:
        if _DEFAULT_TIMEOUT is _UNSET:
            _DEFAULT_TIMEOUT = _load_default_timeout(
                timedmemo.globals.TIMEDMEMO_CONF
            )
        return _DEFAULT_TIMEOUT


def set_default_timeout(value):
    """
    Replace the process-wide default timeout. Memoized functions already
    created keep the timeout resolved at their creation.

    :param value: A positive delay in seconds, or None/0/"never" for entries
        never expire
    :return: The previous default timeout
    """
    global _DEFAULT_TIMEOUT  # pylint: disable=global-statement

    timeout = normalize_timeout(value)
    prev = get_default_timeout()
    with _LOCK:
        _DEFAULT_TIMEOUT = timeout

    LOG.debug("Default timeout changed: %r -> %r", prev, timeout)
    return prev

# vim:sw=4:ts=4:et:
