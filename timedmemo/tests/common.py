#
# Copyright (C) 2011 - 2017 Satoru SATOH <ssato at redhat.com>
#
# pylint: disable=missing-docstring
import os.path
import os
import shutil
import tempfile
import threading
import unittest


# Timeout in seconds used in tests need to wait for expiration.
TIMEOUT = 0.2


def setup_workdir():
    """
    >>> workdir = setup_workdir()
    >>> os.path.exists(workdir)
    True
    >>> os.rmdir(workdir)
    """
    return tempfile.mkdtemp(prefix="python-timedmemo-tests-")


class CallCounter(object):
    """Callable counts how many times it's called.

    >>> fnc = CallCounter(lambda x: x + 1)
    >>> (fnc(1), fnc(1), fnc.count)
    (2, 2, 2)
    """
    def __init__(self, fnc=None):
        self.fnc = (lambda *args: args) if fnc is None else fnc
        self.count = 0
        self._lock = threading.Lock()

    def __call__(self, *args, **kwargs):
        with self._lock:
            self.count += 1
        return self.fnc(*args, **kwargs)


class TestsWithWorkdir(unittest.TestCase):

    def setUp(self):
        self.workdir = setup_workdir()

    def tearDown(self):
        shutil.rmtree(self.workdir)

# vim:sw=4:ts=4:et:
