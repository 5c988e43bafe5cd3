#
# Copyright (C) 2012 - 2017 Red Hat, Inc.
# Red Hat Author(s): Satoru SATOH <ssato redhat.com>
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.
#
# You should have received a copy of the GNU General Public License
# along with this program.  If not, see <http://www.gnu.org/licenses/>.
#
"""Globals.
"""
import gettext
import os.path
import os


PACKAGE = "timedmemo"

# Two hours.
DEFAULT_TIMEOUT = 7200

TIMEDMEMO_CONF = os.environ.get("TIMEDMEMO_CONF",
                                os.path.expanduser("~/.config/%s.json" %
                                                   PACKAGE))


_ = gettext.translation(domain=PACKAGE,
                        localedir=os.path.join(os.path.dirname(__file__),
                                               "locale"),
                        fallback=True).gettext

# vim:sw=4:ts=4:et:
