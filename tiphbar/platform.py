# TipHBAR - micro-tipping for creators on Hedera
# Copyright (C) 2024-2026 The TipHBAR Developers
#
# Permission is hereby granted, free of charge, to any person
# obtaining a copy of this software and associated documentation files
# (the "Software"), to deal in the Software without restriction,
# including without limitation the rights to use, copy, modify, merge,
# publish, distribute, sublicense, and/or sell copies of the Software,
# and to permit persons to whom the Software is furnished to do so,
# subject to the following conditions:
#
# The above copyright notice and this permission notice shall be
# included in all copies or substantial portions of the Software.
#
# THE SOFTWARE IS PROVIDED "AS IS", WITHOUT WARRANTY OF ANY KIND,
# EXPRESS OR IMPLIED, INCLUDING BUT NOT LIMITED TO THE WARRANTIES OF
# MERCHANTABILITY, FITNESS FOR A PARTICULAR PURPOSE AND
# NONINFRINGEMENT. IN NO EVENT SHALL THE AUTHORS OR COPYRIGHT HOLDERS
# BE LIABLE FOR ANY CLAIM, DAMAGES OR OTHER LIABILITY, WHETHER IN AN
# ACTION OF CONTRACT, TORT OR OTHERWISE, ARISING FROM, OUT OF OR IN
# CONNECTION WITH THE SOFTWARE OR THE USE OR OTHER DEALINGS IN THE
# SOFTWARE.

'''Platform-specific customization for TipHBAR'''

import os
import platform as os_platform

from .logs import logs

logger = logs.get_logger("platform")


class Platform(object):
    name = 'unset platform'

    def user_dir(self, prefer_local: bool=False) -> str:
        home_dir = os.environ.get("HOME", ".")
        return os.path.join(home_dir, ".tiphbar")


class Darwin(Platform):
    name = 'MacOSX'

    def user_dir(self, prefer_local: bool=False) -> str:
        home_dir = os.environ.get("HOME", ".")
        return os.path.join(home_dir, "Library", "Application Support", "TipHBAR")


class Linux(Platform):
    name = 'Linux'


class Unix(Platform):
    name = 'Unix'


class Windows(Platform):
    name = 'Windows'

    def user_dir(self, prefer_local: bool=False) -> str:
        app_dir = os.environ.get("APPDATA")
        localapp_dir = os.environ.get("LOCALAPPDATA")
        if not app_dir or (localapp_dir and prefer_local):
            app_dir = localapp_dir
        return os.path.join(app_dir or ".", "TipHBAR")


def _detect() -> Platform:
    system = os_platform.system()
    cls: type[Platform]
    if system == 'Darwin':
        cls = Darwin
    elif system == 'Linux':
        cls = Linux
    elif system == 'Windows':
        cls = Windows
    elif system in ('FreeBSD', 'NetBSD', 'OpenBSD', 'DragonFly'):
        cls = Unix
    else:
        logger.warning('unknown system "%s"; falling back to Unix.  Please report this.', system)
        cls = Unix
    logger.debug('using platform class %s for system "%s"', cls.__name__, system)
    return cls()


platform = _detect()
