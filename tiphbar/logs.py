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

'''Logging setup shared by the command line and the library modules.'''

import logging
from typing import Union


PACKAGE_LOGGER_NAME = "tiphbar"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


class Logs(object):
    '''Owns the root logger handlers. Module loggers propagate up to them.'''

    def __init__(self) -> None:
        self.root = logging.getLogger()
        # Writes to stderr, warnings and above until `set_level` says otherwise.
        self.add_handler(logging.StreamHandler())

    def add_handler(self, handler: logging.Handler) -> None:
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        self.root.addHandler(handler)

    def add_file_output(self, path: str) -> logging.Handler:
        handler = logging.FileHandler(path, encoding='utf-8')
        self.add_handler(handler)
        return handler

    def get_logger(self, name: str) -> logging.Logger:
        return logging.getLogger(f"{PACKAGE_LOGGER_NAME}.{name}")

    def set_level(self, level: Union[str, int]) -> None:
        '''Takes a level name such as "info" in any case, or a `logging` level constant.'''
        if isinstance(level, str):
            level = level.upper()
        self.root.setLevel(level)


logs = Logs()
