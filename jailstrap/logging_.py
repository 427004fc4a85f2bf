# Copyright (C) 2022 Dmitry Marakasov <amdmi3@amdmi3.ru>
#
# This file is part of jailstrap
#
# jailstrap is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# jailstrap is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.
#
# You should have received a copy of the GNU General Public License
# along with jailstrap.  If not, see <http://www.gnu.org/licenses/>.

from __future__ import annotations

import logging
import time
from pathlib import Path


def _format_seconds(secs: float) -> str:
    seconds = int(secs) % 60
    minutes = int(secs) // 60 % 60
    hour = int(secs) // 3600
    return f'{hour:02}:{minutes:02}:{seconds:02}'


def _format_level(record: logging.LogRecord) -> str:
    return f'{record.levelname.lower()}: ' if record.levelno >= logging.WARNING else ''


class ElapsedFormatter(logging.Formatter):
    _start_time: float

    def __init__(self) -> None:
        self._start_time = time.time()

    def format(self, record: logging.LogRecord) -> str:  # noqa
        elapsed = _format_seconds(record.created - self._start_time)
        return f'[{elapsed}] {_format_level(record)}{record.getMessage()}'


class DebugElapsedFormatter(ElapsedFormatter):
    def format(self, record: logging.LogRecord) -> str:  # noqa
        elapsed = _format_seconds(record.created - self._start_time)
        message = f'[{elapsed}] {record.name:9} {_format_level(record)}{record.getMessage()}'
        if record.exc_info:
            message += '\n' + self.formatException(record.exc_info)
        return message


def setup_logging(debug: bool, log_path: Path | None = None) -> None:
    # dialog owns the terminal while the session runs, so a log
    # file may be requested to keep messages off the screen
    handler: logging.Handler = logging.FileHandler(log_path) if log_path is not None else logging.StreamHandler()
    handler.setFormatter(DebugElapsedFormatter() if debug else ElapsedFormatter())
    logging.getLogger().addHandler(handler)
    logging.getLogger().setLevel(logging.DEBUG if debug else logging.INFO)
