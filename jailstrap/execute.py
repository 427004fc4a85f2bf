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

import asyncio
import logging
import time
import traceback
from collections import defaultdict
from dataclasses import dataclass
from pathlib import Path
from typing import Sequence

_logger = logging.getLogger('Execute')

_CHUNK_SIZE = 1024 * 64


@dataclass
class _ExecStatistics:
    total_duration: float = 0.0
    calls: int = 0

    @property
    def avg_duration(self) -> float:
        return self.total_duration / self.calls if self.calls else 0.0


_statistics: dict[str, _ExecStatistics] = defaultdict(_ExecStatistics)


def register_execute_time(duration: float) -> None:
    for frame in reversed(traceback.extract_stack()):
        if frame.name not in ['register_execute_time', 'execute']:
            filename = frame.filename.rsplit('jailstrap/', 1)[-1]
            statistics = _statistics[f'{filename}:{frame.lineno}']
            statistics.total_duration += duration
            statistics.calls += 1
            return


def log_execute_time_statistics() -> None:
    logger = logging.getLogger('ExecuteTiming')

    logger.debug(' TOTAL CALLS    AVG CALLER')
    for pos, stats in sorted(_statistics.items(), key=lambda kv: kv[1].total_duration, reverse=True):
        logger.debug(f'{stats.total_duration:6.2f} {stats.calls:5} {stats.avg_duration:6.2f} {pos}')


async def _feed_input(stream: asyncio.StreamWriter, input_files: Sequence[Path]) -> None:
    try:
        for path in input_files:
            with open(path, 'rb') as fd:
                while chunk := fd.read(_CHUNK_SIZE):
                    stream.write(chunk)
                    await stream.drain()
    except (BrokenPipeError, ConnectionResetError):
        _logger.debug('process closed its input before all data was written')


async def execute(program: str, *args: str, input_files: Sequence[Path] = (), quiet: bool = False) -> int:
    """Run external program and return its exit status.

    When input_files are given, their contents are concatenated in the
    given order and fed to the program's standard input. In quiet mode
    both output streams of the program are discarded, otherwise they
    are inherited from the calling process.
    """
    _logger.debug(' '.join([program] + list(args)) + (' < ' + ' '.join(map(str, input_files)) if input_files else ''))

    start = time.monotonic()

    proc = await asyncio.create_subprocess_exec(
        program, *args,
        stdin=asyncio.subprocess.PIPE if input_files else asyncio.subprocess.DEVNULL,
        stdout=asyncio.subprocess.DEVNULL if quiet else None,
        stderr=asyncio.subprocess.DEVNULL if quiet else None,
    )

    try:
        if input_files:
            assert proc.stdin is not None
            try:
                await _feed_input(proc.stdin, input_files)
            finally:
                proc.stdin.close()
    finally:
        returncode = await proc.wait()
        register_execute_time(time.monotonic() - start)

    _logger.debug(f'{program} exited with status {returncode}')

    return returncode
