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

import os
from dataclasses import dataclass
from pathlib import Path

import pytest

from jailstrap.config import Config

# Fake tar: archives are plain lists of paths, one per line, which
# are created as empty files under the -C directory
_FAKE_TAR = """#!/bin/sh
echo "$*" >> "{log}"
if [ -n "$FAKE_TAR_FAIL" ]; then
    case "$*" in *"$FAKE_TAR_FAIL"*) exit 2 ;; esac
fi
archive=
dest=
while [ $# -gt 0 ]; do
    case "$1" in
        -f) archive="$2"; shift ;;
        -C) dest="$2"; shift ;;
    esac
    shift
done
[ "$archive" = - ] && archive=/dev/stdin
while read -r entry; do
    mkdir -p "$dest/$(dirname "$entry")"
    : > "$dest/$entry"
done < "$archive"
"""

_FAKE_MTREE = """#!/bin/sh
echo "$*" >> "{log}"
if [ -n "$FAKE_MTREE_FAIL" ]; then
    case "$*" in *"$FAKE_MTREE_FAIL"*) exit 2 ;; esac
fi
exit 0
"""


def _read_lines(path: Path) -> list[str]:
    if not path.exists():
        return []
    with open(path) as fd:
        return fd.read().splitlines()


@dataclass
class FakeTools:
    tar_path: Path
    mtree_path: Path
    tar_log: Path
    mtree_log: Path

    def tar_calls(self) -> list[str]:
        return _read_lines(self.tar_log)

    def mtree_calls(self) -> list[str]:
        return _read_lines(self.mtree_log)


def _write_script(path: Path, text: str) -> None:
    with open(path, 'w') as fd:
        fd.write(text)
    os.chmod(path, 0o755)


def write_archive(path: Path, *entries: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, 'w') as fd:
        fd.write(''.join(f'{entry}\n' for entry in entries))


@pytest.fixture
def fake_tools(tmp_path) -> FakeTools:
    bindir = tmp_path / 'bin'
    bindir.mkdir()

    tools = FakeTools(
        tar_path=bindir / 'tar',
        mtree_path=bindir / 'mtree',
        tar_log=bindir / 'tar.log',
        mtree_log=bindir / 'mtree.log',
    )

    _write_script(tools.tar_path, _FAKE_TAR.format(log=tools.tar_log))
    _write_script(tools.mtree_path, _FAKE_MTREE.format(log=tools.mtree_log))

    return tools


@pytest.fixture
def config(tmp_path, fake_tools) -> Config:
    repos_dir = tmp_path / 'repos'
    scratch_dir = tmp_path / 'scratch'

    repos_dir.mkdir()
    scratch_dir.mkdir()

    return Config(
        repos_dir=repos_dir,
        jail_dir=tmp_path / 'jails',
        tmp_dir=scratch_dir,
        tar_cmd=str(fake_tools.tar_path),
        mtree_cmd=str(fake_tools.mtree_path),
    )
