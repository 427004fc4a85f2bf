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
import os
from dataclasses import dataclass
from pathlib import Path


class PermissionDenied(RuntimeError):
    pass


class DirectoryCreationFailure(RuntimeError):
    pass


def canonicalize_path(path: str) -> Path:
    return Path(os.path.normpath(os.path.abspath(os.path.expanduser(path))))


@dataclass(frozen=True)
class JailTarget:
    dest_dir: Path

    @staticmethod
    def from_input(path: str) -> 'JailTarget':
        return JailTarget(canonicalize_path(path))

    @property
    def parent_dir(self) -> Path:
        return self.dest_dir.parent

    @property
    def write_target(self) -> Path:
        return self.dest_dir if self.dest_dir.exists() else self.parent_dir

    def has_parent(self) -> bool:
        return self.parent_dir.is_dir()

    def is_populated(self) -> bool:
        if not self.dest_dir.is_dir():
            return False
        try:
            return any(self.dest_dir.iterdir())
        except PermissionError as e:
            raise PermissionDenied(f'{self.dest_dir} is not readable') from e

    def create_parent(self) -> None:
        logging.getLogger('Target').debug(f'creating {self.parent_dir}')
        try:
            self.parent_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise DirectoryCreationFailure(f'cannot create {self.parent_dir}: {e.strerror}') from e

    def check_writable(self) -> None:
        if not self.has_parent():
            raise DirectoryCreationFailure(f'parent directory {self.parent_dir} does not exist')

        if self.dest_dir.exists() and not self.dest_dir.is_dir():
            raise DirectoryCreationFailure(f'{self.dest_dir} exists and is not a directory')

        if not os.access(self.write_target, os.W_OK):
            raise PermissionDenied(f'{self.write_target} is not writable')

    def __repr__(self) -> str:
        return str(self.dest_dir)
