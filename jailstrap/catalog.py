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
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator

_RELEASE_DIR_RE = re.compile(r'(.+)-(RELEASE|STABLE|CURRENT)')

_MAX_DEPTH = 2


class NoRepositoriesFound(RuntimeError):
    pass


@dataclass(frozen=True)
class ReleaseRepository:
    path: Path
    release_id: str
    branch: str

    @property
    def name(self) -> str:
        return self.path.name

    def __repr__(self) -> str:
        return f'{self.release_id}-{self.branch} at {self.path}'


def _parse_release_dir(path: Path) -> ReleaseRepository | None:
    match = _RELEASE_DIR_RE.fullmatch(path.name)
    if match is None:
        return None
    return ReleaseRepository(path=path, release_id=match.group(1), branch=match.group(2))


def _walk_directories(path: Path, depth: int) -> Iterator[Path]:
    yield path

    if depth < _MAX_DEPTH:
        try:
            children = sorted(child for child in path.iterdir() if child.is_dir())
        except PermissionError:
            logging.getLogger('Catalog').warning(f'cannot list {path}, skipping')
            return

        for child in children:
            yield from _walk_directories(child, depth + 1)


def enumerate_releases(repos_dir: Path) -> list[ReleaseRepository]:
    """Find release repositories under repos_dir.

    Directories up to two levels deep are considered, and those named
    like <version>-RELEASE, <version>-STABLE or <version>-CURRENT are
    returned ordered by path.
    """
    logger = logging.getLogger('Catalog')

    res = []

    for path in _walk_directories(repos_dir, 0):
        if (repository := _parse_release_dir(path)) is not None:
            logger.debug(f'found repository {repository}')
            res.append(repository)

    if not res:
        raise NoRepositoriesFound(f'no release repositories found in {repos_dir}')

    return sorted(res, key=lambda repository: str(repository.path))
