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
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Iterable

from jailstrap.dists import ComponentStatus, DistributionComponent, ResolvedComponent


class Layout(ABC):
    """On-disk arrangement of distribution archives in a repository."""

    @abstractmethod
    def get_component_dir(self, repo_path: Path, component: DistributionComponent) -> Path:
        pass

    @abstractmethod
    def get_status(self, split: bool) -> ComponentStatus:
        pass

    def locate(self, repo_path: Path, component: DistributionComponent) -> ResolvedComponent | None:
        component_dir = self.get_component_dir(repo_path, component)

        tarball = component_dir / f'{component.basename}.tgz'
        first_shard = component_dir / f'{component.basename}.aa'

        if tarball.is_file():
            archive_path, split = tarball, False
        elif first_shard.is_file():
            archive_path, split = component_dir, True
        else:
            return None

        manifest_path = component_dir / f'{component.basename}.mtree'

        return ResolvedComponent(
            name=component.name,
            status=self.get_status(split),
            archive_path=archive_path,
            split=split,
            manifest_path=manifest_path if manifest_path.is_file() else None,
        )


class FlatLayout(Layout):
    def get_component_dir(self, repo_path: Path, component: DistributionComponent) -> Path:
        return (repo_path / component.name).parent

    def get_status(self, split: bool) -> ComponentStatus:
        return ComponentStatus.PRESENT_SPLIT if split else ComponentStatus.PRESENT_FLAT


class LegacySubdirLayout(Layout):
    # CD-ROM images keep distribution sets under dists/
    def get_component_dir(self, repo_path: Path, component: DistributionComponent) -> Path:
        return (repo_path / 'dists' / component.name).parent

    def get_status(self, split: bool) -> ComponentStatus:
        return ComponentStatus.PRESENT_LEGACY_SUBDIR


# in order of preference
DEFAULT_LAYOUTS: list[Layout] = [FlatLayout(), LegacySubdirLayout()]


def refresh_directory_listing(path: Path) -> None:
    # network filesystems may cache negative lookups; listing
    # directories makes the client revalidate them
    for child in path.iterdir():
        if child.is_dir():
            try:
                for _ in child.iterdir():
                    pass
            except OSError as e:
                logging.getLogger('Resolver').debug(f'cannot list {child}, skipping: {e.strerror}')


class RepositoryResolver:
    _logger = logging.getLogger('Resolver')

    _layouts: list[Layout]

    def __init__(self, layouts: list[Layout] | None = None) -> None:
        self._layouts = DEFAULT_LAYOUTS if layouts is None else layouts

    def resolve_component(self, component: DistributionComponent, repo_path: Path) -> ResolvedComponent | None:
        for layout in self._layouts:
            if (resolved := layout.locate(repo_path, component)) is not None:
                return resolved
        return None

    def resolve(self, components: Iterable[DistributionComponent], repo_path: Path) -> tuple[list[ResolvedComponent], list[DistributionComponent]]:
        self._logger.debug(f'refreshing directory listing of {repo_path}')
        refresh_directory_listing(repo_path)

        present: list[ResolvedComponent] = []
        missing: list[DistributionComponent] = []

        for component in components:
            if (resolved := self.resolve_component(component, repo_path)) is not None:
                self._logger.debug(f'component {resolved} found at {resolved.archive_path}')
                present.append(resolved)
            else:
                self._logger.debug(f'component {component} is missing')
                missing.append(component)

        return present, missing
