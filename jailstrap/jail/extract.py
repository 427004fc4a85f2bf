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
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Awaitable, Callable, Iterable

from jailstrap.config import Config
from jailstrap.dists import ResolvedComponent
from jailstrap.execute import execute
from jailstrap.jail import DirectoryCreationFailure

ExtractionStatus = Enum('ExtractionStatus', 'SUCCESS EXTRACT_FAILED MTREE_FAILED')

# replayed after all components are unpacked, relative to the jail root
FINAL_MANIFESTS = [
    ('BSD.root.dist', ''),
    ('BSD.var.dist', 'var'),
    ('BSD.usr.dist', 'usr'),
]

ProgressCallback = Callable[[ResolvedComponent], Awaitable[None]]


class ExtractionFailure(RuntimeError):
    status: ExtractionStatus
    returncode: int | None

    def __init__(self, message: str, status: ExtractionStatus, returncode: int | None = None) -> None:
        super().__init__(message)
        self.status = status
        self.returncode = returncode


@dataclass
class ComponentResult:
    component: ResolvedComponent
    status: ExtractionStatus
    returncode: int | None = 0
    details: str | None = None

    @property
    def success(self) -> bool:
        return self.status == ExtractionStatus.SUCCESS


@dataclass
class ManifestResult:
    manifest_path: Path
    root: Path
    # None when the root directory could not be created
    returncode: int | None

    @property
    def success(self) -> bool:
        return self.returncode == 0


@dataclass
class ExtractionReport:
    components: list[ComponentResult] = field(default_factory=list)
    manifests: list[ManifestResult] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return all(result.success for result in self.components) and all(result.success for result in self.manifests)


class JailExtractor:
    _logger = logging.getLogger('Extractor')

    _config: Config

    def __init__(self, config: Config) -> None:
        self._config = config

    def _tar_args(self, dest_dir: Path, archive: str) -> list[str]:
        # -U replaces existing files and symlinks instead of following them
        args = ['-x', '-p', '-U']
        if self._config.verbose:
            args.append('-v')
        return args + ['-f', archive, '-C', str(dest_dir)]

    async def unpack(self, component: ResolvedComponent, dest_dir: Path) -> None:
        if component.split:
            shards = component.shards
            if not shards:
                raise ExtractionFailure(f'no archive shards for {component.name} in {component.archive_path}', ExtractionStatus.EXTRACT_FAILED)
            self._logger.debug(f'unpacking {component.name} from {len(shards)} shard(s)')
            args = self._tar_args(dest_dir, '-')
        else:
            shards = []
            self._logger.debug(f'unpacking {component.name} from {component.archive_path}')
            args = self._tar_args(dest_dir, str(component.archive_path))

        try:
            returncode = await execute(self._config.tar_cmd, *args, input_files=shards, quiet=not self._config.verbose)
        except OSError as e:
            raise ExtractionFailure(f'cannot unpack {component.name}: {e}', ExtractionStatus.EXTRACT_FAILED) from e

        if returncode != 0:
            raise ExtractionFailure(f'{self._config.tar_cmd} failed for {component.name}', ExtractionStatus.EXTRACT_FAILED, returncode)

    async def replay_manifest(self, manifest_path: Path, root: Path) -> int:
        args = ['-U', '-e']
        if not self._config.verbose:
            args.append('-q')
        args += ['-f', str(manifest_path), '-p', str(root)]

        return await execute(self._config.mtree_cmd, *args, quiet=not self._config.verbose)

    async def extract_component(self, component: ResolvedComponent, dest_dir: Path) -> ComponentResult:
        try:
            await self.unpack(component, dest_dir)

            if component.manifest_path is not None:
                self._logger.debug(f'replaying {component.manifest_path}')
                try:
                    returncode = await self.replay_manifest(component.manifest_path, dest_dir)
                except OSError as e:
                    raise ExtractionFailure(f'cannot replay {component.manifest_path}: {e}', ExtractionStatus.MTREE_FAILED) from e
                if returncode != 0:
                    raise ExtractionFailure(f'{self._config.mtree_cmd} failed for {component.manifest_path}', ExtractionStatus.MTREE_FAILED, returncode)
        except ExtractionFailure as e:
            self._logger.error(str(e))
            return ComponentResult(component, e.status, e.returncode, str(e))

        self._logger.info(f'installed {component.label} ({component.name})')

        return ComponentResult(component, ExtractionStatus.SUCCESS)

    async def finalize(self, dest_dir: Path) -> list[ManifestResult]:
        res = []

        for manifest_name, subdir in FINAL_MANIFESTS:
            manifest_path = dest_dir / 'etc' / 'mtree' / manifest_name
            if not manifest_path.is_file():
                self._logger.debug(f'no {manifest_path}, skipping')
                continue

            root = dest_dir / subdir

            try:
                root.mkdir(parents=True, exist_ok=True)
            except OSError as e:
                self._logger.error(f'cannot create {root}: {e.strerror}')
                res.append(ManifestResult(manifest_path, root, None))
                continue

            self._logger.debug(f'replaying {manifest_path} in {root}')
            try:
                returncode = await self.replay_manifest(manifest_path, root)
            except OSError as e:
                self._logger.error(f'cannot run {self._config.mtree_cmd}: {e}')
                returncode = 127  # command not found, as reported by sh(1)

            if returncode != 0:
                self._logger.error(f'{self._config.mtree_cmd} failed for {manifest_path}')

            res.append(ManifestResult(manifest_path, root, returncode))

        return res

    async def extract(self, components: Iterable[ResolvedComponent], dest_dir: Path, progress: ProgressCallback | None = None) -> ExtractionReport:
        try:
            dest_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise DirectoryCreationFailure(f'cannot create {dest_dir}: {e.strerror}') from e

        report = ExtractionReport()

        # one at a time: sets populate overlapping directories
        for component in components:
            if progress is not None:
                await progress(component)
            report.components.append(await self.extract_component(component, dest_dir))

        report.manifests = await self.finalize(dest_dir)

        return report
