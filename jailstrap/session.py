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
from enum import Enum
from pathlib import Path

from jailstrap.catalog import ReleaseRepository, enumerate_releases
from jailstrap.config import Config
from jailstrap.dists import ComponentStatus, DistributionComponent, ResolvedComponent
from jailstrap.dists.planner import plan_components
from jailstrap.dists.resolver import RepositoryResolver
from jailstrap.jail import JailTarget
from jailstrap.jail.extract import ExtractionReport, JailExtractor
from jailstrap.prompter import Prompter, TreeNode, UserCancelled

SessionState = Enum('SessionState', 'SELECTING_REPOSITORY ENTERING_DESTINATION RESOLVING_COMPONENTS REVIEWING_PLAN CONFIRMING_EXTRACTION EXTRACTING DONE ABORTED')

_TITLE = 'Jail installation'

_STATUS_LABELS = {
    ComponentStatus.PRESENT_FLAT: 'present',
    ComponentStatus.PRESENT_SPLIT: 'present (split)',
    ComponentStatus.PRESENT_LEGACY_SUBDIR: 'present (dists/)',
    ComponentStatus.MISSING: 'missing',
}


class NothingToInstall(RuntimeError):
    pass


def _get_repository_tag(repository: ReleaseRepository, repos_dir: Path) -> str:
    if repository.path == repos_dir:
        return repository.name
    return str(repository.path.relative_to(repos_dir))


def build_review_nodes(present: list[ResolvedComponent], missing: list[DistributionComponent]) -> list[TreeNode]:
    return [
        TreeNode(component.name, _STATUS_LABELS[ComponentStatus.MISSING])
        for component in missing
    ] + [
        TreeNode(component.name, _STATUS_LABELS[component.status])
        for component in present
    ]


class Session:
    _logger = logging.getLogger('Session')

    _config: Config
    _prompter: Prompter
    _resolver: RepositoryResolver
    _extractor: JailExtractor

    state: SessionState

    def __init__(self, config: Config, prompter: Prompter, resolver: RepositoryResolver | None = None, extractor: JailExtractor | None = None) -> None:
        self._config = config
        self._prompter = prompter
        self._resolver = resolver if resolver is not None else RepositoryResolver()
        self._extractor = extractor if extractor is not None else JailExtractor(config)
        self.state = SessionState.SELECTING_REPOSITORY

    def _enter(self, state: SessionState) -> None:
        self._logger.debug(f'{self.state.name} -> {state.name}')
        self.state = state

    async def select_repository(self) -> ReleaseRepository:
        repositories = enumerate_releases(self._config.repos_dir)

        by_tag = {_get_repository_tag(repository, self._config.repos_dir): repository for repository in repositories}

        tag = await self._prompter.menu(
            _TITLE,
            'Choose the release to install the jail from',
            [(tag, f'FreeBSD {repository.release_id}-{repository.branch}') for tag, repository in by_tag.items()],
        )

        if tag is None or tag not in by_tag:
            raise UserCancelled('no repository selected')

        self._logger.info(f'using repository {by_tag[tag]}')

        return by_tag[tag]

    async def enter_destination(self) -> JailTarget:
        answer = await self._prompter.inputbox(
            _TITLE,
            'Enter the directory to install the jail into',
            f'{self._config.jail_dir}/',
        )

        if not answer:
            raise UserCancelled('no destination entered')

        target = JailTarget.from_input(answer)

        if not target.has_parent():
            if not await self._prompter.yesno(_TITLE, f'Directory {target.parent_dir} does not exist. Create it?'):
                raise UserCancelled(f'creation of {target.parent_dir} declined')
            target.create_parent()

        if target.is_populated():
            if not await self._prompter.yesno(_TITLE, f'Directory {target.dest_dir} is not empty. Install over its contents?'):
                raise UserCancelled(f'installation over existing {target.dest_dir} declined')

        target.check_writable()

        self._logger.info(f'installing into {target}')

        return target

    async def resolve_components(self, repository: ReleaseRepository) -> tuple[list[ResolvedComponent], list[DistributionComponent]]:
        await self._prompter.infobox(_TITLE, f'Looking for distribution sets in {repository.path}...')

        present, missing = self._resolver.resolve(plan_components(repository.release_id), repository.path)

        if missing:
            self._logger.info(f'missing distribution sets: {", ".join(component.name for component in missing)}')

        if not present:
            raise NothingToInstall(f'no distribution sets for {repository.release_id} found in {repository.path}')

        return present, missing

    async def review_plan(self, repository: ReleaseRepository, present: list[ResolvedComponent], missing: list[DistributionComponent]) -> None:
        hint = f'{len(present)} of {len(present) + len(missing)} distribution sets of FreeBSD {repository.release_id} are available'

        if not await self._prompter.tree(_TITLE, hint, build_review_nodes(present, missing)):
            raise UserCancelled('plan rejected')

    async def confirm_extraction(self, target: JailTarget, present: list[ResolvedComponent]) -> None:
        if not await self._prompter.yesno(_TITLE, f'Unpack {len(present)} distribution set(s) into {target.dest_dir}?'):
            raise UserCancelled('extraction declined')

    async def _show_progress(self, component: ResolvedComponent) -> None:
        await self._prompter.infobox(_TITLE, f'Unpacking {component.label}...')

    async def extract(self, target: JailTarget, present: list[ResolvedComponent]) -> ExtractionReport:
        report = await self._extractor.extract(present, target.dest_dir, progress=self._show_progress)

        if report.success:
            self._logger.info(f'jail installed into {target}')
        else:
            self._logger.warning(f'jail installed into {target} with errors')

        return report

    async def run(self, dry_run: bool = False) -> ExtractionReport | None:
        try:
            self._enter(SessionState.SELECTING_REPOSITORY)
            repository = await self.select_repository()

            self._enter(SessionState.ENTERING_DESTINATION)
            target = await self.enter_destination()

            self._enter(SessionState.RESOLVING_COMPONENTS)
            present, missing = await self.resolve_components(repository)

            self._enter(SessionState.REVIEWING_PLAN)
            await self.review_plan(repository, present, missing)

            if dry_run:
                self._logger.info('dry run, not installing anything')
                self._enter(SessionState.DONE)
                return None

            self._enter(SessionState.CONFIRMING_EXTRACTION)
            await self.confirm_extraction(target, present)

            self._enter(SessionState.EXTRACTING)
            report = await self.extract(target, present)
        except Exception:
            self._enter(SessionState.ABORTED)
            raise

        self._enter(SessionState.DONE)

        return report
