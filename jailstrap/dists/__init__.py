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

from dataclasses import dataclass
from enum import Enum
from pathlib import Path

ComponentStatus = Enum('ComponentStatus', 'PRESENT_FLAT PRESENT_SPLIT PRESENT_LEGACY_SUBDIR MISSING')


@dataclass(frozen=True)
class DistributionComponent:
    name: str

    @property
    def group(self) -> str:
        return self.name.split('/', 1)[0]

    @property
    def label(self) -> str:
        return self.group if self.group != self.name else self.name

    @property
    def basename(self) -> str:
        return self.name.rsplit('/', 1)[-1]

    def __repr__(self) -> str:
        return self.name


@dataclass(frozen=True)
class ResolvedComponent(DistributionComponent):
    status: ComponentStatus
    # single .tgz file, or directory holding .?? shards when split
    archive_path: Path
    split: bool = False
    manifest_path: Path | None = None

    @property
    def shards(self) -> list[Path]:
        if not self.split:
            return [self.archive_path]
        return sorted(self.archive_path.glob(f'{self.basename}.??'), key=lambda path: path.name)

    def __repr__(self) -> str:
        return f'{self.name} ({self.status.name.lower().replace("_", "-")})'
