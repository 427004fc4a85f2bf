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

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Sequence


class UserCancelled(RuntimeError):
    pass


@dataclass(frozen=True)
class TreeNode:
    tag: str
    label: str
    depth: int = 0


class Prompter(ABC):
    """Modal operator dialogs.

    Methods return None (False for yesno and tree) when the
    operator cancels the dialog.
    """

    @abstractmethod
    async def infobox(self, title: str, message: str) -> None:
        pass

    @abstractmethod
    async def menu(self, title: str, hint: str, options: Sequence[tuple[str, str]]) -> str | None:
        pass

    @abstractmethod
    async def inputbox(self, title: str, prompt: str, default: str = '') -> str | None:
        pass

    @abstractmethod
    async def yesno(self, title: str, message: str) -> bool:
        pass

    @abstractmethod
    async def tree(self, title: str, hint: str, nodes: Sequence[TreeNode]) -> bool:
        pass
