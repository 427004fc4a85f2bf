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
import os
import tempfile
from typing import Sequence

from jailstrap.config import Config
from jailstrap.prompter import Prompter, TreeNode

_DIALOG_OK = 0
_DIALOG_CANCEL = 1
_DIALOG_ESC = 255

# let dialog pick dimensions to fit the contents
_AUTO_SIZE = ('0', '0')


class PrompterFailure(RuntimeError):
    pass


class DialogPrompter(Prompter):
    _logger = logging.getLogger('Dialog')

    _config: Config

    def __init__(self, config: Config) -> None:
        self._config = config

    async def _run(self, title: str, *widget: str) -> tuple[bool, str]:
        self._logger.debug(f'{self._config.dialog_cmd} {widget[0]} "{title}"')

        # dialog draws on the terminal and reports answers on stderr
        fd, output_path = tempfile.mkstemp(prefix='jailstrap.', dir=self._config.tmp_dir)
        try:
            with os.fdopen(fd, 'w') as output:
                proc = await asyncio.create_subprocess_exec(
                    self._config.dialog_cmd, '--title', title, *widget,
                    stderr=output,
                )
                returncode = await proc.wait()

            with open(output_path) as output:
                answer = output.read()
        finally:
            os.unlink(output_path)

        if returncode == _DIALOG_OK:
            return True, answer
        elif returncode in (_DIALOG_CANCEL, _DIALOG_ESC):
            self._logger.debug('dialog cancelled')
            return False, ''

        raise PrompterFailure(f'{self._config.dialog_cmd} failed with status {returncode}: {answer.strip()}')

    async def infobox(self, title: str, message: str) -> None:
        await self._run(title, '--infobox', message, *_AUTO_SIZE)

    async def menu(self, title: str, hint: str, options: Sequence[tuple[str, str]]) -> str | None:
        items = [item for option in options for item in option]
        ok, answer = await self._run(title, '--menu', hint, *_AUTO_SIZE, '0', *items)
        return answer.strip() if ok else None

    async def inputbox(self, title: str, prompt: str, default: str = '') -> str | None:
        ok, answer = await self._run(title, '--inputbox', prompt, *_AUTO_SIZE, default)
        return answer.strip() if ok else None

    async def yesno(self, title: str, message: str) -> bool:
        ok, _ = await self._run(title, '--yesno', message, *_AUTO_SIZE)
        return ok

    async def tree(self, title: str, hint: str, nodes: Sequence[TreeNode]) -> bool:
        items = []
        for n, node in enumerate(nodes):
            items += [node.tag, node.label, 'on' if n == 0 else 'off', str(node.depth)]
        ok, _ = await self._run(title, '--treeview', hint, *_AUTO_SIZE, '0', *items)
        return ok
