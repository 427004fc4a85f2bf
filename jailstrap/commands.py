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

import sys

DIALOG_CMD = 'dialog'

if sys.platform.startswith('freebsd'):
    TAR_CMD = 'tar'
    MTREE_CMD = 'mtree'
else:
    # on Linux, tar is usually GNU tar while we need bsdtar, and
    # BSD mtree is packaged as fmtree
    TAR_CMD = 'bsdtar'
    MTREE_CMD = 'fmtree'
