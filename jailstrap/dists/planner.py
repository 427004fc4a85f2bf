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

"""Distribution sets expected in historical FreeBSD releases.

Each aspect of a release (base system, compatibility libraries,
cryptography, documentation, extras and kernels) has its own table
of rules. Rules in a table are checked top to bottom and the first
one matching the release version contributes its components. The
last rule of each table matches anything, so releases newer than
the ones known here get the newest known set of components.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable

from jailstrap.dists import DistributionComponent

Version = tuple[int, ...]
VersionPredicate = Callable[[Version], bool]


def parse_version(release_id: str) -> Version:
    parts = []
    for part in release_id.split('.'):
        if not part.isdecimal():
            break
        parts.append(int(part))
    return tuple(parts)


def _major(*majors: int) -> VersionPredicate:
    def predicate(version: Version) -> bool:
        return bool(version) and version[0] in majors
    return predicate


def _prefix(*parts: int) -> VersionPredicate:
    def predicate(version: Version) -> bool:
        return version[:len(parts)] == parts
    return predicate


def _exact(*parts: int) -> VersionPredicate:
    def predicate(version: Version) -> bool:
        return version == parts
    return predicate


def _any_of(*predicates: VersionPredicate) -> VersionPredicate:
    def predicate(version: Version) -> bool:
        return any(p(version) for p in predicates)
    return predicate


def _always(version: Version) -> bool:
    return True


@dataclass(frozen=True)
class Rule:
    predicate: VersionPredicate
    components: tuple[str, ...]

    def matches(self, version: Version) -> bool:
        return self.predicate(version)


BASE_RULES = [
    Rule(_major(1), ('tarballs/bindist/bin_tgz',)),
    Rule(_major(2, 3, 4), ('bin/bin',)),
    Rule(_major(5, 6, 7, 8), ('base/base',)),
    Rule(_always, ('base/base',)),
]

COMPAT_RULES = [
    Rule(_any_of(_prefix(2, 0), _exact(2, 1, 7, 1)), ('compat1x/compat1x', 'compat20/compat20')),
    Rule(_any_of(_major(2), _exact(3, 0)), ('compat1x/compat1x', 'compat20/compat20', 'compat21/compat21')),
    Rule(_major(3), ('compat1x/compat1x', 'compat22/compat22')),
    # compat4x first appeared in 4.3
    Rule(_any_of(_prefix(4, 0), _prefix(4, 1), _prefix(4, 2)), ('compat22/compat22', 'compat3x/compat3x')),
    Rule(_major(4, 5), ('compat22/compat22', 'compat3x/compat3x', 'compat4x/compat4x')),
    Rule(_always, ()),
]

CRYPTO_RULES = [
    Rule(_major(2, 3), ('des/des',)),
    Rule(_any_of(_major(4), _prefix(5, 0), _prefix(5, 1), _prefix(5, 2)), ('crypto/crypto',)),
    # merged into base since 5.3
    Rule(_always, ()),
]

DOC_RULES = [
    Rule(_any_of(_major(1), _prefix(2, 0)), ()),
    Rule(_always, ('doc/doc',)),
]

EXTRA_RULES = [
    Rule(_major(1), ()),
    Rule(_always, ('dict/dict', 'games/games', 'info/info', 'manpages/manpages', 'proflibs/proflibs')),
]

KERNEL_RULES = [
    Rule(_any_of(_major(1, 2, 3, 4, 5), _exact(6, 0)), ()),
    Rule(_major(6), ('kernels/generic', 'kernels/smp')),
    Rule(_always, ('kernels/generic',)),
]

RULE_TABLES = [
    ('base', BASE_RULES),
    ('compat', COMPAT_RULES),
    ('crypto', CRYPTO_RULES),
    ('doc', DOC_RULES),
    ('extra', EXTRA_RULES),
    ('kernel', KERNEL_RULES),
]


def apply_rules(rules: list[Rule], version: Version) -> tuple[str, ...]:
    for rule in rules:
        if rule.matches(version):
            return rule.components
    return ()


def plan(release_id: str) -> list[str]:
    logger = logging.getLogger('Planner')

    version = parse_version(release_id)

    res: list[str] = []

    for table_name, rules in RULE_TABLES:
        components = apply_rules(rules, version)
        logger.debug(f'{table_name} components for {release_id}: {", ".join(components) or "none"}')
        res.extend(components)

    return res


def plan_components(release_id: str) -> list[DistributionComponent]:
    return [DistributionComponent(name) for name in plan(release_id)]
