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

import pytest

from jailstrap.dists.planner import BASE_RULES, KERNEL_RULES, apply_rules, parse_version, plan, plan_components

_EXTRAS = ['dict/dict', 'games/games', 'info/info', 'manpages/manpages', 'proflibs/proflibs']


def test_parse_version():
    assert parse_version('9.1') == (9, 1)
    assert parse_version('2.1.7.1') == (2, 1, 7, 1)
    assert parse_version('10.0') == (10, 0)
    assert parse_version('5.0-BETA') == (5,)
    assert parse_version('garbage') == ()


def test_first_release():
    assert plan('1.5') == ['tarballs/bindist/bin_tgz']
    assert plan('1.1.5.1') == ['tarballs/bindist/bin_tgz']


def test_2_0():
    assert plan('2.0.5') == ['bin/bin', 'compat1x/compat1x', 'compat20/compat20', 'des/des'] + _EXTRAS
    assert plan('2.0') == plan('2.0.5')


def test_2_1_7_1():
    assert plan('2.1.7.1') == ['bin/bin', 'compat1x/compat1x', 'compat20/compat20', 'des/des', 'doc/doc'] + _EXTRAS


def test_2_2():
    assert plan('2.2.8') == [
        'bin/bin', 'compat1x/compat1x', 'compat20/compat20', 'compat21/compat21', 'des/des', 'doc/doc'
    ] + _EXTRAS
    assert plan('2.1.7') == plan('2.2.8')


def test_3_0():
    assert plan('3.0') == [
        'bin/bin', 'compat1x/compat1x', 'compat20/compat20', 'compat21/compat21', 'des/des', 'doc/doc'
    ] + _EXTRAS


def test_3_x():
    assert plan('3.5.1') == ['bin/bin', 'compat1x/compat1x', 'compat22/compat22', 'des/des', 'doc/doc'] + _EXTRAS


def test_4_before_compat4x():
    for release in ['4.0', '4.1', '4.1.1', '4.2']:
        assert plan(release) == ['bin/bin', 'compat22/compat22', 'compat3x/compat3x', 'crypto/crypto', 'doc/doc'] + _EXTRAS


def test_4_3():
    assert plan('4.3') == [
        'bin/bin',
        'compat22/compat22',
        'compat3x/compat3x',
        'compat4x/compat4x',
        'crypto/crypto',
        'doc/doc',
        'dict/dict',
        'games/games',
        'info/info',
        'manpages/manpages',
        'proflibs/proflibs',
    ]


def test_5_x_crypto():
    for release in ['5.0', '5.1', '5.2', '5.2.1']:
        assert plan(release) == [
            'base/base', 'compat22/compat22', 'compat3x/compat3x', 'compat4x/compat4x', 'crypto/crypto', 'doc/doc'
        ] + _EXTRAS

    for release in ['5.3', '5.5']:
        assert plan(release) == [
            'base/base', 'compat22/compat22', 'compat3x/compat3x', 'compat4x/compat4x', 'doc/doc'
        ] + _EXTRAS


def test_6_kernels():
    assert 'kernels/generic' not in plan('6.0')
    assert 'kernels/smp' not in plan('6.0')

    assert plan('6.1') == ['base/base', 'doc/doc'] + _EXTRAS + ['kernels/generic', 'kernels/smp']
    assert plan('6.4') == plan('6.1')


@pytest.mark.parametrize('release', ['7.0', '8.4'])
def test_7_8(release):
    assert plan(release) == ['base/base', 'doc/doc'] + _EXTRAS + ['kernels/generic']


@pytest.mark.parametrize('release', ['9.0', '9.1', '10.0', '14.2', 'garbage', ''])
def test_future_fallback(release):
    assert plan(release) == ['base/base', 'doc/doc'] + _EXTRAS + ['kernels/generic']


def test_two_digit_major_is_not_first_release():
    # would match 1.x with naive string prefix comparison
    assert plan('10.1')[0] == 'base/base'
    assert plan('11.4')[0] == 'base/base'


def test_single_base():
    for release in ['1.0', '2.2', '3.1', '4.11', '5.4', '6.2', '7.1', '8.0', '9.1']:
        components = plan(release)
        assert sum(1 for name in components if name in ('tarballs/bindist/bin_tgz', 'bin/bin', 'base/base')) == 1
        assert len(set(components)) == len(components)


def test_rule_tables():
    assert apply_rules(BASE_RULES, (3, 4)) == ('bin/bin',)
    assert apply_rules(KERNEL_RULES, (6, 0)) == ()
    assert apply_rules(KERNEL_RULES, (6, 0, 1)) == ('kernels/generic', 'kernels/smp')
    assert apply_rules([], (9, 0)) == ()


def test_plan_components():
    components = plan_components('9.1')
    assert components[0].name == 'base/base'
    assert components[0].group == 'base'
    assert [component.name for component in components] == plan('9.1')
