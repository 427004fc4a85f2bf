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

import os
from pathlib import Path

import pytest

from jailstrap.jail import DirectoryCreationFailure, JailTarget, PermissionDenied, canonicalize_path


def test_canonicalize(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv('HOME', '/home/operator')

    assert canonicalize_path('/usr/jail//test1/') == Path('/usr/jail/test1')
    assert canonicalize_path('/usr/jail/../jail/test1') == Path('/usr/jail/test1')
    assert canonicalize_path('test1') == tmp_path / 'test1'
    assert canonicalize_path('~/jails/test1') == Path('/home/operator/jails/test1')


def test_parent(tmp_path):
    target = JailTarget.from_input(str(tmp_path / 'jails' / 'test1'))

    assert target.dest_dir == tmp_path / 'jails' / 'test1'
    assert target.parent_dir == tmp_path / 'jails'
    assert not target.has_parent()

    with pytest.raises(DirectoryCreationFailure):
        target.check_writable()

    target.create_parent()

    assert target.has_parent()
    assert target.write_target == tmp_path / 'jails'
    target.check_writable()


def test_existing_destination(tmp_path):
    target = JailTarget(tmp_path / 'test1')

    target.dest_dir.mkdir()
    assert target.write_target == target.dest_dir
    assert not target.is_populated()

    (target.dest_dir / 'COPYRIGHT').touch()
    assert target.is_populated()


def test_destination_is_file(tmp_path):
    (tmp_path / 'test1').touch()

    with pytest.raises(DirectoryCreationFailure):
        JailTarget(tmp_path / 'test1').check_writable()


def test_parent_creation_failure(tmp_path):
    (tmp_path / 'file').touch()

    with pytest.raises(DirectoryCreationFailure):
        JailTarget(tmp_path / 'file' / 'jails' / 'test1').create_parent()


@pytest.mark.skipif(os.getuid() == 0, reason='permission checks are bypassed for root')
def test_not_writable(tmp_path):
    readonly = tmp_path / 'readonly'
    readonly.mkdir()
    readonly.chmod(0o555)

    try:
        with pytest.raises(PermissionDenied):
            JailTarget(readonly / 'test1').check_writable()
    finally:
        readonly.chmod(0o755)


@pytest.mark.skipif(os.getuid() == 0, reason='permission checks are bypassed for root')
def test_destination_not_readable(tmp_path):
    dest = tmp_path / 'test1'
    dest.mkdir()
    dest.chmod(0o300)

    try:
        with pytest.raises(PermissionDenied):
            JailTarget(dest).is_populated()
    finally:
        dest.chmod(0o755)
