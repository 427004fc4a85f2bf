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
import os
from pathlib import Path
from typing import Iterator, Mapping

import yaml
from pydantic import BaseModel, ConfigDict, ValidationError

from jailstrap.commands import DIALOG_CMD, MTREE_CMD, TAR_CMD

_logger = logging.getLogger('Config')

_TRUE_VALUES = {'yes', 'true', 'on', '1'}
_FALSE_VALUES = {'no', 'false', 'off', '0', ''}


class ConfigError(RuntimeError):
    pass


class Config(BaseModel):
    model_config = ConfigDict(extra='forbid')

    repos_dir: Path = Path('/usr/repos')
    jail_dir: Path = Path('/usr/jail')
    tmp_dir: Path = Path('/tmp')
    verbose: bool = False

    tar_cmd: str = TAR_CMD
    mtree_cmd: str = MTREE_CMD
    dialog_cmd: str = DIALOG_CMD


def _generate_config_paths() -> Iterator[Path]:
    jailstrap_conf = Path('jailstrap/jailstrap.conf')

    if (xdg_config_home := os.getenv('XDG_CONFIG_HOME')) is not None:
        yield Path(xdg_config_home) / jailstrap_conf

    if (home := os.getenv('HOME')) is not None:
        yield Path(home) / '.config' / jailstrap_conf

    etcdir = '%%ETCDIR%%'  # optionally replaced by the port
    if not etcdir.startswith('%'):
        yield Path(etcdir) / jailstrap_conf


def _parse_bool(name: str, value: str) -> bool:
    if value.lower() in _TRUE_VALUES:
        return True
    elif value.lower() in _FALSE_VALUES:
        return False
    raise ConfigError(f'{name} must be a boolean value, got {value!r}')


def load_config(path: Path | None) -> Config:
    if path is None:
        for candidate in _generate_config_paths():
            _logger.debug(f'looking for config in {candidate}')
            if candidate.exists():
                path = candidate
                break

    if path is None:
        return Config()

    try:
        with open(path) as f:
            _logger.debug(f'loading config from {path}')
            yaml_config = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        raise ConfigError(f'cannot read config {path}: {e}') from e

    if yaml_config is None:
        return Config()
    elif not isinstance(yaml_config, dict):
        raise ConfigError(f'config {path} must be a dictionary')

    try:
        return Config(**yaml_config)
    except ValidationError as e:
        raise ConfigError(f'bad config {path}: {e}') from e


def apply_environment(config: Config, environ: Mapping[str, str] | None = None) -> Config:
    if environ is None:
        environ = os.environ

    update: dict[str, object] = {}

    if (repos_dir := environ.get('JAILSTRAP_REPOSDIR')):
        update['repos_dir'] = Path(repos_dir)

    if (jail_dir := environ.get('JAILSTRAP_JAILDIR')):
        update['jail_dir'] = Path(jail_dir)

    if (tmp_dir := environ.get('TMPDIR')):
        update['tmp_dir'] = Path(tmp_dir)

    if (verbose := environ.get('JAILSTRAP_VERBOSE')) is not None:
        update['verbose'] = _parse_bool('JAILSTRAP_VERBOSE', verbose)

    for key, value in update.items():
        _logger.debug(f'{key} set from environment: {value}')

    return config.model_copy(update=update)


def validate_config(config: Config) -> None:
    if not config.repos_dir.exists():
        raise ConfigError(f'repository directory {config.repos_dir} does not exist')
    if not config.repos_dir.is_dir():
        raise ConfigError(f'repository directory {config.repos_dir} is not a directory')
    if not config.tmp_dir.is_dir():
        raise ConfigError(f'temporary directory {config.tmp_dir} does not exist or is not a directory')
