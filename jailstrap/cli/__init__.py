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

import argparse
import asyncio
import sys
from pathlib import Path
from typing import Any, Sequence

import termcolor

from jailstrap.catalog import NoRepositoriesFound
from jailstrap.config import Config, ConfigError, apply_environment, load_config, validate_config
from jailstrap.execute import log_execute_time_statistics
from jailstrap.jail import DirectoryCreationFailure, PermissionDenied
from jailstrap.jail.extract import ExtractionReport, ExtractionStatus
from jailstrap.logging_ import setup_logging
from jailstrap.prompter import UserCancelled
from jailstrap.prompter.dialog import DialogPrompter, PrompterFailure
from jailstrap.session import NothingToInstall, Session


class _Formatter(argparse.RawDescriptionHelpFormatter):
    def _fill_text(self, text: str, width: int, indent: str) -> str:
        # limit to 80 chars
        return argparse.HelpFormatter._fill_text(self, text, 80, indent)


def create_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        formatter_class=_Formatter,
        description='Interactively install a FreeBSD jail from a local release repository.',
        epilog="""
        Defaults may be set with JAILSTRAP_REPOSDIR (/usr/repos),
        JAILSTRAP_JAILDIR (/usr/jail), JAILSTRAP_VERBOSE and TMPDIR
        environment variables, or in jailstrap.conf.
        """,
        add_help=False
    )

    group = parser.add_argument_group('General')
    group.add_argument('-h', '--help', action='store_true', help='Show this help message and exit')
    group.add_argument('-v', '--verbose', dest='verbosity', action='append_const', const='verbose', help='List files while unpacking and show tool output')
    group.add_argument('-q', '--quiet', dest='verbosity', action='append_const', const='quiet', help="Suppress tool output and don't print summaries")
    group.add_argument('-d', '--debug', action='store_true', help='Enable debug logging')
    group.add_argument('-n', '--dry-run', action='store_true', help="Stop after reviewing the distribution sets, don't install anything")
    group.add_argument('-c', '--config', metavar='PATH', type=Path, help='Path to configuration file')
    group.add_argument('--log', metavar='PATH', type=Path, help='Write log messages to file instead of the terminal')

    return parser


def parse_arguments(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = create_parser()

    args = parser.parse_args(argv)

    if args.help:
        parser.print_help(sys.stderr)
        sys.exit(1)

    return args


def build_config(args: argparse.Namespace) -> Config:
    config = apply_environment(load_config(args.config))

    if args.verbosity:
        config = config.model_copy(update={'verbose': args.verbosity[-1] == 'verbose'})

    validate_config(config)

    return config


def not_colored(message: str, *args: Any, **kwargs: Any) -> str:
    return message


def print_error(message: str) -> None:
    colored = termcolor.colored if sys.stderr.isatty() else not_colored
    print(colored(f'error: {message}', 'red'), file=sys.stderr)  # type: ignore


def print_results(report: ExtractionReport) -> None:
    colored = termcolor.colored if sys.stdout.isatty() else not_colored

    print('Distribution sets:')
    for result in report.components:
        if result.status == ExtractionStatus.SUCCESS:
            status = colored('       SUCCESS', 'green')  # type: ignore
        elif result.status == ExtractionStatus.EXTRACT_FAILED:
            status = colored('EXTRACT FAILED', 'red')  # type: ignore
        elif result.status == ExtractionStatus.MTREE_FAILED:
            status = colored('  MTREE FAILED', 'yellow')  # type: ignore
        else:
            status = colored('       UNKNOWN', 'magenta')  # type: ignore

        code_message = f', exit status {result.returncode}' if result.returncode else ''
        print(f'{status} {result.component.name}{code_message}')

    if report.manifests:
        print('Directory structure:')
    for manifest in report.manifests:
        if manifest.success:
            status = colored('       SUCCESS', 'green')  # type: ignore
        else:
            status = colored('  MTREE FAILED', 'yellow')  # type: ignore
        print(f'{status} {manifest.manifest_path.name} in {manifest.root}')

    num_successes = sum(1 for result in report.components if result.success)

    print(colored(f'{num_successes}/{len(report.components)}', 'green' if report.success else 'red'), 'distribution sets installed')  # type: ignore


async def amain(argv: Sequence[str] | None = None) -> None:
    args = parse_arguments(argv)

    setup_logging(args.debug, args.log)

    quiet = bool(args.verbosity) and args.verbosity[-1] == 'quiet'

    try:
        config = build_config(args)

        report = await Session(config, DialogPrompter(config)).run(dry_run=args.dry_run)
    except UserCancelled:
        print('installation cancelled', file=sys.stderr)
        sys.exit(1)
    except (ConfigError, NoRepositoriesFound, NothingToInstall, DirectoryCreationFailure, PermissionDenied, PrompterFailure) as e:
        print_error(str(e))
        sys.exit(1)

    if report is not None and not quiet:
        print_results(report)

    log_execute_time_statistics()

    sys.exit(0)


def main() -> None:
    asyncio.run(amain())


if __name__ == '__main__':
    main()
