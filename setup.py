#!/usr/bin/env python3

from os import path

from setuptools import find_packages, setup

here = path.abspath(path.dirname(__file__))


def get_version():
    with open(path.join(here, 'jailstrap', '__init__.py')) as source:
        for line in source:
            if line.startswith('__version__'):
                return line.strip().split(' = ')[-1].strip("'")

    raise RuntimeError('Cannot determine package version from package source')


def get_long_description():
    try:
        return open(path.join(here, 'README.md')).read()
    except OSError:
        return None


setup(
    name='jailstrap',
    version=get_version(),
    description='Interactively build FreeBSD jails from local distribution repositories',
    long_description=get_long_description(),
    long_description_content_type='text/markdown',
    author='Dmitry Marakasov',
    author_email='amdmi3@amdmi3.ru',
    license='GPLv3+',
    classifiers=[
        'Environment :: Console :: Curses',
        'Intended Audience :: System Administrators',
        'License :: OSI Approved :: GNU General Public License v3 or later (GPLv3+)',
        'Operating System :: POSIX :: BSD :: FreeBSD',
        'Programming Language :: Python :: 3 :: Only',
        'Programming Language :: Python :: 3.10',
        'Topic :: System :: Archiving :: Packaging',
        'Topic :: System :: Installation/Setup',
    ],
    python_requires='>=3.10',
    install_requires=[
        'pydantic',
        'pyyaml',
        'termcolor',
    ],
    extras_require={
        'test': [
            'pytest',
            'pytest-asyncio',
        ],
    },
    packages=find_packages(include=['jailstrap*']),
    entry_points={
        'console_scripts': ['jailstrap=jailstrap.cli:main']
    }
)
