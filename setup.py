#!/usr/bin/env python3

# python setup.py sdist --format=zip,gztar

import os
import re
import sys

from setuptools import setup, find_packages

if sys.version_info[:3] < (3, 10, 0):
    sys.exit("Error: TipHBAR requires Python version >= 3.10.0...")

here = os.path.dirname(os.path.abspath(__file__))

def read_requirements(file_name):
    with open(os.path.join(here, 'contrib', 'requirements', file_name)) as f:
        return [ line for line in f.read().splitlines() if line and not line.startswith('#') ]

requirements = read_requirements('requirements.txt')
requirements_test = read_requirements('requirements-test.txt')

with open(os.path.join(here, 'tiphbar', 'version.py')) as f:
    version = re.search(r"^PACKAGE_VERSION\s*=\s*['\"]([^'\"]+)['\"]", f.read(), re.M).group(1)

setup(
    name="TipHBAR",
    version=version,
    python_requires=">=3.10",
    install_requires=requirements,
    extras_require={
        'test': requirements_test,
    },
    packages=find_packages(include=['tiphbar', 'tiphbar.*']),
    entry_points={
        'console_scripts': [
            'tiphbar=tiphbar.main:main',
        ],
    },
    description="Micro-tipping for creators on Hedera",
    author="The TipHBAR Developers",
    license="MIT Licence",
    long_description="""Micro-tipping for creators on Hedera, paid in HBAR"""
)
