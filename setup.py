"""
davbook is an asynchronous CardDAV client library.
"""

from __future__ import annotations

import ast
import re

from setuptools import Command
from setuptools import find_packages
from setuptools import setup

requirements = [
    "click>=5.0,<9.0",
    "click-log>=0.3.0, <0.5.0",
    "requests >=2.20.0",
    "aiohttp>=3.9.0,<3.14.0",  # aioresponses 0.7.9 breaks on aiohttp 3.14
    "aiostream>=0.4.3,<0.5.0",
]

test_requirements = [
    "pytest",
    "pytest-asyncio",
    "aioresponses",
    "hypothesis",
]


class PrintRequirements(Command):
    description = "Prints minimal requirements"
    user_options: list = []

    def initialize_options(self):
        pass

    def finalize_options(self):
        pass

    def run(self):
        for requirement in requirements:
            print(requirement.replace(">", "=").replace(" ", ""))


_version_re = re.compile(r"__version__\s+=\s+(.*)")
with open("davbook/__init__.py", "rb") as f:
    version = str(
        ast.literal_eval(_version_re.search(f.read().decode("utf-8")).group(1))
    )

with open("README.rst") as f:
    long_description = f.read()


setup(
    # General metadata
    name="davbook",
    version=version,
    description="Asynchronous CardDAV client library",
    license="BSD",
    long_description=long_description,
    # Runtime dependencies
    install_requires=requirements,
    # Optional dependencies
    extras_require={
        "test": test_requirements,
    },
    # Other
    packages=find_packages(exclude=["tests.*", "tests"]),
    include_package_data=True,
    cmdclass={"minimal_requirements": PrintRequirements},
    entry_points={"console_scripts": ["davbook = davbook.cli:app"]},
    classifiers=[
        "Development Status :: 4 - Beta",
        "Environment :: Console",
        "License :: OSI Approved :: BSD License",
        "Operating System :: POSIX",
        "Programming Language :: Python :: 3",
        "Topic :: Internet",
        "Topic :: Utilities",
    ],
)
