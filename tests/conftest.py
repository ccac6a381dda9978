"""
General-purpose fixtures for davbook's testsuite.
"""
import logging
import os

import aiohttp
import click_log
import pytest
import pytest_asyncio
from aioresponses import aioresponses
from hypothesis import HealthCheck
from hypothesis import Verbosity
from hypothesis import settings

from davbook.session import DAVSession
from tests import BASE_URL


@pytest.fixture(autouse=True)
def setup_logging():
    click_log.basic_config("davbook").setLevel(logging.DEBUG)


settings.register_profile(
    "ci",
    settings(
        max_examples=1000,
        verbosity=Verbosity.verbose,
        suppress_health_check=[HealthCheck.too_slow],
    ),
)
settings.register_profile("dev", settings(suppress_health_check=[HealthCheck.too_slow]))

if os.environ.get("CI", "false").lower() == "true":
    settings.load_profile("ci")
else:
    settings.load_profile("dev")


@pytest_asyncio.fixture
async def aio_connector():
    async with aiohttp.TCPConnector(limit_per_host=16) as conn:
        yield conn


@pytest.fixture
def session(aio_connector):
    return DAVSession(BASE_URL, connector=aio_connector)


@pytest.fixture
def mocked():
    with aioresponses() as m:
        yield m
