"""Test configuration and fixtures for resolverql."""
import logging

import pytest
from dotenv import load_dotenv

from resolverql import Loader, ResolverQLConfig, Service
from tests.schema import AddressResolver, MiscResolver, UserResolver

# Allow RESOLVERQL_* overrides from a local .env file
load_dotenv()


@pytest.fixture(autouse=True)
def resolverql_debug_logging(caplog):
    caplog.set_level(logging.DEBUG, logger="resolverql")
    yield


@pytest.fixture
def loader():
    return Loader(ResolverQLConfig())


@pytest.fixture
def user_resolver():
    return UserResolver()


@pytest.fixture
def address_resolver():
    return AddressResolver()


@pytest.fixture
def populated_loader(loader, user_resolver, address_resolver):
    loader.register_resolver(user_resolver)
    loader.register_resolver(address_resolver)
    loader.register_resolver(MiscResolver())
    return loader


@pytest.fixture
def service(populated_loader):
    return Service(populated_loader)
