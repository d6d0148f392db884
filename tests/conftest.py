from types import SimpleNamespace

import pytest
import pytest_asyncio

from fakes import FakeGuild, FakeTree
from utility.authorization import AuthorizationGate
from utility.directory import RoleResolver
from utility.role_store import RoleStore


@pytest_asyncio.fixture
async def store(tmp_path):
    role_store = RoleStore(str(tmp_path / "db" / "roles.db"))
    yield role_store
    await role_store.close()


@pytest.fixture
def resolver():
    return RoleResolver()


@pytest.fixture
def gate(store, resolver):
    return AuthorizationGate(store, resolver)


@pytest.fixture
def guild():
    return FakeGuild(id=42, name="Test Server")


@pytest.fixture
def bot(store, resolver, gate):
    """Stands in for RenamerBot: the attributes the cogs read from it."""
    return SimpleNamespace(role_store=store, role_resolver=resolver, gate=gate, tree=FakeTree())
