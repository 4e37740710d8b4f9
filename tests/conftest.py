from typing import Callable, Optional

import pytest

from ldapsource.connector import LdapSearchConnector
from ldapsource.resolvers import ConnectionParams
from ldapsource.resolvers.static import StaticResolver

from .mocks.ldap_mock import FakeConnection, FakeDirectory, FakeServer

ENDPOINTS = {
    "LDAP1": {
        "principal": "cn=admin,dc=example,dc=com",
        "credentials": "s3cret",
        "server_url": "ldap://ldap.example.com:389",
    }
}

GROUP_DNS = ["cn=grp1,dc=example,dc=com", "cn=grp2,dc=example,dc=com"]


@pytest.fixture
def params() -> ConnectionParams:
    return ConnectionParams(
        server_url="ldap://ldap.example.com:389",
        principal="cn=admin,dc=example,dc=com",
        credentials="s3cret",
    )


@pytest.fixture
def fake_ldap(monkeypatch) -> Callable[..., FakeDirectory]:
    """Return a factory that installs a FakeDirectory in place of ldap3.

    Usage in tests:
        directory = fake_ldap(entries=[...], fail_after=1)
    """

    def _install(**kwargs) -> FakeDirectory:
        directory = FakeDirectory(**kwargs)
        conn_cls = type("BoundFakeConnection", (FakeConnection,), {"directory": directory})
        monkeypatch.setattr("ldapsource.session.Server", FakeServer)
        monkeypatch.setattr("ldapsource.session.Connection", conn_cls)
        return directory

    return _install


@pytest.fixture
def make_connector():
    """Return a factory building a connector configured for LDAP1."""

    def _make(ldap_id: str = "LDAP1", extra: Optional[dict] = None) -> LdapSearchConnector:
        cfg = {"LDAP ID": ldap_id}
        cfg.update(extra or {})
        return LdapSearchConnector(cfg, resolver=StaticResolver(ENDPOINTS))

    return _make
