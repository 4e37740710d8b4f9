import logging

import pytest

from ldapsource.errors import DirectoryConnectionError, SearchError
from ldapsource.session import DirectorySession


def test_open_search_close(fake_ldap, params):
    directory = fake_ldap(entries=["cn=a,dc=x", "cn=b,dc=x"])
    session = DirectorySession.open(params)
    entries = list(session.search("dc=x", "(cn=*)"))
    session.close()

    assert [e["dn"] for e in entries] == ["cn=a,dc=x", "cn=b,dc=x"]
    assert session.closed
    assert directory.closed == 1


def test_search_is_lazy(fake_ldap, params):
    directory = fake_ldap(entries=["cn=a,dc=x"])
    with DirectorySession.open(params) as session:
        it = session.search("dc=x", "(cn=*)")
        assert directory.searches == []
        next(it)
        assert len(directory.searches) == 1


def test_close_is_idempotent(fake_ldap, params):
    directory = fake_ldap()
    session = DirectorySession.open(params)
    session.close()
    session.close()
    assert directory.closed == 1


def test_search_after_close_fails(fake_ldap, params):
    fake_ldap()
    session = DirectorySession.open(params)
    session.close()
    with pytest.raises(SearchError):
        list(session.search("dc=x", "(cn=*)"))


def test_bind_failure_raises_connection_error(fake_ldap, params):
    directory = fake_ldap(bind_ok=False)
    with pytest.raises(DirectoryConnectionError) as exc_info:
        DirectorySession.open(params)
    assert exc_info.value.code == 49
    assert "invalidCredentials" in str(exc_info.value)
    assert "s3cret" not in str(exc_info.value)
    assert directory.connections[0].unbind_calls == 1


def test_open_error_raises_connection_error(fake_ldap, params):
    fake_ldap(open_error=True)
    with pytest.raises(DirectoryConnectionError):
        DirectorySession.open(params)


def test_anonymous_bind_passes_no_credentials(fake_ldap):
    from ldapsource.resolvers import ConnectionParams

    directory = fake_ldap()
    DirectorySession.open(ConnectionParams(server_url="ldap://anon")).close()
    conn = directory.connections[0]
    assert conn.user is None
    assert conn.password is None
    assert conn.authentication == "ANONYMOUS"


def test_non_zero_result_raises_search_error(fake_ldap, params):
    fake_ldap(entries=["cn=a,dc=x"], search_code=32)
    with DirectorySession.open(params) as session:
        with pytest.raises(SearchError) as exc_info:
            list(session.search("ou=missing,dc=x", "(cn=*)"))
    assert exc_info.value.code == 32


def test_mid_stream_error_raises_search_error(fake_ldap, params):
    directory = fake_ldap(entries=["cn=a,dc=x", "cn=b,dc=x"], fail_after=1)
    seen = []
    with pytest.raises(SearchError):
        with DirectorySession.open(params) as session:
            for entry in session.search("dc=x", "(cn=*)"):
                seen.append(entry["dn"])
    assert seen == ["cn=a,dc=x"]
    assert directory.closed == 1


def test_context_manager_closes_on_error(fake_ldap, params):
    directory = fake_ldap()
    with pytest.raises(RuntimeError):
        with DirectorySession.open(params):
            raise RuntimeError("boom")
    assert directory.closed == 1


def test_server_info_is_not_read(fake_ldap, params):
    directory = fake_ldap()
    DirectorySession.open(params).close()
    assert directory.connections[0].server.get_info == "NO_INFO"


def test_referrals_are_not_followed(fake_ldap, params):
    directory = fake_ldap(entries=["cn=a,dc=x"], search_code=10)
    with DirectorySession.open(params) as session:
        with pytest.raises(SearchError) as exc_info:
            list(session.search("dc=x", "(cn=*)"))
    assert exc_info.value.code == 10
    assert directory.connections[0].auto_referrals is False
    assert len(directory.connections) == 1


def test_unbind_error_raises_connection_error(fake_ldap, params):
    directory = fake_ldap(unbind_error=True)
    session = DirectorySession.open(params)
    with pytest.raises(DirectoryConnectionError):
        session.close()
    assert session.closed
    session.close()
    assert directory.closed == 1


def test_unbind_error_does_not_mask_search_error(fake_ldap, params, caplog):
    fake_ldap(entries=["cn=a,dc=x"], fail_after=0, unbind_error=True)
    with caplog.at_level(logging.DEBUG, logger="ldapsource.session"):
        with pytest.raises(SearchError):
            with DirectorySession.open(params) as session:
                list(session.search("dc=x", "(cn=*)"))
    assert "ignoring close failure" in caplog.text
