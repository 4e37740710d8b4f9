"""Concurrent searches on one connector must each use their own session."""

from concurrent.futures import ThreadPoolExecutor

from .conftest import GROUP_DNS

FILTER = {"Base DN": "dc=example,dc=com", "Filter": "(objectClass=group)"}


def test_concurrent_retrieve_values(fake_ldap, make_connector):
    directory = fake_ldap(entries=GROUP_DNS)
    c = make_connector()

    with ThreadPoolExecutor(max_workers=8) as pool:
        results = list(pool.map(lambda _: c.retrieve_values([], FILTER), range(40)))

    assert all(r == {"searchResult": GROUP_DNS} for r in results)
    assert len(directory.connections) == 40
    assert len({id(conn) for conn in directory.connections}) == 40
    assert directory.opened == directory.closed == 40


def test_concurrent_failures_do_not_leak(fake_ldap, make_connector):
    directory = fake_ldap(entries=GROUP_DNS, fail_after=1)
    c = make_connector()

    with ThreadPoolExecutor(max_workers=8) as pool:
        results = list(pool.map(lambda _: c.retrieve_values([], FILTER), range(20)))

    assert results == [{}] * 20
    assert directory.opened == directory.closed == 20
