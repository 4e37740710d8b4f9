from fastapi.testclient import TestClient

from ldapsource.api import create_app

from .conftest import GROUP_DNS


def _client(make_connector, ldap_id="LDAP1"):
    return TestClient(create_app(make_connector(ldap_id)))


def test_fields_and_descriptor(make_connector):
    client = _client(make_connector)
    assert client.get("/fields").json() == {"fields": ["searchResult"]}
    d = client.get("/descriptor").json()
    assert d["type"] == "Custom LDAP Data Store"
    assert [f["name"] for f in d["filter"]["fields"]] == ["Base DN", "Filter"]


def test_health(make_connector):
    assert _client(make_connector).get("/health").json() == {"available": True}
    assert _client(make_connector, "BAD_ID").get("/health").json() == {"available": False}


def test_search(fake_ldap, make_connector):
    directory = fake_ldap(entries=GROUP_DNS)
    resp = _client(make_connector).post(
        "/search",
        json={
            "fields": ["searchResult"],
            "filter": {"Base DN": "dc=example,dc=com", "Filter": "(member={{ dn }})"},
            "variables": {"dn": "cn=alice,dc=example,dc=com"},
        },
    )
    assert resp.status_code == 200
    assert resp.json() == {"searchResult": GROUP_DNS}
    assert directory.searches[0]["search_filter"] == "(member=cn=alice,dc=example,dc=com)"


def test_search_failure_is_empty_object(fake_ldap, make_connector):
    fake_ldap(bind_ok=False)
    resp = _client(make_connector).post(
        "/search", json={"filter": {"Base DN": "dc=x", "Filter": "(cn=*)"}}
    )
    assert resp.status_code == 200
    assert resp.json() == {}


def test_search_rejects_missing_fields(make_connector):
    resp = _client(make_connector).post("/search", json={"filter": {"Base DN": "dc=x"}})
    assert resp.status_code == 422
    assert "'Filter' is required" in resp.json()["errors"][0]


def test_search_rejects_undefined_variable(make_connector):
    resp = _client(make_connector).post(
        "/search", json={"filter": {"Base DN": "dc=x", "Filter": "(cn={{ nope }})"}}
    )
    assert resp.status_code == 422
