from ldapsource.config import (
    build_connector,
    deep_merge,
    get_connector_config,
    get_resolver_config,
    get_search_defaults,
    load_yaml_files,
)
from ldapsource.resolvers.static import StaticResolver


def test_load_and_merge(tmp_path):
    a = tmp_path / "a.yaml"
    b = tmp_path / "b.yaml"
    a.write_text(
        "resolver:\n  type: static\n  configuration:\n    LDAP1:\n      server_url: ldap://a\n"
        "connector:\n  LDAP ID: LDAP1\n",
        encoding="utf-8",
    )
    b.write_text("connector:\n  Connection Test: bind\n", encoding="utf-8")
    cfg = load_yaml_files([str(a), str(b)])
    assert get_connector_config(cfg) == {"LDAP ID": "LDAP1", "Connection Test": "bind"}
    assert get_resolver_config(cfg) == ("static", {"LDAP1": {"server_url": "ldap://a"}})


def test_empty_file(tmp_path):
    p = tmp_path / "empty.yaml"
    p.write_text("", encoding="utf-8")
    cfg = load_yaml_files([str(p)])
    assert cfg == {}
    assert get_resolver_config(cfg) == ("static", {})
    assert get_search_defaults(cfg) == {}


def test_deep_merge_does_not_mutate():
    a = {"x": {"y": 1}}
    out = deep_merge(a, {"x": {"z": 2}})
    assert out == {"x": {"y": 1, "z": 2}}
    assert a == {"x": {"y": 1}}


def test_build_connector():
    cfg = {
        "resolver": {"type": "static", "configuration": {"L": {"server_url": "ldap://l"}}},
        "connector": {"LDAP ID": "L"},
    }
    c = build_connector(cfg)
    assert isinstance(c.resolver, StaticResolver)
    assert c.ldap_id == "L"
    assert c.test_connection() is True
