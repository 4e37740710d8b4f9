from __future__ import annotations

import logging
from typing import Any, Callable, Collection, Dict, List, Optional

from .attribute import AttributeValue
from .collector import collect
from .descriptor import (
    FilterFieldsGuiDescriptor,
    GuiDescriptor,
    SelectFieldDescriptor,
    SourceDescriptor,
    TextFieldDescriptor,
    as_field_list,
)
from .errors import ResolutionError
from .resolvers import ConnectionParams
from .resolvers.static import StaticResolver
from .result import is_success, make_result, result_from_exception
from .session import DirectorySession

logger = logging.getLogger(__name__)

CONFIG_LDAP_ID = "LDAP ID"
CONFIG_CONNECTION_TEST = "Connection Test"
CONFIG_CONNECT_TIMEOUT = "Connect Timeout"
CONFIG_RECEIVE_TIMEOUT = "Receive Timeout"
FILTER_BASE_DN = "Base DN"
FILTER_LDAP_FILTER = "Filter"
RESULT_FIELD = "searchResult"

TEST_RESOLVE = "resolve"
TEST_BIND = "bind"

AVAILABLE_FIELDS = (RESULT_FIELD,)


def _build_descriptor(plugin: Any) -> SourceDescriptor:
    # filter values may carry host placeholders, e.g.
    # (&(objectClass=group)(member:1.2.840.113556.1.4.1941:=${DN})(cn=grp-aws-*))
    filter_desc = FilterFieldsGuiDescriptor()
    filter_desc.add_field(
        TextFieldDescriptor(
            FILTER_BASE_DN, "The base DN from which the search is based.", required=True
        )
    )
    filter_desc.add_field(
        TextFieldDescriptor(
            FILTER_LDAP_FILTER, "The LDAP filter to search with.", required=True
        )
    )

    config_desc = GuiDescriptor("Configuration settings for the custom LDAP data store.")
    config_desc.add_field(
        TextFieldDescriptor(
            CONFIG_LDAP_ID, "The system ID of the LDAP data store to use.", required=True
        )
    )
    config_desc.add_field(
        SelectFieldDescriptor(
            CONFIG_CONNECTION_TEST,
            "How availability is checked: 'resolve' only looks the data store up, "
            "'bind' also opens a directory connection.",
            options=(TEST_RESOLVE, TEST_BIND),
            default=TEST_RESOLVE,
        )
    )
    config_desc.add_field(
        TextFieldDescriptor(
            CONFIG_CONNECT_TIMEOUT,
            "Seconds to wait for the server connection. Blank uses the transport default.",
        )
    )
    config_desc.add_field(
        TextFieldDescriptor(
            CONFIG_RECEIVE_TIMEOUT,
            "Seconds to wait for each server response. Blank uses the transport default.",
        )
    )
    return SourceDescriptor(plugin, "Custom LDAP Data Store", config_desc, filter_desc)


def _parse_timeout(name: str, raw: Optional[str]) -> Optional[float]:
    if raw is None or not str(raw).strip():
        return None
    try:
        value = float(raw)
    except ValueError:
        logger.warning("ignoring non-numeric %s %r", name, raw)
        return None
    if value <= 0:
        logger.warning("ignoring non-positive %s %r", name, raw)
        return None
    return value


class LdapSearchConnector:
    """Runs a configured LDAP subtree search and returns the matching DNs.

    Configuration only names the directory endpoint; connection parameters
    are looked up through the resolver on every call. Every failure is
    reported to the host as "no values" and never raised.
    """

    type_name = "ldap-search"

    def __init__(
        self,
        configuration: Optional[Any] = None,
        resolver: Optional[Any] = None,
        session_factory: Optional[Callable[..., DirectorySession]] = None,
    ):
        self.resolver = resolver if resolver is not None else StaticResolver({})
        self.session_factory = session_factory or DirectorySession.open
        self.descriptor = _build_descriptor(self)
        self.ldap_id: Optional[str] = None
        self.connection_test = TEST_RESOLVE
        self.connect_timeout: Optional[float] = None
        self.receive_timeout: Optional[float] = None
        if configuration is not None:
            self.configure(configuration)

    def get_source_descriptor(self) -> SourceDescriptor:
        return self.descriptor

    def configure(self, configuration: Any) -> None:
        """Store the endpoint id and tuning fields. Nothing is contacted here."""
        fields = as_field_list(configuration)
        self.ldap_id = fields.get_field_value(CONFIG_LDAP_ID)
        mode = (fields.get(CONFIG_CONNECTION_TEST) or TEST_RESOLVE).strip().lower()
        if mode not in (TEST_RESOLVE, TEST_BIND):
            logger.warning("unknown %s %r, using %r", CONFIG_CONNECTION_TEST, mode, TEST_RESOLVE)
            mode = TEST_RESOLVE
        self.connection_test = mode
        self.connect_timeout = _parse_timeout(
            CONFIG_CONNECT_TIMEOUT, fields.get_field_value(CONFIG_CONNECT_TIMEOUT)
        )
        self.receive_timeout = _parse_timeout(
            CONFIG_RECEIVE_TIMEOUT, fields.get_field_value(CONFIG_RECEIVE_TIMEOUT)
        )

    def _resolve(self) -> ConnectionParams:
        try:
            params = self.resolver.lookup(self.ldap_id)
        except ResolutionError:
            raise
        except Exception as e:
            raise ResolutionError(f"resolver failed for '{self.ldap_id}': {e}") from e
        if params is None:
            raise ResolutionError(f"no connection parameters for '{self.ldap_id}'")
        return params

    def _open(self, params: ConnectionParams) -> DirectorySession:
        return self.session_factory(
            params,
            connect_timeout=self.connect_timeout,
            receive_timeout=self.receive_timeout,
        )

    def test_connection(self) -> bool:
        """Report whether the configured endpoint is usable.

        In the default 'resolve' mode only the endpoint lookup is exercised;
        the directory server itself is not contacted.
        """
        try:
            params = self._resolve()
            if self.connection_test == TEST_BIND:
                self._open(params).close()
            return True
        except Exception as e:
            logger.warning("connection test for '%s' failed: %s", self.ldap_id, e)
            return False

    def get_available_fields(self) -> List[str]:
        return list(AVAILABLE_FIELDS)

    def search(self, base_dn: Optional[str], search_filter: Optional[str]) -> Dict[str, Any]:
        """Run one search and return a result dict instead of raising.

        On success ``data`` holds the DNs in server order. On failure
        ``status.error`` names the failing stage and nothing collected so far
        is returned.
        """
        meta = {"ldap_id": self.ldap_id, "base_dn": base_dn, "filter": search_filter}
        try:
            params = self._resolve()
            with self._open(params) as session:
                names = collect(session.search(base_dn, search_filter))
        except Exception as e:
            return result_from_exception(e, meta=meta)
        meta["count"] = len(names)
        return make_result(success=True, code=0, data=names, meta=meta)

    def retrieve_values(
        self,
        attribute_names_to_fill: Optional[Collection[str]],
        filter_configuration: Any,
    ) -> Dict[str, Any]:
        """Return {"searchResult": AttributeValue(dns)}, or {} on any failure.

        ``attribute_names_to_fill`` is accepted for interface compatibility;
        the single available field is always produced.
        """
        fields = as_field_list(filter_configuration)
        result = self.search(
            fields.get_field_value(FILTER_BASE_DN),
            fields.get_field_value(FILTER_LDAP_FILTER),
        )
        return self.to_values(result)

    def to_values(self, result: Dict[str, Any]) -> Dict[str, Any]:
        """Collapse a search result into the host-facing value map."""
        if not is_success(result):
            status = result["status"]
            logger.warning(
                "search on '%s' failed (%s): %s",
                self.ldap_id,
                status["error"],
                "; ".join(status["notes"]),
            )
            return {}
        return {RESULT_FIELD: AttributeValue(result["data"])}


__all__ = [
    "LdapSearchConnector",
    "AVAILABLE_FIELDS",
    "RESULT_FIELD",
    "CONFIG_LDAP_ID",
    "CONFIG_CONNECTION_TEST",
    "CONFIG_CONNECT_TIMEOUT",
    "CONFIG_RECEIVE_TIMEOUT",
    "FILTER_BASE_DN",
    "FILTER_LDAP_FILTER",
    "TEST_RESOLVE",
    "TEST_BIND",
]
