from __future__ import annotations

import logging
from typing import Any, Dict, Iterator, Optional

from ldap3 import ANONYMOUS, NO_ATTRIBUTES, NONE, SIMPLE, SUBTREE, Connection, Server
from ldap3.core.exceptions import LDAPException

from .errors import DirectoryConnectionError, SearchError
from .resolvers import ConnectionParams

logger = logging.getLogger(__name__)

# ldap3 reports these response items for matching entries; everything else
# (search references, the final searchResDone) is not an entry.
_ENTRY_TYPE = "searchResEntry"


def _describe(result: Optional[Dict[str, Any]]) -> str:
    if not result:
        return "no result"
    desc = result.get("description") or ""
    msg = result.get("message") or ""
    return f"{desc} {msg}".strip() or f"result code {result.get('result')}"


class DirectorySession:
    """One authenticated directory connection used for a single search."""

    def __init__(self, connection: Any):
        self.connection = connection
        self._closed = False

    @classmethod
    def open(
        cls,
        params: ConnectionParams,
        connect_timeout: Optional[float] = None,
        receive_timeout: Optional[float] = None,
    ) -> "DirectorySession":
        """Connect to ``params.server_url`` and perform a simple bind.

        An empty principal binds anonymously. Referrals are never followed.
        A single attempt is made; on failure the socket is released before
        DirectoryConnectionError is raised, so there is nothing to close.
        """
        conn = None
        try:
            # no root DSE or schema read; only entry names are ever needed
            server = Server(params.server_url, get_info=NONE, connect_timeout=connect_timeout)
            conn = Connection(
                server,
                user=params.principal or None,
                password=params.credentials or None,
                authentication=SIMPLE if params.principal else ANONYMOUS,
                receive_timeout=receive_timeout,
                read_only=True,
                auto_referrals=False,
                raise_exceptions=False,
            )
            conn.open()
            if not conn.bind():
                result = dict(conn.result or {})
                raise DirectoryConnectionError(
                    f"bind to {params.server_url} failed: {_describe(result)}",
                    code=result.get("result"),
                )
        except DirectoryConnectionError:
            _release(conn)
            raise
        except LDAPException as e:
            _release(conn)
            raise DirectoryConnectionError(
                f"could not connect to {params.server_url}: {e}"
            ) from e
        logger.debug("opened directory session to %s", params.server_url)
        return cls(conn)

    def search(self, base_dn: str, search_filter: str) -> Iterator[Any]:
        """Yield entries below ``base_dn`` matching ``search_filter``.

        The request is sent on first iteration. Only entry names are asked
        for; no attribute values are transferred.
        """
        if self._closed:
            raise SearchError("session is closed")
        logger.debug("subtree search base=%r filter=%r", base_dn, search_filter)
        conn = self.connection
        try:
            conn.search(
                search_base=base_dn,
                search_filter=search_filter,
                search_scope=SUBTREE,
                attributes=NO_ATTRIBUTES,
            )
            result = dict(conn.result or {})
            code = result.get("result")
            if code != 0:
                raise SearchError(
                    f"search under {base_dn!r} failed: {_describe(result)}",
                    code=code,
                )
            for item in conn.response or []:
                if item is None:
                    yield None
                elif item.get("type", _ENTRY_TYPE) == _ENTRY_TYPE:
                    yield item
        except LDAPException as e:
            raise SearchError(f"search under {base_dn!r} failed: {e}") from e

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        try:
            self.connection.unbind()
        except LDAPException as e:
            raise DirectoryConnectionError(f"error closing session: {e}") from e
        logger.debug("closed directory session")

    @property
    def closed(self) -> bool:
        return self._closed

    def __enter__(self) -> "DirectorySession":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if exc_type is None:
            self.close()
            return
        # the original failure takes precedence over a close error
        try:
            self.close()
        except DirectoryConnectionError as close_exc:
            logger.debug("ignoring close failure after error: %s", close_exc)


def _release(conn: Any) -> None:
    if conn is None:
        return
    try:
        conn.unbind()
    except LDAPException as e:
        logger.debug("unbind after failed open raised: %s", e)


__all__ = ["DirectorySession"]
