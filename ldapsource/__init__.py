"""Run parameterized LDAP subtree searches against registered endpoints."""

from .attribute import AttributeValue
from .connector import AVAILABLE_FIELDS, RESULT_FIELD, LdapSearchConnector
from .resolvers import ConnectionParams, create_resolver, register_resolver

__all__ = [
    "AttributeValue",
    "AVAILABLE_FIELDS",
    "RESULT_FIELD",
    "LdapSearchConnector",
    "ConnectionParams",
    "create_resolver",
    "register_resolver",
]
