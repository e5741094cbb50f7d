"""
Credential variants for each authentication mechanism.

Every mechanism owns a fixed set of model fields. Validation walks those
sets to reject fields that leak across mechanisms and to report missing
required fields; once a model is valid, its fields are folded into exactly
one of the frozen credential dataclasses below.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from .exceptions import ValidationError
from .types import (
    DEFAULT_AUTH_SOURCE,
    DEFAULT_KERBEROS_SERVICE_NAME,
    Authentication,
    AuthMechanism,
    SSLMode,
)

# Fields owned by each mechanism, in declaration order.
MECHANISM_FIELDS: dict[Authentication, tuple[str, ...]] = {
    Authentication.NONE: (),
    Authentication.MONGODB: ("mongodb_username", "mongodb_password", "mongodb_database_name"),
    Authentication.LDAP: ("ldap_username", "ldap_password"),
    Authentication.X509: ("x509_username",),
    Authentication.KERBEROS: ("kerberos_principal", "kerberos_password", "kerberos_service_name"),
}

REQUIRED_FIELDS: dict[Authentication, tuple[str, ...]] = {
    Authentication.NONE: (),
    Authentication.MONGODB: ("mongodb_username", "mongodb_password"),
    Authentication.LDAP: ("ldap_username", "ldap_password"),
    Authentication.X509: ("x509_username",),
    Authentication.KERBEROS: ("kerberos_principal",),
}

SSL_FIELDS = ("ssl_ca", "ssl_certificate", "ssl_private_key", "ssl_private_key_password")
SSL_REQUIRED_FIELDS = ("ssl_ca", "ssl_certificate", "ssl_private_key")


@dataclass(frozen=True)
class NoCredentials:
    """No authentication."""


@dataclass(frozen=True)
class MongoDBCredentials:
    """Username/password verified by the server against ``database_name``."""

    username: str
    password: str
    database_name: str = DEFAULT_AUTH_SOURCE


@dataclass(frozen=True)
class LDAPCredentials:
    """Username/password proxied to a directory server."""

    username: str
    password: str


@dataclass(frozen=True)
class X509Credentials:
    """Client certificate identity; ``username`` is the certificate DN."""

    username: str


@dataclass(frozen=True)
class KerberosCredentials:
    """Kerberos principal with an optional password."""

    principal: str
    password: str | None = None
    service_name: str = DEFAULT_KERBEROS_SERVICE_NAME


Credentials = NoCredentials | MongoDBCredentials | LDAPCredentials | X509Credentials | KerberosCredentials


def is_set(value: Any) -> bool:
    """A field counts as set when it is neither ``None`` nor empty."""
    if value is None:
        return False
    if isinstance(value, (str, list, tuple)):
        return len(value) > 0
    return True


def find_violation(values: Mapping[str, Any]) -> ValidationError | None:
    """
    Return an error describing the first rule ``values`` violates.

    Rules are checked in a fixed order: fields of other mechanisms, then
    required fields of the active mechanism, then the TLS fields.

    Args:
        values: Raw model fields keyed by field name

    Returns:
        A ``ValidationError`` naming the offending field, or None
    """
    authentication = Authentication(values.get("authentication", Authentication.NONE))

    for mechanism, fields in MECHANISM_FIELDS.items():
        if mechanism == authentication:
            continue
        for name in fields:
            if is_set(values.get(name)):
                return ValidationError(
                    f"{name} field does not apply when authentication is not {mechanism}",
                    field=name,
                )

    for name in REQUIRED_FIELDS[authentication]:
        if not is_set(values.get(name)):
            return ValidationError(
                f"{name} field is required when authentication is {authentication}",
                field=name,
            )

    ssl = SSLMode(values.get("ssl", SSLMode.NONE))
    if ssl != SSLMode.ALL:
        for name in SSL_FIELDS:
            if is_set(values.get(name)):
                return ValidationError(
                    f"{name} field does not apply when ssl is not {SSLMode.ALL}",
                    field=name,
                )
    else:
        for name in SSL_REQUIRED_FIELDS:
            if not is_set(values.get(name)):
                return ValidationError(
                    f"{name} field is required when ssl is {SSLMode.ALL}",
                    field=name,
                )

    return None


def build_credentials(values: Mapping[str, Any]) -> Credentials:
    """Fold already-validated fields into the variant for their mechanism."""
    match Authentication(values.get("authentication", Authentication.NONE)):
        case Authentication.MONGODB:
            return MongoDBCredentials(
                username=values["mongodb_username"],
                password=values["mongodb_password"],
                database_name=values.get("mongodb_database_name") or DEFAULT_AUTH_SOURCE,
            )
        case Authentication.LDAP:
            return LDAPCredentials(username=values["ldap_username"], password=values["ldap_password"])
        case Authentication.X509:
            return X509Credentials(username=values["x509_username"])
        case Authentication.KERBEROS:
            return KerberosCredentials(
                principal=values["kerberos_principal"],
                password=values.get("kerberos_password") or None,
                service_name=values.get("kerberos_service_name") or DEFAULT_KERBEROS_SERVICE_NAME,
            )
        case _:
            return NoCredentials()


def auth_mechanism(credentials: Credentials) -> AuthMechanism | None:
    """``authMechanism`` tag for ``credentials``; None means the driver default."""
    match credentials:
        case LDAPCredentials():
            return AuthMechanism.PLAIN
        case X509Credentials():
            return AuthMechanism.MONGODB_X509
        case KerberosCredentials():
            return AuthMechanism.GSSAPI
        case _:
            return None


def credentials_to_fields(credentials: Credentials) -> dict[str, Any]:
    """Inverse of ``build_credentials``: model fields for ``credentials``."""
    match credentials:
        case MongoDBCredentials(username=username, password=password, database_name=database_name):
            return {
                "authentication": Authentication.MONGODB,
                "mongodb_username": username,
                "mongodb_password": password,
                "mongodb_database_name": database_name,
            }
        case LDAPCredentials(username=username, password=password):
            return {"authentication": Authentication.LDAP, "ldap_username": username, "ldap_password": password}
        case X509Credentials(username=username):
            return {"authentication": Authentication.X509, "x509_username": username}
        case KerberosCredentials(principal=principal, password=password, service_name=service_name):
            return {
                "authentication": Authentication.KERBEROS,
                "kerberos_principal": principal,
                "kerberos_password": password,
                "kerberos_service_name": service_name,
            }
        case _:
            return {"authentication": Authentication.NONE}


__all__ = [
    "Credentials",
    "NoCredentials",
    "MongoDBCredentials",
    "LDAPCredentials",
    "X509Credentials",
    "KerberosCredentials",
    "MECHANISM_FIELDS",
    "REQUIRED_FIELDS",
    "SSL_FIELDS",
    "SSL_REQUIRED_FIELDS",
    "is_set",
    "find_violation",
    "build_credentials",
    "auth_mechanism",
    "credentials_to_fields",
]
