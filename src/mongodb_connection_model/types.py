"""
Type definitions for the MongoDB connection model.

This module contains the enums and default values shared by the model,
the credential variants and the options loader.
"""

from enum import StrEnum


DEFAULT_HOSTNAME = "localhost"
DEFAULT_PORT = 27017
DEFAULT_AUTH_SOURCE = "admin"
DEFAULT_KERBEROS_SERVICE_NAME = "mongodb"
DEFAULT_READ_PREFERENCE = "primary"

# Pseudo-database the GSSAPI URL convention expects in the path segment.
KERBEROS_DATABASE = "kerberos"


class Authentication(StrEnum):
    """
    Authentication mechanism selected for a connection.

    - NONE: No credentials are sent
    - MONGODB: Username/password checked by the server (SCRAM)
    - LDAP: Username/password proxied to a directory (PLAIN)
    - X509: Client certificate, identified by its distinguished name
    - KERBEROS: Ticket based, identified by a principal (GSSAPI)
    """

    NONE = "NONE"
    MONGODB = "MONGODB"
    LDAP = "LDAP"
    X509 = "X509"
    KERBEROS = "KERBEROS"


class SSLMode(StrEnum):
    """
    TLS mode for a connection.

    - NONE: Plain TCP
    - UNVALIDATED: TLS without validating the server certificate
    - SERVER: TLS, validating the server certificate
    - ALL: TLS with server validation and a client certificate
    """

    NONE = "NONE"
    UNVALIDATED = "UNVALIDATED"
    SERVER = "SERVER"
    ALL = "ALL"


class AuthMechanism(StrEnum):
    """Protocol-level ``authMechanism`` tags sent to the server."""

    PLAIN = "PLAIN"
    MONGODB_X509 = "MONGODB-X509"
    GSSAPI = "GSSAPI"
