"""
Driver URL building and reading.

``build_driver_url`` is the only place the connection-string grammar is
written down. ``parse_driver_url`` reads that same grammar back; it is not a
general MongoDB URI parser.
"""

from __future__ import annotations

import logging
from typing import Any
from urllib.parse import parse_qsl, urlsplit

from .credentials import (
    Credentials,
    KerberosCredentials,
    LDAPCredentials,
    MongoDBCredentials,
    NoCredentials,
    X509Credentials,
    auth_mechanism,
    credentials_to_fields,
)
from .encoding import double_urlencode, urldecode, urlencode
from .exceptions import ValidationError
from .types import DEFAULT_AUTH_SOURCE, DEFAULT_KERBEROS_SERVICE_NAME, DEFAULT_PORT, KERBEROS_DATABASE, AuthMechanism

logger = logging.getLogger(__name__)

SCHEME = "mongodb"


def _userinfo(credentials: Credentials) -> str:
    match credentials:
        case MongoDBCredentials(username=username, password=password) | LDAPCredentials(
            username=username, password=password
        ):
            return f"{urlencode(username)}:{urlencode(password)}@"
        case X509Credentials(username=username):
            return f"{double_urlencode(username)}@"
        case KerberosCredentials(principal=principal, password=password):
            return f"{double_urlencode(principal)}:{urlencode(password) if password else ''}@"
        case _:
            return ""


def _query(credentials: Credentials) -> list[tuple[str, str]]:
    query = [("slaveOk", "true")]
    match credentials:
        case MongoDBCredentials(database_name=database_name):
            query.append(("authSource", urlencode(database_name)))
        case KerberosCredentials(service_name=service_name):
            query.append(("gssapiServiceName", urlencode(service_name)))
            query.append(("authMechanism", str(AuthMechanism.GSSAPI)))
        case LDAPCredentials() | X509Credentials():
            query.append(("authMechanism", str(auth_mechanism(credentials))))
    return query


def build_driver_url(credentials: Credentials, hostname: str, port: int) -> str:
    """
    Build the canonical driver URL.

    Args:
        credentials: Credential variant of a valid model
        hostname: Server hostname
        port: Server port

    Returns:
        ``mongodb://[userinfo@]hostname:port/[kerberos]?slaveOk=true[&...]``
    """
    path = f"/{KERBEROS_DATABASE}" if isinstance(credentials, KerberosCredentials) else "/"
    query = "&".join(f"{key}={value}" for key, value in _query(credentials))
    url = f"{SCHEME}://{_userinfo(credentials)}{hostname}:{port}{path}?{query}"
    logger.debug(f"Built driver URL for {type(credentials).__name__} on {hostname}:{port}")
    return url


def _split_host(hostport: str) -> tuple[str, int]:
    if "," in hostport:
        raise ValidationError("only single-host URLs are supported", field="hostname")

    host, sep, port = hostport.rpartition(":")
    if not sep or host.endswith("[") or "]" in port:
        return hostport, DEFAULT_PORT
    try:
        return host, int(port)
    except ValueError:
        raise ValidationError(f"port {port!r} is not a number", field="port") from None


def parse_driver_url(url: str) -> dict[str, Any]:
    """
    Read a URL produced by ``build_driver_url`` back into model fields.

    Usernames are decoded once for MONGODB and LDAP and twice for the X509
    distinguished name and the Kerberos principal.

    Raises:
        ValidationError: If the URL is not in the supported grammar
    """
    parts = urlsplit(url)
    if parts.scheme != SCHEME:
        raise ValidationError(f"url must use the {SCHEME}:// scheme", field="url")

    userinfo, _, hostport = parts.netloc.rpartition("@")
    raw_user, has_password, raw_password = userinfo.partition(":")
    hostname, port = _split_host(hostport)
    query = dict(parse_qsl(parts.query, keep_blank_values=True))

    credentials: Credentials
    mechanism = query.get("authMechanism")
    match mechanism:
        case None if raw_user:
            credentials = MongoDBCredentials(
                username=urldecode(raw_user),
                password=urldecode(raw_password),
                database_name=query.get("authSource") or DEFAULT_AUTH_SOURCE,
            )
        case None:
            credentials = NoCredentials()
        case AuthMechanism.PLAIN:
            credentials = LDAPCredentials(username=urldecode(raw_user), password=urldecode(raw_password))
        case AuthMechanism.MONGODB_X509:
            credentials = X509Credentials(username=urldecode(raw_user, times=2))
        case AuthMechanism.GSSAPI:
            credentials = KerberosCredentials(
                principal=urldecode(raw_user, times=2),
                password=urldecode(raw_password) if has_password and raw_password else None,
                service_name=query.get("gssapiServiceName") or DEFAULT_KERBEROS_SERVICE_NAME,
            )
        case _:
            raise ValidationError(f"authMechanism {mechanism} is not supported", field="authentication")

    fields = credentials_to_fields(credentials)
    fields.update(hostname=hostname, port=port)
    if "replicaSet" in query:
        fields["replica_set_name"] = query["replicaSet"]
    if "readPreference" in query:
        fields["read_preference"] = query["readPreference"]
    return fields


__all__ = ["build_driver_url", "parse_driver_url"]
