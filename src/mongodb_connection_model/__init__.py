"""
MongoDB Connection Model - validated connection settings for MongoDB drivers.

Turns a set of user-supplied fields into:
- a canonical ``mongodb://`` driver URL
- a driver options object with TLS material loaded from disk

Supports:
- Authentication: NONE, MONGODB, LDAP (PLAIN), X509, KERBEROS (GSSAPI)
- TLS modes: NONE, UNVALIDATED, SERVER, ALL
"""

from .model import ConnectionModel
from .options import DriverOptions, OptionsLoader, ServerOptions, load_options
from .credentials import (
    Credentials,
    NoCredentials,
    MongoDBCredentials,
    LDAPCredentials,
    X509Credentials,
    KerberosCredentials,
)
from .types import Authentication, AuthMechanism, SSLMode
from .exceptions import ConnectionModelError, ValidationError, OptionsLoadError

__version__ = "0.1.0"
__all__ = [
    # Model
    "ConnectionModel",
    # Options
    "DriverOptions",
    "OptionsLoader",
    "ServerOptions",
    "load_options",
    # Credentials
    "Credentials",
    "NoCredentials",
    "MongoDBCredentials",
    "LDAPCredentials",
    "X509Credentials",
    "KerberosCredentials",
    # Types
    "Authentication",
    "AuthMechanism",
    "SSLMode",
    # Exceptions
    "ConnectionModelError",
    "ValidationError",
    "OptionsLoadError",
]
