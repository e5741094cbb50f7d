"""
Percent-encoding helpers used when building and reading driver URLs.

``urlencode`` leaves the same characters unescaped as JavaScript's
``encodeURIComponent`` (letters, digits and ``-_.!~*'()``), which is what
MongoDB connection-string parsers expect.
"""

from urllib.parse import quote, unquote

_SAFE = "!~*'()"


def urlencode(value: str) -> str:
    """Percent-encode ``value`` for use in any URL component."""
    return quote(value, safe=_SAFE)


def double_urlencode(value: str) -> str:
    """
    Percent-encode ``value`` twice.

    Distinguished names and Kerberos principals contain ``=``, ``,``, ``/``
    and ``@``; the driver decodes the userinfo once before handing it to the
    auth layer, which decodes again.
    """
    return urlencode(urlencode(value))


def urldecode(value: str, times: int = 1) -> str:
    """Reverse ``urlencode`` applied ``times`` times."""
    for _ in range(times):
        value = unquote(value)
    return value


__all__ = ["urlencode", "double_urlencode", "urldecode"]
