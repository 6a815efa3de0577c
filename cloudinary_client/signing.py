"""
Request signing for the Cloudinary API.

Cloudinary authenticates signed requests with a SHA-1 digest over the
sorted request parameters, the timestamp and the account secret:

    sha1("key1=value1&key2=value2&timestamp=<ts>" + api_secret)

Client and service build this string independently, so it has to be
byte-exact.
"""

import hashlib
from typing import Mapping, Union

from .constants import FIELD_TIMESTAMP, QUERY_PARAM_SEPARATOR, RESERVED_FIELDS


def canonical_params(params: Mapping[str, str]) -> str:
    """
    Serialize parameters as a sorted, '&'-joined query string.

    Values are included verbatim; the service does not expect escaping.

    Args:
        params: Parameter names mapped to string values

    Returns:
        Canonical string, empty if there are no parameters
    """
    return QUERY_PARAM_SEPARATOR.join(
        f"{key}={params[key]}" for key in sorted(params)
    )


def signable_params(params: Mapping[str, str]) -> dict:
    """Return a copy of params without the reserved form fields."""
    return {k: v for k, v in params.items() if k not in RESERVED_FIELDS}


def build_signature(params: Mapping[str, str], timestamp: Union[int, str], secret: str) -> str:
    """
    Generate the request signature.

    Args:
        params: Caller parameters to sign; reserved fields are ignored
        timestamp: Request timestamp, as sent in the form
        secret: Account API secret

    Returns:
        40 character lowercase hex SHA-1 digest
    """
    hasher = hashlib.sha1()

    signed = signable_params(params)
    if signed:
        hasher.update(canonical_params(signed).encode('utf-8'))
        hasher.update(QUERY_PARAM_SEPARATOR.encode('utf-8'))

    hasher.update(f"{FIELD_TIMESTAMP}={timestamp}".encode('utf-8'))
    hasher.update(secret.encode('utf-8'))

    return hasher.hexdigest()
