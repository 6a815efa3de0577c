"""
Account credentials and cloudinary:// connection string parsing.
"""

from dataclasses import dataclass, field
from urllib.parse import unquote, urlsplit

from .exceptions import ConnectionStringParseError


@dataclass(frozen=True)
class Credentials:
    """Cloud name, API key and API secret of a Cloudinary account."""

    cloud_name: str
    api_key: int
    api_secret: str = field(repr=False)


def parse_cloudinary_url(url: str) -> Credentials:
    """
    Parse a connection string of the form cloudinary://<api_key>:<api_secret>@<cloud_name>.

    Args:
        url: Connection string

    Returns:
        Credentials extracted from the string

    Raises:
        ConnectionStringParseError: If the cloud name, key or secret is missing,
            or the key is not a number
    """
    if not url or '://' not in url:
        raise ConnectionStringParseError("Url cannot be parsed.")

    try:
        parts = urlsplit(url.strip())
    except ValueError as e:
        raise ConnectionStringParseError(f"Url cannot be parsed: {e}") from e

    userinfo, sep, host = parts.netloc.rpartition('@')
    cloud_name = host.split(':', 1)[0]
    if not cloud_name:
        raise ConnectionStringParseError("Missing cloud name.")

    api_key_string, has_secret, api_secret = userinfo.partition(':')
    if not sep or not api_key_string:
        raise ConnectionStringParseError("Missing api key.")
    if not api_key_string.isdigit():
        raise ConnectionStringParseError("Api key is not a number.")

    if not has_secret or not api_secret:
        raise ConnectionStringParseError("Missing api secret.")

    return Credentials(
        cloud_name=cloud_name,
        api_key=int(api_key_string),
        api_secret=unquote(api_secret),
    )
