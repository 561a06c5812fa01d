"""Build the URLs that point the Guacamole gateway at a written configuration."""

# Standard Python Libraries
import base64
import hashlib
import logging
import re
from urllib.parse import quote

# A precompiled regex
IDENT_REGEX = re.compile(r"\w{3,40}", re.ASCII)

# The identifier of the gateway extension that reads no-auth
# configuration files
AUTH_PROVIDER_IDENTIFIER = "userfilesauth"

# The connection type marker used in Guacamole client identifiers
CONNECTION_TYPE = "c"


def normalize_ident(ident) -> str:
    """Return ident if it is usable as is, otherwise its SHA-1 digest.

    The digest is always 40 hexadecimal characters and therefore
    itself matches IDENT_REGEX.

    """
    ident = str(ident)
    if IDENT_REGEX.fullmatch(ident) is not None:
        return ident
    digest = hashlib.sha1(ident.encode()).hexdigest()  # nosec
    logging.debug("Identifier %r replaced by its digest %s.", ident, digest)
    return digest


def query_string(ident, username=None) -> str:
    """Return the query the gateway uses to locate the configuration file."""
    query = ""
    if username:
        query += f"username={quote(username, safe='')}&"
    query += f"ident={quote(normalize_ident(ident), safe='')}"
    return query


def base_link(base_url: str) -> str:
    """Return base_url without any trailing slashes or hashes."""
    return base_url.rstrip("/#")


def build_link(base_url: str, ident, username=None) -> str:
    """Return the gateway home page link for the configuration with ident."""
    return f"{base_link(base_url)}/#/?{query_string(ident, username)}"


def client_identifier(connection_name: str) -> str:
    """Return the identifier the Guacamole web client uses for a connection."""
    raw = "\0".join((connection_name, CONNECTION_TYPE, AUTH_PROVIDER_IDENTIFIER))
    return base64.b64encode(raw.encode("utf-8")).decode("ascii")


def build_client_link(base_url: str, connection_name: str, ident, username=None) -> str:
    """Return a link that opens connection_name directly."""
    return (
        f"{base_link(base_url)}/#/client/{client_identifier(connection_name)}"
        f"?{query_string(ident, username)}"
    )
