"""Utilities."""

from __future__ import annotations

from pydantic import BaseModel


class LauncherError(Exception):
    """A required tool or directory is missing or broken."""


class ParsedUrl(BaseModel):
    """Components of a connection url. Missing parts are empty strings."""

    scheme: str = ""
    user: str = ""
    password: str = ""
    host: str = ""
    port: str = ""
    path: str = ""

    @property
    def hostport(self):
        return f"{self.host}:{self.port}" if self.port else self.host


def strip_url(url: str) -> ParsedUrl:
    """Split scheme://[user[:pass]@]host[:port][/path] by plain text matching.

    This is not an RFC 3986 parser: every step that finds nothing yields an
    empty string, so malformed input never raises. IPv6 literals are split on
    their first colon like any other host.
    """
    url = url or ""

    scheme = ""
    if "://" in url:
        scheme = url[: url.index("://") + 3]

    rest = url[len(scheme) :]

    userpass = rest.split("@", 1)[0] if "@" in rest else ""

    if ":" in userpass:
        user, _, password = userpass.partition(":")
    else:
        user, password = userpass, ""

    hostport = rest
    if "@" in rest and hostport.startswith(f"{userpass}@"):
        hostport = hostport[len(userpass) + 1 :]
    hostport = hostport.split("/", 1)[0]

    if ":" in hostport:
        host, _, port = hostport.partition(":")
    else:
        host, port = hostport, ""

    path = rest.split("/", 1)[1] if "/" in rest else ""

    return ParsedUrl(
        scheme=scheme,
        user=user,
        password=password,
        host=host,
        port=port,
        path=path,
    )


def to_posix_path(path: str) -> str:
    """Convert a Windows path (C:\\che) to the POSIX form used by cygwin (/C/che)."""
    if ":" not in path:
        return path
    return ("/" + path).replace("\\", "/").replace(":", "")
