"""Immutable URL values with WHATWG-style resolution against a base URL.

Only the parts of URL parsing that matter for relative-path algebra are
modelled: scheme, credentials, host, port, path, query and fragment. Special
schemes (``http``, ``https``, ``ws``, ``wss``, ``ftp``, ``file``) get the
browser treatment: backslashes act as path separators, hosts are lower-cased,
default ports are dropped and the path is never empty.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, replace
from typing import Final
from urllib.parse import quote

from smgen.errors import URLResolutionError


SPECIAL_SCHEMES: Final[dict[str, str]] = {
    "ftp": "21",
    "file": "",
    "http": "80",
    "https": "443",
    "ws": "80",
    "wss": "443",
}

_SCHEME_RE: Final = re.compile(r"^([A-Za-z][A-Za-z0-9+.\-]*):")
_C0_AND_SPACE: Final[str] = "".join(chr(code) for code in range(0x21))
_PRINTABLE: Final[str] = "".join(chr(code) for code in range(0x20, 0x7F))


def _safe_except(excluded: str) -> str:
    return "".join(char for char in _PRINTABLE if char not in excluded)


# Characters left untouched by percent-encoding; '%' stays so escapes survive.
_PATH_SAFE: Final[str] = _safe_except(' "#<>?`{}')
_OPAQUE_SAFE: Final[str] = _PRINTABLE
_QUERY_SAFE: Final[str] = _safe_except(' "#<>')
_SPECIAL_QUERY_SAFE: Final[str] = _safe_except(' "#<>\'')
_FRAGMENT_SAFE: Final[str] = _safe_except(' "<>`')


@dataclass(frozen=True)
class ParsedURL:
    """A parsed, normalized URL. Transformations return new values."""

    scheme: str
    username: str = ""
    password: str = ""
    hostname: str | None = None
    port: str = ""
    path: str = ""
    query: str = ""
    fragment: str = ""
    opaque: bool = False

    @property
    def protocol(self) -> str:
        return f"{self.scheme}:"

    @property
    def special(self) -> bool:
        return self.scheme in SPECIAL_SCHEMES

    @property
    def search(self) -> str:
        return "" if self.query == "?" else self.query

    @property
    def hash(self) -> str:
        return "" if self.fragment == "#" else self.fragment

    @property
    def href(self) -> str:
        parts = [self.protocol]
        if self.hostname is not None:
            parts.append("//")
            if self.username or self.password:
                parts.append(self.username)
                if self.password:
                    parts.append(f":{self.password}")
                parts.append("@")
            parts.append(self.hostname)
            if self.port:
                parts.append(f":{self.port}")
        parts.extend((self.path, self.query, self.fragment))
        return "".join(parts)

    def with_path(self, path: str) -> ParsedURL:
        """Return a copy with ``path`` as its (re-normalized) path."""
        if self.opaque:
            return replace(self, path=quote(path, safe=_OPAQUE_SAFE))
        return replace(self, path=_normalize_path(path, special=self.special))

    def __str__(self) -> str:
        return self.href


def parse_url(text: str, base: ParsedURL | str | None = None) -> ParsedURL:
    """Parse ``text``, resolving it against ``base`` when it is relative."""
    if isinstance(base, str):
        base = parse_url(base)

    text = text.strip(_C0_AND_SPACE).replace("\t", "").replace("\n", "").replace("\r", "")

    match = _SCHEME_RE.match(text)
    if match is not None:
        scheme = match.group(1).lower()
        rest = text[match.end():]
        if (
            base is not None
            and scheme == base.scheme
            and scheme in SPECIAL_SCHEMES
            and not rest.startswith(("/", "\\"))
        ):
            # "http:foo" against an http base is a relative reference.
            return _resolve_relative(rest, base)
        return _parse_absolute(scheme, rest, text)

    if base is None:
        raise URLResolutionError(
            code="URL001",
            message=f"Invalid URL {text!r}: relative reference without a base.",
            hint="Pass an absolute URL or supply a base URL.",
        )
    return _resolve_relative(text, base)


def _parse_absolute(scheme: str, rest: str, original: str) -> ParsedURL:
    rest, fragment = _split_fragment(rest)
    rest, query = _split_query(rest)
    special = scheme in SPECIAL_SCHEMES

    if special:
        rest = rest.replace("\\", "/")
        if scheme == "file":
            if rest.startswith("//"):
                authority, path = _split_authority(rest[2:])
            else:
                authority, path = "", rest
        else:
            authority, path = _split_authority(rest.lstrip("/"))
        return _build(scheme, authority, path, query, fragment, original)

    if rest.startswith("//"):
        authority, path = _split_authority(rest[2:])
        return _build(scheme, authority, path, query, fragment, original)

    if rest.startswith("/"):
        return ParsedURL(
            scheme=scheme,
            path=_normalize_path(rest, special=False),
            query=_encode_query(query, special=False),
            fragment=_encode_fragment(fragment),
        )

    return ParsedURL(
        scheme=scheme,
        path=quote(rest, safe=_OPAQUE_SAFE),
        query=_encode_query(query, special=False),
        fragment=_encode_fragment(fragment),
        opaque=True,
    )


def _resolve_relative(text: str, base: ParsedURL) -> ParsedURL:
    if base.opaque:
        if text.startswith("#"):
            return replace(base, fragment=_encode_fragment(text))
        raise URLResolutionError(
            code="URL001",
            message=f"Cannot resolve {text!r} against {base.href!r}.",
            hint=f"URLs with the {base.protocol} scheme do not support relative references.",
        )

    ref, fragment = _split_fragment(text)
    ref, query = _split_query(ref)
    if base.special:
        ref = ref.replace("\\", "/")

    if ref.startswith("//"):
        authority = ref[2:].lstrip("/") if base.special else ref[2:]
        authority, path = _split_authority(authority)
        return _build(base.scheme, authority, path, query, fragment, text)

    if ref.startswith("/"):
        path = ref
    elif ref == "":
        path = base.path
        if not query:
            query = base.query
    elif base.hostname is not None and base.path == "":
        path = "/" + ref
    else:
        path = base.path[: base.path.rfind("/") + 1] + ref

    return replace(
        base,
        path=_normalize_path(path, special=base.special),
        query=_encode_query(query, special=base.special),
        fragment=_encode_fragment(fragment),
    )


def _build(scheme: str, authority: str, path: str, query: str, fragment: str, original: str) -> ParsedURL:
    special = scheme in SPECIAL_SCHEMES
    userinfo, _, hostport = authority.rpartition("@")
    username, _, password = userinfo.partition(":")

    if hostport.startswith("["):
        close = hostport.find("]")
        host, port = hostport[: close + 1], hostport[close + 1:].lstrip(":")
    else:
        host, _, port = hostport.partition(":")

    if port:
        if not (port.isascii() and port.isdigit()):
            raise URLResolutionError(
                code="URL001",
                message=f"Invalid port {port!r} in URL {original!r}.",
                hint="Ports must be decimal numbers.",
            )
        port = str(int(port))
        if SPECIAL_SCHEMES.get(scheme) == port:
            port = ""

    return ParsedURL(
        scheme=scheme,
        username=quote(username, safe=_safe_except(' "#<>?`{}/:;=@[\\]^|')),
        password=quote(password, safe=_safe_except(' "#<>?`{}/:;=@[\\]^|')),
        hostname=host.lower() if special else host,
        port=port,
        path=_normalize_path(path, special=special),
        query=_encode_query(query, special=special),
        fragment=_encode_fragment(fragment),
    )


def _split_fragment(text: str) -> tuple[str, str]:
    index = text.find("#")
    if index == -1:
        return text, ""
    return text[:index], text[index:]


def _split_query(text: str) -> tuple[str, str]:
    index = text.find("?")
    if index == -1:
        return text, ""
    return text[:index], text[index:]


def _split_authority(text: str) -> tuple[str, str]:
    index = text.find("/")
    if index == -1:
        return text, ""
    return text[:index], text[index:]


# Dot segments, including percent-encoded spellings, by how many dots they hold.
_DOT_SEGMENTS: Final[dict[str, int]] = {
    ".": 1,
    "%2e": 1,
    "..": 2,
    ".%2e": 2,
    "%2e.": 2,
    "%2e%2e": 2,
}


def _normalize_path(path: str, *, special: bool) -> str:
    """Percent-encode a hierarchical ``path`` and remove its dot segments."""
    if not path:
        return "/" if special else ""

    segments = path.removeprefix("/").split("/")
    output: list[str] = []
    last = len(segments) - 1
    for index, segment in enumerate(segments):
        dots = _DOT_SEGMENTS.get(segment.lower())
        if dots == 2:
            if output:
                output.pop()
            if index == last:
                output.append("")
        elif dots == 1:
            if index == last:
                output.append("")
        else:
            output.append(segment)

    return quote("/" + "/".join(output), safe=_PATH_SAFE)


def _encode_query(query: str, *, special: bool) -> str:
    return quote(query, safe=_SPECIAL_QUERY_SAFE if special else _QUERY_SAFE)


def _encode_fragment(fragment: str) -> str:
    return quote(fragment, safe=_FRAGMENT_SAFE)
