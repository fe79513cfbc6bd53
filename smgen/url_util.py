"""Relative URL algebra for ``sourceRoot`` and source-map-relative sources.

Every string handled here is one of four shapes: ``absolute``
(``scheme:...``), ``scheme-relative`` (``//host/...``), ``path-absolute``
(``/path``) or ``path-relative`` (anything else). Relative inputs are parsed
against a synthetic ``http://host/`` base so that a standards-style resolver
can normalize them, then sliced back to their original shape.
"""

from __future__ import annotations

import json
import logging
import re
from typing import Any, Callable, Final, Literal

from smgen.errors import URLResolutionError
from smgen.url_parser import ParsedURL, parse_url


logger = logging.getLogger(__name__)

URLType = Literal["absolute", "scheme-relative", "path-absolute", "path-relative"]

# "http" keeps URLs resolved against the safe base "special", so backslash
# normalization applies to their paths.
PROTOCOL: Final[str] = "http:"
PROTOCOL_AND_HOST: Final[str] = f"{PROTOCOL}//host"

_ABSOLUTE_SCHEME: Final = re.compile(r"^[A-Za-z0-9+\-.]+:")
_XSSI_PREFIX: Final = re.compile(r"^\)\]\}'[^\n]*\n")


def get_url_type(url: str) -> URLType:
    """Classify ``url`` by its leading characters."""
    if url.startswith("/"):
        if url.startswith("//"):
            return "scheme-relative"
        return "path-absolute"
    return "absolute" if _ABSOLUTE_SCHEME.match(url) else "path-relative"


def build_unique_segment(prefix: str, text: str) -> str:
    """Return ``prefix`` plus the first counter value not found in ``text``."""
    counter = 0
    while True:
        ident = f"{prefix}{counter}"
        if ident not in text:
            return ident
        counter += 1


def build_safe_base(text: str) -> str:
    """Build a base URL deep enough to absorb every ``..`` found in ``text``.

    The repeated segment must not occur in ``text``: with a plain ``a``
    segment, ``relative(build_safe_base("../../a/"), "http://host/a/")``
    would give ``a/`` instead of ``../../a/``.
    """
    max_dot_parts = text.count("..")
    segment = build_unique_segment("p", text)
    return f"{PROTOCOL_AND_HOST}/" + f"{segment}/" * max_dot_parts


def _with_base(url: str, base: str | None = None) -> str:
    return parse_url(url, base).href


def compute_relative_url(root_url: ParsedURL | str, target_url: ParsedURL | str) -> str:
    """Build the path from ``root_url`` to ``target_url``.

    Both URLs are assumed to share protocol, host and credentials; only the
    path, query and fragment are compared.
    """
    if isinstance(root_url, str):
        root_url = parse_url(root_url)
    if isinstance(target_url, str):
        target_url = parse_url(target_url)

    target_parts = target_url.path.split("/")
    root_parts = root_url.path.split("/")

    # A trailing "/" on the root would otherwise count as one more level.
    if root_parts and not root_parts[-1]:
        root_parts.pop()

    common = 0
    while (
        common < len(target_parts)
        and common < len(root_parts)
        and target_parts[common] == root_parts[common]
    ):
        common += 1

    relative_path = "/".join([".."] * (len(root_parts) - common) + target_parts[common:])
    return relative_path + target_url.search + target_url.hash


def _safe_handler(transform: Callable[[ParsedURL], ParsedURL]) -> Callable[[str], str]:
    """Wrap a URL transform so it accepts and returns any of the four shapes."""

    def handler(value: str) -> str:
        url_type = get_url_type(value)
        base = build_safe_base(value)
        result = transform(parse_url(value, base)).href

        if url_type == "absolute":
            return result
        if url_type == "scheme-relative":
            return result[len(PROTOCOL):]
        if url_type == "path-absolute":
            return result[len(PROTOCOL_AND_HOST):]

        # Transforms only touch path, query and fragment.
        return compute_relative_url(base, result)

    handler.__doc__ = transform.__doc__
    return handler


def _directory(url: ParsedURL) -> ParsedURL:
    """Given a URL, ensure that it is treated as a directory URL."""
    if url.path.endswith("/"):
        return url
    return url.with_path(url.path + "/")


def _parent(url: ParsedURL) -> ParsedURL:
    """Given a URL, strip off any filename if one is present."""
    return parse_url(".", url)


def _identity(url: ParsedURL) -> ParsedURL:
    """Normalize a URL: convert backslashes, remove ``.`` and ``..`` segments."""
    return url


ensure_directory = _safe_handler(_directory)
trim_filename = _safe_handler(_parent)
normalize = _safe_handler(_identity)


def join(root: str, path: str) -> str:
    """Join ``path`` onto ``root``, which always names a directory.

    The result is normalized. Each operand independently takes one of the
    four URL shapes; two path-relative operands are resolved against a safe
    base and turned back into a relative path.
    """
    path_type = get_url_type(path)
    root_type = get_url_type(root)

    root = ensure_directory(root)

    if path_type == "absolute":
        return _with_base(path)
    if root_type == "absolute":
        return _with_base(path, root)

    if path_type == "scheme-relative":
        return normalize(path)
    if root_type == "scheme-relative":
        return _with_base(path, _with_base(root, PROTOCOL_AND_HOST))[len(PROTOCOL):]

    if path_type == "path-absolute":
        return normalize(path)
    if root_type == "path-absolute":
        return _with_base(path, _with_base(root, PROTOCOL_AND_HOST))[len(PROTOCOL_AND_HOST):]

    base = build_safe_base(path + root)
    new_path = _with_base(path, _with_base(root, base))
    return compute_relative_url(base, new_path)


def relative(root_url: str, target_url: str) -> str:
    """Make ``target_url`` relative to ``root_url`` when possible.

    When the two cannot be related, the normalized target is returned as is.
    """
    result = _relative_if_possible(root_url, target_url)
    if result is None:
        logger.debug("Cannot relativize %r against %r, normalizing only", target_url, root_url)
        return normalize(target_url)
    return result


def _relative_if_possible(root_url: str, target_url: str) -> str | None:
    if get_url_type(root_url) != get_url_type(target_url):
        return None

    base = build_safe_base(root_url + target_url)
    root = parse_url(root_url, base)
    target = parse_url(target_url, base)

    try:
        parse_url("", target)
    except URLResolutionError:
        # data:, blob: and other opaque URLs take no relative references.
        return None

    if (
        target.protocol != root.protocol
        or target.username != root.username
        or target.password != root.password
        or target.hostname != root.hostname
        or target.port != root.port
    ):
        return None

    return compute_relative_url(root, target)


def compute_source_url(
    source_root: str | None,
    source_url: str | None,
    source_map_url: str | None = None,
) -> str:
    """Compute the URL of a source from the source root and the map's URL.

    ``sourceRoot`` and ``sources`` entries are appended with a ``/`` between
    them, so ``("some-dir", "/some-path.js")`` and ``("some-dir/",
    "/some-path.js")`` both give ``some-dir/some-path.js``. A path-absolute
    source therefore loses its leading ``/`` when a source root is present.
    """
    if source_root and source_url and get_url_type(source_url) == "path-absolute":
        source_url = source_url[1:]

    url = normalize(source_url or "")

    if source_root:
        url = join(source_root, url)
    if source_map_url:
        url = join(trim_filename(source_map_url), url)
    return url


def parse_source_map_input(text: str) -> Any:
    """Strip any ``)]}'`` XSSI guard line and parse the rest as JSON."""
    return json.loads(_XSSI_PREFIX.sub("", text, count=1))
