from __future__ import annotations

import unittest

from smgen.errors import URLResolutionError
from smgen.url_parser import parse_url
from smgen.url_util import (
    build_safe_base,
    build_unique_segment,
    compute_relative_url,
    compute_source_url,
    ensure_directory,
    get_url_type,
    join,
    normalize,
    parse_source_map_input,
    relative,
    trim_filename,
)


class URLTypeTests(unittest.TestCase):
    def test_classifies_four_shapes(self) -> None:
        self.assertEqual(get_url_type("http://example.com/a"), "absolute")
        self.assertEqual(get_url_type("data:text/plain,x"), "absolute")
        self.assertEqual(get_url_type("//example.com/a"), "scheme-relative")
        self.assertEqual(get_url_type("/a/b"), "path-absolute")
        self.assertEqual(get_url_type("a/b"), "path-relative")
        self.assertEqual(get_url_type(""), "path-relative")


class SafeBaseTests(unittest.TestCase):
    def test_unique_segment_skips_existing_text(self) -> None:
        self.assertEqual(build_unique_segment("p", "a/b"), "p0")
        self.assertEqual(build_unique_segment("p", "p0/p1"), "p2")

    def test_safe_base_absorbs_parent_segments(self) -> None:
        self.assertEqual(build_safe_base("a/b"), "http://host/")
        self.assertEqual(build_safe_base("../../a/"), "http://host/p0/p0/")

    def test_segment_collision_would_lose_parents(self) -> None:
        base = build_safe_base("../../a/")
        self.assertEqual(relative(base, "http://host/a/"), "../../a/")


class URLParserTests(unittest.TestCase):
    def test_normalizes_special_urls(self) -> None:
        url = parse_url("HTTP://Example.COM:80/a/./b/../c?q#f")
        self.assertEqual(url.href, "http://example.com/a/c?q#f")
        self.assertEqual(url.search, "?q")
        self.assertEqual(url.hash, "#f")

    def test_resolves_against_base(self) -> None:
        self.assertEqual(parse_url("b", "http://x.org/a/").href, "http://x.org/a/b")
        self.assertEqual(parse_url("../b", "http://x.org/a/c/").href, "http://x.org/a/b")
        self.assertEqual(parse_url("//y.org", "https://x.org/a").href, "https://y.org/")

    def test_reads_credentials(self) -> None:
        url = parse_url("http://user:pw@host:8080/")
        self.assertEqual(url.username, "user")
        self.assertEqual(url.password, "pw")
        self.assertEqual(url.port, "8080")

    def test_opaque_urls_reject_relative_references(self) -> None:
        url = parse_url("mailto:someone@example.com")
        self.assertTrue(url.opaque)
        self.assertEqual(parse_url("#top", "data:text/plain,x").href, "data:text/plain,x#top")
        with self.assertRaises(URLResolutionError):
            parse_url("", "data:text/plain,x")

    def test_rejects_relative_without_base(self) -> None:
        with self.assertRaises(URLResolutionError) as ctx:
            parse_url("a/b")
        self.assertEqual(ctx.exception.code, "URL001")

    def test_rejects_bad_port(self) -> None:
        with self.assertRaises(URLResolutionError):
            parse_url("http://host:abc/")

    def test_with_path_returns_new_value(self) -> None:
        url = parse_url("http://host/a")
        moved = url.with_path("/b/../c")
        self.assertEqual(url.path, "/a")
        self.assertEqual(moved.href, "http://host/c")


class NormalizeTests(unittest.TestCase):
    def test_removes_dot_segments_keeping_shape(self) -> None:
        self.assertEqual(normalize("/a/../b"), "/b")
        self.assertEqual(normalize("../a/./b/../c.js"), "../a/c.js")
        self.assertEqual(normalize("//Host.COM/a/../b"), "//host.com/b")
        self.assertEqual(normalize("http://example.com:80/a"), "http://example.com/a")

    def test_removes_percent_encoded_dot_segments(self) -> None:
        self.assertEqual(normalize("a/%2e%2e/b"), "b")
        self.assertEqual(normalize("/a/%2E/b"), "/a/b")
        self.assertEqual(normalize("/a/.%2e/b"), "/b")
        self.assertEqual(normalize("http://host/a/%2E./b"), "http://host/b")

    def test_converts_backslashes_and_escapes(self) -> None:
        self.assertEqual(normalize("a\\b.js"), "a/b.js")
        self.assertEqual(normalize("a b.js"), "a%20b.js")

    def test_directory_helpers(self) -> None:
        self.assertEqual(ensure_directory("a"), "a/")
        self.assertEqual(ensure_directory("/a/"), "/a/")
        self.assertEqual(trim_filename("http://example.com/out.js.map"), "http://example.com/")
        self.assertEqual(trim_filename("maps/out.js.map"), "maps/")


class JoinTests(unittest.TestCase):
    def test_path_relative_operands(self) -> None:
        self.assertEqual(join("a", "b"), "a/b")
        self.assertEqual(join("a/", "b"), "a/b")
        self.assertEqual(join("a", "b/"), "a/b/")
        self.assertEqual(join("a", ".."), "")
        self.assertEqual(join("a", "../b"), "b")
        self.assertEqual(join("a/b", "../c"), "a/c")
        self.assertEqual(join("a", "."), "a/")
        self.assertEqual(join("a/b", "./c"), "a/b/c")

    def test_path_absolute_operands(self) -> None:
        self.assertEqual(join("dir/", "/abs/path.js"), "/abs/path.js")
        self.assertEqual(join("/a", "b"), "/a/b")

    def test_scheme_relative_operands(self) -> None:
        self.assertEqual(join("//foo.org/a", "b"), "//foo.org/a/b")
        self.assertEqual(join("a", "//b.org/c"), "//b.org/c")

    def test_absolute_operands(self) -> None:
        self.assertEqual(join("http://foo.org/a", "b"), "http://foo.org/a/b")
        self.assertEqual(join("http://foo.org/a/", "/b"), "http://foo.org/b")
        self.assertEqual(join("http://foo.org/a", "//b"), "http://b/")
        self.assertEqual(join("a", "http://x.org/y"), "http://x.org/y")


class RelativeTests(unittest.TestCase):
    def test_same_origin(self) -> None:
        self.assertEqual(relative("http://host/a/b/", "http://host/a/c"), "../c")
        self.assertEqual(relative("http://the/root", "http://the/root/one.js"), "one.js")

    def test_path_absolute(self) -> None:
        self.assertEqual(relative("/the/root", "/the/root/one.js"), "one.js")
        self.assertEqual(relative("/the/root", "/the/rootone.js"), "../rootone.js")
        self.assertEqual(relative("/the/root", "/therootone.js"), "../../therootone.js")

    def test_path_relative(self) -> None:
        self.assertEqual(relative("", "the/root/one.js"), "the/root/one.js")
        self.assertEqual(relative(".", "the/root/one.js"), "the/root/one.js")

    def test_keeps_query_and_fragment(self) -> None:
        self.assertEqual(relative("/a/", "/a/b.js?x=1#f"), "b.js?x=1#f")

    def test_falls_back_to_normalized_target(self) -> None:
        self.assertEqual(relative("", "/the/root/one.js"), "/the/root/one.js")
        self.assertEqual(relative("/", "the/./root/one.js"), "the/root/one.js")
        self.assertEqual(relative("http://a.org/x/", "http://b.org/y"), "http://b.org/y")
        self.assertEqual(relative("data:text/plain,a", "data:text/plain,b"), "data:text/plain,b")

    def test_compute_relative_url(self) -> None:
        self.assertEqual(compute_relative_url("http://host/a/", "http://host/a/b"), "b")
        self.assertEqual(compute_relative_url("http://host/a/b", "http://host/c"), "../../c")


class ComputeSourceURLTests(unittest.TestCase):
    def test_without_root(self) -> None:
        self.assertEqual(compute_source_url(None, "test.js"), "test.js")
        self.assertEqual(compute_source_url(None, "test.js", "maps/out.js.map"), "maps/test.js")

    def test_with_root(self) -> None:
        self.assertEqual(compute_source_url("src", "test.js"), "src/test.js")
        self.assertEqual(compute_source_url("src/", "test.js"), "src/test.js")
        self.assertEqual(compute_source_url("http://example.com", "test.js"), "http://example.com/test.js")

    def test_strips_leading_slash_under_root(self) -> None:
        self.assertEqual(compute_source_url("root", "/file.js", None), "root/file.js")
        self.assertEqual(compute_source_url("src", "/test.js"), "src/test.js")

    def test_resolves_against_map_url(self) -> None:
        self.assertEqual(
            compute_source_url("src", "test.js", "http://example.com/out.js.map"),
            "http://example.com/src/test.js",
        )
        self.assertEqual(
            compute_source_url(None, "/test.js", "http://example.com/maps/out.js.map"),
            "http://example.com/test.js",
        )


class ParseSourceMapInputTests(unittest.TestCase):
    def test_strips_xssi_prefix(self) -> None:
        self.assertEqual(parse_source_map_input(')]}\'\n{"version":3}'), {"version": 3})
        self.assertEqual(parse_source_map_input(')]}\'garbage\n{"version":3}'), {"version": 3})
        self.assertEqual(parse_source_map_input('{"version":3}'), {"version": 3})


if __name__ == "__main__":
    unittest.main()
