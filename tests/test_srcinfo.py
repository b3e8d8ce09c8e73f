"""Tests for the .SRCINFO reader."""

import pytest

from database.package import PartialPackage
from database.srcinfo import iterate_info, parse_srcinfo, parse_srcinfo_dir
from errors import SrcinfoParseError
from versioning.models import Dependency, Provides, Version

SPLIT_SRCINFO = """pkgbase = python-foo
\tpkgdesc = Foo bindings
\tpkgver = 1.2.3
\tpkgrel = 2
\tepoch = 1
\turl = https://example.org/foo
\tarch = x86_64
\tlicense = MIT
\tmakedepends = python-setuptools
\tdepends = glibc
\tdepends = zlib>=1.2

pkgname = python-foo
\tdepends = python
\tprovides = foo=1.2.3

pkgname = python-foo-docs
\tpkgdesc = Documentation for foo
\tarch = any
\tdepends =
"""


class TestIterateInfo:
    """Line level tokenizing."""

    def test_simple(self):
        assert list(iterate_info("a=b\nc=d")) == [(1, "a", "b"), (2, "c", "d")]

    def test_spaces_are_stripped(self):
        assert list(iterate_info(" a   =    b  ")) == [(1, "a", "b")]

    def test_empty_lines_and_comments_are_skipped(self):
        blob = "  \n# Generated by makepkg\na=b\n\nc=d\n"
        assert list(iterate_info(blob)) == [(3, "a", "b"), (5, "c", "d")]

    def test_value_may_contain_equals(self):
        assert list(iterate_info("provides = foo=1")) == [(1, "provides", "foo=1")]

    def test_garbage_gives_error(self):
        iterator = iterate_info("ab\na = b")
        with pytest.raises(SrcinfoParseError) as exc_info:
            next(iterator)
        assert exc_info.value.line == 1


class TestParseSrcinfo:
    """Split packages and inheritance from pkgbase."""

    def test_split_packages(self):
        packages = parse_srcinfo(SPLIT_SRCINFO)
        assert [p.name for p in packages] == ["python-foo", "python-foo-docs"]
        foo, docs = packages

        assert foo.base == "python-foo"
        assert foo.version == Version(1, "1.2.3", "2")
        assert str(foo.version) == "1:1.2.3-2"
        assert foo.description == "Foo bindings"
        assert foo.url == "https://example.org/foo"
        assert foo.licenses == ["MIT"]
        assert foo.arch == "x86_64"
        assert foo.depends == [Dependency("python")]
        assert foo.makedepends == [Dependency("python-setuptools")]
        assert foo.provides == [Provides.versioned("foo", Version(0, "1.2.3"))]

        assert docs.description == "Documentation for foo"
        assert docs.arch == "any"
        assert docs.depends == []
        assert docs.version == foo.version

    def test_inherits_depends_when_unset(self):
        blob = "pkgbase = a\npkgver = 1\npkgrel = 1\ndepends = b\npkgname = a\n"
        (package,) = parse_srcinfo(blob)
        assert package.depends == [Dependency("b")]
        assert package.version == Version(0, "1", "1")

    def test_missing_pkgver(self):
        with pytest.raises(SrcinfoParseError, match="missing pkgver"):
            parse_srcinfo("pkgbase = a\npkgname = a\n")

    def test_key_before_pkgbase(self):
        with pytest.raises(SrcinfoParseError) as exc_info:
            parse_srcinfo("pkgver = 1\npkgbase = a\n", source="a/.SRCINFO")
        assert str(exc_info.value).startswith("a/.SRCINFO:1: ")

    def test_pkgname_before_pkgbase(self):
        with pytest.raises(SrcinfoParseError, match="pkgname before pkgbase"):
            parse_srcinfo("pkgname = a\n")

    def test_no_packages(self):
        with pytest.raises(SrcinfoParseError, match="no pkgname"):
            parse_srcinfo("pkgbase = a\npkgver = 1\n")

    def test_empty_blob(self):
        with pytest.raises(SrcinfoParseError, match="missing pkgbase"):
            parse_srcinfo("")

    def test_duplicate_scalar(self):
        with pytest.raises(SrcinfoParseError, match="duplicate key: pkgver"):
            parse_srcinfo("pkgbase = a\npkgver = 1\npkgver = 2\npkgname = a\n")

    def test_invalid_epoch(self):
        with pytest.raises(SrcinfoParseError, match="invalid epoch"):
            parse_srcinfo("pkgbase = a\nepoch = x\npkgname = a\n")

    def test_unknown_keys_are_ignored(self):
        blob = "pkgbase = a\npkgver = 1\npkgrel = 1\nsource = a.tar.gz\ndepends_x86_64 = b\npkgname = a\n"
        (package,) = parse_srcinfo(blob)
        assert package.depends == []


class TestPartialPackage:
    """Inheritance helpers."""

    def test_add_base_copies_lists(self):
        base = PartialPackage(pkgver="1", depends=[Dependency("a")])
        package = PartialPackage(pkgname="x")
        package.add_base(base)
        package.depends.append(Dependency("b"))
        assert base.depends == [Dependency("a")]
        assert package.pkgver == "1"

    def test_into_package_requires_pkgname(self):
        with pytest.raises(SrcinfoParseError, match="missing pkgname"):
            PartialPackage(pkgver="1").into_package()


class TestParseSrcinfoDir:
    """Recursive crawl of a packaging tree."""

    def test_crawl(self, tmp_path):
        (tmp_path / "foo").mkdir()
        (tmp_path / "foo" / ".SRCINFO").write_text(SPLIT_SRCINFO, encoding="utf-8")
        (tmp_path / "nested" / "bar").mkdir(parents=True)
        (tmp_path / "nested" / "bar" / ".SRCINFO").write_text(
            "pkgbase = bar\npkgver = 0.1\npkgrel = 1\npkgname = bar\n", encoding="utf-8")
        (tmp_path / "empty").mkdir()

        packages = parse_srcinfo_dir(str(tmp_path))
        assert [f"{p.name}-{p.version}" for p in packages] == [
            "bar-0.1-1",
            "python-foo-1:1.2.3-2",
            "python-foo-docs-1:1.2.3-2",
        ]

    def test_error_names_file(self, tmp_path):
        (tmp_path / "broken").mkdir()
        (tmp_path / "broken" / ".SRCINFO").write_text("nonsense\n", encoding="utf-8")
        with pytest.raises(SrcinfoParseError) as exc_info:
            parse_srcinfo_dir(str(tmp_path))
        assert "broken" in str(exc_info.value)
