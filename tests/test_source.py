"""Tests for template reference resolution."""

from __future__ import annotations

import pytest

from webseed.core.config import ExamplesSource
from webseed.core.errors import InvalidReference
from webseed.core.source import (
    BUNDLED_DESCRIPTOR,
    EXAMPLES,
    RETRY_TESTING_EXAMPLE,
    FetchDescriptor,
    SourceKind,
    resolve,
)

REPO_URL = "https://github.com/vercel/next.js/tree/canary"


class TestDefaultReference:
    """References that select the bundled template."""

    def test_none_is_bundled(self) -> None:
        assert resolve(None) == BUNDLED_DESCRIPTOR

    def test_default_sentinel_is_bundled(self) -> None:
        descriptor = resolve("default")
        assert descriptor.is_bundled
        assert descriptor == resolve(None)

    def test_subpath_with_default_rejected(self) -> None:
        with pytest.raises(InvalidReference):
            resolve(None, "examples/basic-css")


class TestNamedExamples:
    """Registered example names."""

    def test_known_name(self) -> None:
        descriptor = resolve("basic-css")
        assert descriptor == FetchDescriptor(
            kind=SourceKind.REMOTE,
            owner="vercel",
            repo="next.js",
            ref="canary",
            subpath="examples/basic-css",
        )

    @pytest.mark.parametrize("name", ["not a real example", "nope", "basic_css", "DEFAULT"])
    def test_unknown_name(self, name: str) -> None:
        with pytest.raises(InvalidReference, match="Could not locate an example named"):
            resolve(name)

    def test_empty_reference(self) -> None:
        with pytest.raises(InvalidReference):
            resolve("   ")

    def test_custom_examples_source(self) -> None:
        source = ExamplesSource(owner="acme", repo="starters", ref="main", directory="templates")
        descriptor = resolve("hello-world", examples=source)
        assert (descriptor.owner, descriptor.repo, descriptor.ref) == ("acme", "starters", "main")
        assert descriptor.subpath == "templates/hello-world"

    def test_retry_testing_name_is_registered(self) -> None:
        assert RETRY_TESTING_EXAMPLE in EXAMPLES
        assert resolve(RETRY_TESTING_EXAMPLE).subpath == f"examples/{RETRY_TESTING_EXAMPLE}"

    def test_subpath_with_name_rejected(self) -> None:
        with pytest.raises(InvalidReference):
            resolve("basic-css", "examples/other")


class TestGithubUrls:
    """Parsing GitHub repository URLs."""

    def test_repository_root(self) -> None:
        descriptor = resolve("https://github.com/acme/site")
        assert descriptor.kind is SourceKind.REMOTE
        assert (descriptor.owner, descriptor.repo) == ("acme", "site")
        assert descriptor.ref == "HEAD"
        assert descriptor.subpath == ""

    def test_git_suffix_stripped(self) -> None:
        assert resolve("https://github.com/acme/site.git").repo == "site"

    def test_tree_with_branch(self) -> None:
        descriptor = resolve(REPO_URL)
        assert descriptor.ref == "canary"
        assert descriptor.subpath == ""

    def test_tree_with_embedded_path(self) -> None:
        descriptor = resolve(f"{REPO_URL}/examples/basic-css/")
        assert descriptor.ref == "canary"
        assert descriptor.subpath == "examples/basic-css"

    def test_explicit_subpath_overrides_embedded(self) -> None:
        """An explicit example path replaces the path from the URL."""
        descriptor = resolve(f"{REPO_URL}/examples/basic-css", "examples/hello-world")
        assert descriptor.subpath == "examples/hello-world"

    def test_explicit_subpath_alone(self) -> None:
        descriptor = resolve(REPO_URL, "/examples/basic-css/")
        assert descriptor.subpath == "examples/basic-css"

    def test_empty_override_keeps_embedded_path(self) -> None:
        """An empty example path is treated as not given."""
        assert resolve(f"{REPO_URL}/examples/basic-css", "").subpath == "examples/basic-css"
        assert resolve(REPO_URL, "").subpath == ""

    @pytest.mark.parametrize(
        "url",
        [
            "https://gitlab.com/acme/site",
            "ftp://github.com/acme/site",
            "https://github.com/acme",
            "https://github.com/acme/site/blob/main/README.md",
            "https://github.com/acme/site/tree",
        ],
    )
    def test_malformed_urls(self, url: str) -> None:
        with pytest.raises(InvalidReference, match="Invalid URL"):
            resolve(url)

    def test_parent_segments_rejected(self) -> None:
        with pytest.raises(InvalidReference):
            resolve(REPO_URL, "examples/../../etc")


class TestDescribe:
    """Human-readable descriptor summaries."""

    def test_bundled(self) -> None:
        assert BUNDLED_DESCRIPTOR.describe() == "the default template"

    def test_remote(self) -> None:
        assert resolve("basic-css").describe() == "vercel/next.js@canary:examples/basic-css"
