"""Turn a raw template reference into an unambiguous fetch descriptor."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from urllib.parse import urlsplit

from webseed.core.config import ExamplesSource
from webseed.core.errors import InvalidReference

logger = logging.getLogger(__name__)

DEFAULT_TEMPLATE = "default"
RETRY_TESTING_EXAMPLE = "__internal-testing-retry"

_GITHUB_HOSTS = frozenset({"github.com", "www.github.com"})
_DEFAULT_REF = "HEAD"

EXAMPLES: dict[str, str] = {
    "api-routes": "API routes with a JSON endpoint and typed responses.",
    "basic-css": "Styling pages with plain CSS and CSS modules.",
    "blog-starter": "Markdown blog with static generation.",
    "hello-world": "The smallest possible application.",
    "with-docker": "Production container image with a multi-stage build.",
    "with-jest": "Unit testing setup with Jest and Testing Library.",
    "with-redux": "Global state management with Redux Toolkit.",
    "with-tailwindcss": "Utility-first styling with Tailwind CSS.",
    "with-typescript": "TypeScript configuration with typed pages.",
    RETRY_TESTING_EXAMPLE: "Points at a missing path to exercise retry and fallback.",
}


class SourceKind(str, Enum):
    """Where the files for a descriptor come from."""

    BUNDLED = "bundled"
    REMOTE = "remote"


@dataclass(frozen=True, kw_only=True)
class FetchDescriptor:
    """
    Resolved location of a template's source files.

    Attributes:
        kind: Bundled default or remote repository.
        owner: Repository owner, empty for the bundled template.
        repo: Repository name, empty for the bundled template.
        ref: Branch, tag or commit to fetch.
        subpath: Directory inside the repository, ``""`` for the repository root.
    """

    kind: SourceKind
    owner: str = ""
    repo: str = ""
    ref: str = ""
    subpath: str = ""

    @property
    def is_bundled(self) -> bool:
        return self.kind is SourceKind.BUNDLED

    def describe(self) -> str:
        if self.is_bundled:
            return "the default template"
        location = f"{self.owner}/{self.repo}@{self.ref}"
        return f"{location}:{self.subpath}" if self.subpath else location


BUNDLED_DESCRIPTOR = FetchDescriptor(kind=SourceKind.BUNDLED)


def _normalize_subpath(subpath: str) -> str:
    parts = [p for p in subpath.replace("\\", "/").split("/") if p and p != "."]
    if ".." in parts:
        raise InvalidReference(f"Invalid example path {subpath!r}: '..' segments are not allowed.")
    return "/".join(parts)


def _looks_like_url(reference: str) -> bool:
    return "://" in reference


def _parse_github_url(reference: str) -> FetchDescriptor:
    parts = urlsplit(reference)
    if parts.scheme not in ("http", "https") or parts.hostname not in _GITHUB_HOSTS:
        raise InvalidReference(
            f"Invalid URL: {reference!r}. Only GitHub repositories are supported."
        )

    segments = [s for s in parts.path.split("/") if s]
    if len(segments) < 2:
        raise InvalidReference(f"Invalid URL: {reference!r}. Expected a repository URL.")

    owner, repo = segments[0], segments[1].removesuffix(".git")
    ref = _DEFAULT_REF
    subpath = ""
    if len(segments) > 2:
        if segments[2] != "tree" or len(segments) < 4:
            raise InvalidReference(
                f"Invalid URL: {reference!r}. Expected "
                "https://github.com/<owner>/<repo>/tree/<branch>[/<path>]."
            )
        ref = segments[3]
        subpath = _normalize_subpath("/".join(segments[4:]))

    return FetchDescriptor(kind=SourceKind.REMOTE, owner=owner, repo=repo, ref=ref, subpath=subpath)


def resolve(
    reference: str | None,
    explicit_subpath: str | None = None,
    *,
    examples: ExamplesSource | None = None,
) -> FetchDescriptor:
    """Resolve a template reference.

    Args:
        reference: ``None``, ``"default"``, a registered example name or a GitHub URL.
        explicit_subpath: Directory inside the repository. Always overrides a path
            embedded in the URL.
        examples: Repository hosting the named examples.

    Raises:
        InvalidReference: Unknown example name, malformed URL, or a subpath given
            for a reference that cannot take one.
    """
    examples = examples or ExamplesSource()

    if reference is None or reference == DEFAULT_TEMPLATE:
        if explicit_subpath:
            raise InvalidReference("An example path can only be used with a repository URL.")
        return BUNDLED_DESCRIPTOR

    reference = reference.strip()
    if not reference:
        raise InvalidReference("Please provide an example name or URL.")

    if _looks_like_url(reference):
        descriptor = _parse_github_url(reference)
        if explicit_subpath:
            override = _normalize_subpath(explicit_subpath)
            if descriptor.subpath and descriptor.subpath != override:
                logger.debug("Example path %r overrides %r from the URL", override, descriptor.subpath)
            descriptor = FetchDescriptor(
                kind=descriptor.kind,
                owner=descriptor.owner,
                repo=descriptor.repo,
                ref=descriptor.ref,
                subpath=override,
            )
        return descriptor

    if reference not in EXAMPLES:
        raise InvalidReference(
            f"Could not locate an example named {reference!r}. "
            "Run with --list-examples to see the available examples."
        )
    if explicit_subpath:
        raise InvalidReference("An example path can only be used with a repository URL.")

    return FetchDescriptor(
        kind=SourceKind.REMOTE,
        owner=examples.owner,
        repo=examples.repo,
        ref=examples.ref,
        subpath=_normalize_subpath(f"{examples.directory}/{reference}"),
    )
