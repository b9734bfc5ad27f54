"""Configuration dataclasses for template resolution and fetching."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass

EXAMPLES_REPO_ENV = "WEBSEED_EXAMPLES_REPO"
EXAMPLES_REF_ENV = "WEBSEED_EXAMPLES_REF"


@dataclass(frozen=True, kw_only=True)
class ExamplesSource:
    """
    Location of the repository that hosts the named examples.

    Attributes:
        owner: GitHub account owning the repository.
        repo: Repository name.
        ref: Branch, tag or commit examples are fetched from.
        directory: Directory inside the repository holding one folder per example.
    """

    owner: str = "vercel"
    repo: str = "next.js"
    ref: str = "canary"
    directory: str = "examples"

    def __post_init__(self) -> None:
        for field_name in ("owner", "repo", "ref"):
            if not getattr(self, field_name):
                raise ValueError(f"{field_name} must be a non-empty string.")

    @classmethod
    def from_env(cls, env: Mapping[str, str]) -> ExamplesSource:
        """Build a source from ``WEBSEED_EXAMPLES_REPO`` (owner/repo) and ``WEBSEED_EXAMPLES_REF``."""
        kwargs: dict[str, str] = {}
        if repo_spec := env.get(EXAMPLES_REPO_ENV):
            owner, sep, repo = repo_spec.partition("/")
            if not sep or not owner or not repo:
                raise ValueError(f"{EXAMPLES_REPO_ENV} must look like 'owner/repo', got {repo_spec!r}.")
            kwargs["owner"] = owner
            kwargs["repo"] = repo
        if ref := env.get(EXAMPLES_REF_ENV):
            kwargs["ref"] = ref
        return cls(**kwargs)


@dataclass(frozen=True, kw_only=True)
class FetchConfig:
    """
    Settings for remote template retrieval.

    Attributes:
        timeout: Seconds allowed per HTTP request.
        retries: Extra attempts after the first failure. Bounded to at most one.
        codeload_host: Base URL serving repository tarballs.
    """

    timeout: float = 30.0
    retries: int = 1
    codeload_host: str = "https://codeload.github.com"

    def __post_init__(self) -> None:
        if self.timeout <= 0:
            raise ValueError(f"timeout must be positive, got {self.timeout}.")
        if not 0 <= self.retries <= 1:
            raise ValueError(f"retries must be 0 or 1, got {self.retries}.")
