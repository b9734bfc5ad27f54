"""End-to-end project creation: resolve, fetch, validate, materialize, select."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from webseed.core.config import ExamplesSource
from webseed.core.errors import InvalidProjectName
from webseed.core.fetch import TemplateFetcher
from webseed.core.materialize import materialize
from webseed.core.naming import validate_project_name
from webseed.core.package_manager import Environment, select_package_manager
from webseed.core.source import FetchDescriptor, resolve
from webseed.core.target import TargetValidator
from webseed.core.types import ManifestVariant, PackageManager

logger = logging.getLogger(__name__)


@dataclass(kw_only=True)
class ProjectRequest:
    """
    Everything the user asked for.

    Attributes:
        directory: Destination directory. Its last component becomes the project name.
        template: Template reference: ``None``, ``"default"``, an example name or a URL.
        subpath: Explicit directory inside the repository, overriding any URL path.
        variant: JavaScript or TypeScript flavor.
        package_manager: Explicitly requested package manager, if any.
    """

    directory: Path
    template: str | None = None
    subpath: str | None = None
    variant: ManifestVariant = ManifestVariant.JAVASCRIPT
    package_manager: PackageManager | None = None


@dataclass(kw_only=True)
class CreatedProject:
    path: Path
    name: str
    descriptor: FetchDescriptor
    package_manager: PackageManager
    used_fallback: bool = False
    files: list[str] = field(default_factory=list)


def create_project(
    request: ProjectRequest,
    *,
    fetcher: TemplateFetcher,
    validator: TargetValidator,
    environment: Environment,
    examples: ExamplesSource | None = None,
) -> CreatedProject:
    """Create the project described by *request*. Each step runs only if the previous one succeeded.

    Raises:
        WebseedError: Any failure; see ``webseed.core.errors`` for the classes.
    """
    path = request.directory.resolve()
    name = path.name
    if problems := validate_project_name(name):
        raise InvalidProjectName(name, problems)

    descriptor = resolve(request.template, request.subpath, examples=examples)
    logger.debug("Resolved template to %s", descriptor.describe())

    with fetcher.fetch(descriptor) as tree:
        validator.validate(path)
        files = materialize(tree, path, request.variant, name)
        used_fallback = tree.source != descriptor

    package_manager = select_package_manager(request.package_manager, environment)
    return CreatedProject(
        path=path,
        name=name,
        descriptor=tree.source,
        package_manager=package_manager,
        used_fallback=used_fallback,
        files=files,
    )
