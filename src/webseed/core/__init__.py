"""Template resolution and project materialization."""

from webseed.core.config import ExamplesSource, FetchConfig
from webseed.core.errors import (
    ConflictExists,
    FetchFailed,
    InstallFailed,
    InvalidProjectName,
    InvalidReference,
    NotWritable,
    WebseedError,
    WriteFailed,
)
from webseed.core.fetch import StagedTree, TemplateFetcher, bundled_tree
from webseed.core.materialize import materialize, variant_dependencies
from webseed.core.naming import validate_project_name
from webseed.core.package_manager import Environment, select_package_manager
from webseed.core.pipeline import CreatedProject, ProjectRequest, create_project
from webseed.core.source import EXAMPLES, FetchDescriptor, SourceKind, resolve
from webseed.core.target import DestinationState, TargetValidator
from webseed.core.types import ManifestVariant, PackageManager

__all__ = [
    "EXAMPLES",
    "ConflictExists",
    "CreatedProject",
    "DestinationState",
    "Environment",
    "ExamplesSource",
    "FetchConfig",
    "FetchDescriptor",
    "FetchFailed",
    "InstallFailed",
    "InvalidProjectName",
    "InvalidReference",
    "ManifestVariant",
    "NotWritable",
    "PackageManager",
    "ProjectRequest",
    "SourceKind",
    "StagedTree",
    "TargetValidator",
    "TemplateFetcher",
    "WebseedError",
    "WriteFailed",
    "bundled_tree",
    "create_project",
    "materialize",
    "resolve",
    "select_package_manager",
    "validate_project_name",
    "variant_dependencies",
]
