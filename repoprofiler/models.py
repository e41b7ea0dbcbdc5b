"""Profile entities produced by an analysis run.

Every model is frozen and serialises with camelCase aliases, which is the
record shape handed to the downstream documentation generator.
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

EntryKind = Literal["file", "directory"]
Complexity = Literal["low", "medium", "high"]
CicdPlatform = Literal[
    "github-actions", "gitlab-ci", "circleci", "travis", "jenkins", "azure-pipelines"
]
DeploymentPlatform = Literal["vercel", "netlify", "heroku", "docker"]
BadgeCategory = Literal["license", "social", "build", "coverage", "deployment"]


class ProfileModel(BaseModel):
    """Base for all profile entities."""

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )


class RepositoryMetadata(ProfileModel):
    name: str
    description: str = ""
    language: str = "Unknown"
    topics: tuple[str, ...] = ()
    license: str | None = None
    html_url: str
    clone_url: str
    stars: int = 0
    forks: int = 0
    default_branch: str = "main"


class FileEntry(ProfileModel):
    """Repository-root-relative path, forward-slash separated."""

    path: str
    name: str
    type: EntryKind
    size: int | None = None


class CodeSnippet(ProfileModel):
    file_name: str
    content: str
    summary: str = "Awaiting AI summary"
    detected_features: tuple[str, ...] = ()
    complexity: Complexity | None = None
    main_function: str | None = None


class CicdStep(ProfileModel):
    name: str | None = None
    run: str | None = None


class CicdJob(ProfileModel):
    name: str
    steps: tuple[CicdStep, ...] = ()


class CicdConfig(ProfileModel):
    platform: CicdPlatform
    config_files: tuple[str, ...] = ()
    workflows: tuple[str, ...] = ()
    jobs: tuple[CicdJob, ...] = ()
    has_testing: bool = False
    has_deployment: bool = False


class TestConfig(ProfileModel):
    __test__ = False  # not a pytest test class

    framework: str = "Unknown"
    commands: tuple[str, ...] = ()
    coverage: bool = False
    e2e_tests: bool = False
    unit_tests: bool = False
    test_files: tuple[str, ...] = ()


class PlatformConfig(ProfileModel):
    """Settings parsed out of a platform-specific deployment file."""

    framework: str | None = None
    build_command: str | None = None
    output_directory: str | None = None
    runtime_version: str | None = None


class DeploymentConfig(ProfileModel):
    platform: DeploymentPlatform
    config_files: tuple[str, ...] = ()
    requires_env: bool = False
    build_command: str | None = None
    platform_config: PlatformConfig | None = None


class ApiParameter(ProfileModel):
    name: str
    type: str = "string"
    required: bool = True


class ApiEndpoint(ProfileModel):
    path: str
    method: str
    description: str = ""
    parameters: tuple[ApiParameter, ...] = ()
    responses: tuple[str, ...] = ()


class EnvironmentVariable(ProfileModel):
    key: str
    description: str | None = None
    required: bool = True
    default_value: str | None = None


class ContributionGuide(ProfileModel):
    has_custom_guide: bool = False
    code_of_conduct: bool = False
    suggested_steps: tuple[str, ...] = ()


class ProjectLogo(ProfileModel):
    svg_content: str
    primary_color: str
    secondary_color: str
    style: str = "modern"


class Badge(ProfileModel):
    name: str
    url: str
    link: str | None = None
    category: BadgeCategory


class ProjectAnalysis(ProfileModel):
    """The aggregated profile; built once per analysis run."""

    repository: RepositoryMetadata
    main_language: str
    frameworks: tuple[str, ...] = ()
    package_managers: tuple[str, ...] = ()
    dependencies: dict[str, str] = Field(default_factory=dict)
    categorized_dependencies: dict[str, tuple[str, ...]] = Field(default_factory=dict)
    scripts: dict[str, str] = Field(default_factory=dict)
    has_documentation: bool = False
    structure: tuple[FileEntry, ...] = ()
    key_files: tuple[str, ...] = ()
    full_file_tree: str = ""
    summarized_code_snippets: tuple[CodeSnippet, ...] = ()
    api_endpoints: tuple[ApiEndpoint, ...] = ()
    env_variables: tuple[EnvironmentVariable, ...] = ()
    badges: tuple[Badge, ...] = ()
    cicd_config: CicdConfig | None = None
    test_config: TestConfig | None = None
    deployment_config: DeploymentConfig | None = None
    project_logo: ProjectLogo
    contribution_guide: ContributionGuide

    def to_record(self) -> dict[str, Any]:
        """Plain JSON-compatible record; absent optional facets are omitted."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
