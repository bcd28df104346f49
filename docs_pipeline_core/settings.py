"""Build configuration for the documentation pipeline.

@public

Settings are loaded from environment variables (prefixed ``DOCS_``) with .env file
support via pydantic-settings, and can be overridden programmatically by passing
keyword arguments (the CLI does this for paths given on the command line).

Environment variables:
    DOCS_BASE_PATH: Repository root that relative paths are resolved against
    DOCS_DOCS_PATH: Folder holding the authored documents and ``_partials`` folders
    DOCS_MANIFEST_PATH: Navigation manifest JSON file
    DOCS_TYPEDOC_PATH: Folder holding generated typedoc fragments
    DOCS_DIST_PATH: Output folder
    DOCS_VALID_SDKS: JSON list of SDK identifiers
    DOCS_FAIL_ON_REFERENCE_ERRORS: Treat broken links/anchors/fragments as hard failures

Example:
    >>> from docs_pipeline_core.settings import BuildSettings
    >>> config = BuildSettings(base_path=Path("."), valid_sdks=("react", "vue"))
    >>> config.docs_dir
    PosixPath('docs')

Note:
    Settings are frozen after initialization. Create a new instance to change them.
"""

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from docs_pipeline_core.sdks import DEFAULT_SDKS, SdkUniverse


class IgnoreWarnings(BaseModel):
    """Per-file diagnostic codes to suppress, split by source section.

    Keys are file paths relative to their section root (``guides/overview.mdx`` for docs,
    ``_partials/setup.mdx`` for partials, ``clerk-react/use-auth.mdx`` for typedoc).
    """

    model_config = ConfigDict(frozen=True)

    docs: dict[str, tuple[str, ...]] = Field(default_factory=dict)
    partials: dict[str, tuple[str, ...]] = Field(default_factory=dict)
    typedoc: dict[str, tuple[str, ...]] = Field(default_factory=dict)


class BuildSettings(BaseSettings):
    """Core configuration for a documentation build.

    @public

    Attributes:
        base_path: Root every relative path below is resolved against.
        docs_path: Authored documents folder (``.mdx`` files and ``_partials`` folders).
        manifest_path: Navigation manifest (``{"navigation": [[...]]}``).
        typedoc_path: Generated typedoc fragments folder. May be missing.
        dist_path: Output folder for built documents.
        base_docs_link: URL prefix of internal documentation links.
        valid_sdks: The closed universe of SDK identifiers.
        ignored_paths: Link/document prefixes that are never validated.
        ignored_links: Exact link targets that are never validated.
        ignore_warnings: Diagnostic codes suppressed per file.
        fail_on_reference_errors: Escalate every reference diagnostic to a hard failure.
        strict_reference_docs: Document keys whose reference diagnostics are hard failures.
        max_concurrency: Upper bound of concurrently processed documents/variants.
        watch_debounce_seconds: Quiet period collecting file events before a rebuild.
    """

    model_config = SettingsConfigDict(
        env_prefix="DOCS_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
    )

    base_path: Path = Path(".")
    docs_path: Path = Path("docs")
    manifest_path: Path = Path("docs/manifest.json")
    typedoc_path: Path = Path("typedoc")
    dist_path: Path = Path("dist")
    base_docs_link: str = "/docs/"

    valid_sdks: tuple[str, ...] = DEFAULT_SDKS
    ignored_paths: tuple[str, ...] = ()
    ignored_links: tuple[str, ...] = ()
    ignore_warnings: IgnoreWarnings = Field(default_factory=IgnoreWarnings)

    fail_on_reference_errors: bool = False
    strict_reference_docs: tuple[str, ...] = ()

    max_concurrency: int = 16
    watch_debounce_seconds: float = 0.25

    @field_validator("base_docs_link")
    @classmethod
    def _ensure_trailing_slash(cls, value: str) -> str:
        if not value.startswith("/"):
            raise ValueError(f"base_docs_link must start with '/', got {value!r}")
        return value if value.endswith("/") else value + "/"

    @field_validator("max_concurrency")
    @classmethod
    def _positive_concurrency(cls, value: int) -> int:
        if value < 1:
            raise ValueError(f"max_concurrency must be >= 1, got {value}")
        return value

    def resolve(self, path: Path) -> Path:
        return path if path.is_absolute() else self.base_path / path

    @property
    def docs_dir(self) -> Path:
        return self.resolve(self.docs_path)

    @property
    def manifest_file(self) -> Path:
        return self.resolve(self.manifest_path)

    @property
    def typedoc_dir(self) -> Path:
        return self.resolve(self.typedoc_path)

    @property
    def dist_dir(self) -> Path:
        return self.resolve(self.dist_path)

    @property
    def universe(self) -> SdkUniverse:
        return SdkUniverse.of(self.valid_sdks)

    def is_ignored_link(self, url: str) -> bool:
        """True when a link target is excluded from validation."""
        return url in self.ignored_links or any(url.startswith(prefix) for prefix in self.ignored_paths)


settings = BuildSettings()
"""Global settings instance built from the environment.

@public

Components take an explicit BuildSettings argument; this instance is what the CLI
starts from before applying command-line overrides.
"""
