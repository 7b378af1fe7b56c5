import logging
import os
import sys
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, model_validator
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource, SettingsConfigDict

# =============================================================================
# Publish Configuration
# =============================================================================


class GitConfig(BaseModel):
    """Fixed repository used when users may not pick one themselves."""

    repo_url: str | None = None  # e.g. "github.com?owner=acme&repo=gitops"
    target_branch: str | None = None  # Defaults to "main" when unset


class PublishPhaseConfig(BaseModel):
    """How generated manifests are published from a template run."""

    target: str | None = None  # github, gitlab, bitbucket, bitbucketcloud or yaml
    allow_repo_selection: bool = False
    allowed_targets: list[str] | None = None  # Explicit RepoUrlPicker allowed hosts
    git: GitConfig = GitConfig()


# =============================================================================
# Source Configuration
# =============================================================================


class XRDTemplatesConfig(BaseModel):
    """Template generation for Crossplane composite resource definitions."""

    enabled: bool = True
    ingest_all_xrds: bool = True  # False requires the add-to-catalog annotation
    convert_default_values_to_placeholders: bool = False
    publish_phase: PublishPhaseConfig = PublishPhaseConfig()


class CrossplaneConfig(BaseModel):
    enabled: bool = True
    xrds: XRDTemplatesConfig = XRDTemplatesConfig()


class LabelSelector(BaseModel):
    """Single key/value label match."""

    key: str
    value: str

    @classmethod
    def parse(cls, expression: str) -> "LabelSelector":
        """Parse a ``key=value`` expression."""
        key, sep, value = expression.partition("=")
        if not sep or not key:
            raise ValueError(f"Invalid label selector '{expression}', expected key=value")
        return cls(key=key.strip(), value=value.strip())


class CRDTemplatesConfig(BaseModel):
    """Template generation for plain Kubernetes CRDs.

    Exactly one of ``crds`` and ``crd_label_selector`` selects CRDs; when both
    are set nothing is selected.
    """

    crds: list[str] | None = None  # "plural.group" targets, e.g. "certificates.cert-manager.io"
    crd_label_selector: LabelSelector | None = None
    convert_default_values_to_placeholders: bool = False
    publish_phase: PublishPhaseConfig = PublishPhaseConfig()


class DiscoveryConfig(BaseModel):
    """Discovery backend selection.

    The `config` field is validated at runtime against the backend's
    config_class, allowing external backends to define their own schemas.
    """

    backend: str = "file"  # Entry point name in the kubecatalog.discovery group
    config: dict[str, Any] = {}


# =============================================================================
# Application Configuration
# =============================================================================


class YamlConfigSettingsSource(PydanticBaseSettingsSource):
    """Load settings from YAML file specified by KUBECATALOG_CONFIG_FILE env var."""

    def get_field_value(self, field: Any, field_name: str) -> tuple[Any, str, bool]:
        """Get the value for a field from the YAML config."""
        yaml_data = self._load_yaml_config()
        field_value = yaml_data.get(field_name)
        return field_value, field_name, False

    def __call__(self) -> dict[str, Any]:
        """Return all settings from YAML file."""
        return self._load_yaml_config()

    def _load_yaml_config(self) -> dict[str, Any]:
        config_file = os.environ.get("KUBECATALOG_CONFIG_FILE")
        if config_file:
            path = Path(config_file).expanduser()
            if path.exists():
                return yaml.safe_load(path.read_text()) or {}
        return {}


class LoggingConfig(BaseModel):
    level: str = "INFO"
    format: str = "%(asctime)s %(levelname)-8s [%(name)s] %(message)s"
    date_format: str = "%Y-%m-%d %H:%M:%S"

    @property
    def file(self) -> str | None:
        """Get log file path from KUBECATALOG_LOG_FILE env var."""
        return os.environ.get("KUBECATALOG_LOG_FILE")


class Config(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="KUBECATALOG_",
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",  # Allows KUBECATALOG_CROSSPLANE__XRDS__ENABLED=false
        extra="ignore",
    )

    annotation_prefix: str = "terasky.backstage.io"
    entity_name_prefix: str = ""  # Prepended to every generated entity name
    allowed_cluster_names: list[str] | None = None
    discovery: DiscoveryConfig = DiscoveryConfig()
    crossplane: CrossplaneConfig = CrossplaneConfig()
    generic_crd_templates: CRDTemplatesConfig = CRDTemplatesConfig()
    logging: LoggingConfig = LoggingConfig()

    @model_validator(mode="after")
    def _strip_prefix(self) -> "Config":
        self.annotation_prefix = self.annotation_prefix.rstrip("/")
        return self

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Customize settings sources to include YAML config.

        Priority (highest to lowest):
        1. init_settings - values passed to Config()
        2. env_settings - environment variables
        3. dotenv_settings - .env file
        4. yaml_settings - KUBECATALOG_CONFIG_FILE yaml
        5. file_secret_settings - secrets from files
        """
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            YamlConfigSettingsSource(settings_cls),
            file_secret_settings,
        )


def configure_logging(config: LoggingConfig) -> None:
    """Configure Python logging based on config.

    Call once at startup, before the transform runs, so every module logger
    picks up the handlers.
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(config.level)

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    formatter = logging.Formatter(config.format, datefmt=config.date_format)

    if config.file:
        log_path = Path(config.file).expanduser()
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handler: logging.Handler = logging.FileHandler(log_path)
    else:
        handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(config.level)
    handler.setFormatter(formatter)
    root_logger.addHandler(handler)

    # Reduce noise from third-party libraries
    logging.getLogger("urllib3").setLevel(logging.WARNING)
    logging.getLogger("opentelemetry").setLevel(logging.WARNING)

    logging.debug("Logging configured: level=%s, file=%s", config.level, config.file)
