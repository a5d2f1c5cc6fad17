"""Settings resolution: keyword arguments, then environment, then .prtag.toml."""

from functools import lru_cache
from pathlib import Path
from typing import Any

import tomlkit
from pydantic import AliasChoices, Field, SecretStr
from pydantic.fields import FieldInfo
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource, SettingsConfigDict

from prtag.errors import ConfigError
from prtag.release import DEFAULT_TRIGGER_PHRASE

CONFIG_PATH = Path(".prtag.toml")
CONFIG_TABLE = "prtag"


@lru_cache(maxsize=1)
def _load_toml() -> tomlkit.TOMLDocument:
    """Load .prtag.toml from the working directory, returning empty document if missing."""
    if not CONFIG_PATH.exists():
        return tomlkit.document()
    return tomlkit.load(CONFIG_PATH.open())


def _toml_defaults() -> dict[str, Any]:
    table = _load_toml().get(CONFIG_TABLE)
    if table is None:
        return {}
    # unwrap() turns tomlkit items into plain str/int/list values
    return dict(table.unwrap())


class TomlConfigSource(PydanticBaseSettingsSource):
    """Lowest-priority source: the [prtag] table of .prtag.toml."""

    def get_field_value(self, field: FieldInfo, field_name: str) -> tuple[Any, str, bool]:
        return _toml_defaults().get(field_name), field_name, False

    def __call__(self) -> dict[str, Any]:
        return {k: v for k, v in _toml_defaults().items() if k in self.settings_cls.model_fields}


class PrtagSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="PRTAG_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    # GitHub Actions exports these without a prefix
    github_token: SecretStr | None = Field(
        default=None, validation_alias=AliasChoices("PRTAG_GITHUB_TOKEN", "GITHUB_TOKEN")
    )
    github_repository: str | None = Field(
        default=None, validation_alias=AliasChoices("PRTAG_GITHUB_REPOSITORY", "GITHUB_REPOSITORY")
    )
    github_api_url: str = Field(
        default="https://api.github.com",
        validation_alias=AliasChoices("PRTAG_GITHUB_API_URL", "GITHUB_API_URL"),
    )
    event_name: str | None = Field(
        default=None, validation_alias=AliasChoices("PRTAG_EVENT_NAME", "GITHUB_EVENT_NAME")
    )
    event_path: Path | None = Field(
        default=None, validation_alias=AliasChoices("PRTAG_EVENT_PATH", "GITHUB_EVENT_PATH")
    )
    output_path: Path | None = Field(
        default=None, validation_alias=AliasChoices("PRTAG_OUTPUT_PATH", "GITHUB_OUTPUT")
    )

    # Release policy
    base_branches: list[str] = ["master", "main"]
    trigger_phrase: str = DEFAULT_TRIGGER_PHRASE
    tags_per_page: int = Field(default=100, ge=1, le=100)  # one page of the tags endpoint

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return (init_settings, env_settings, dotenv_settings, TomlConfigSource(settings_cls), file_secret_settings)

    @property
    def owner_repo(self) -> tuple[str, str]:
        if not self.github_repository or "/" not in self.github_repository:
            raise ConfigError(
                f"Invalid repository '{self.github_repository}'. Set GITHUB_REPOSITORY or "
                f"github_repository in the [{CONFIG_TABLE}] section of {CONFIG_PATH} to owner/repo."
            )
        owner, repo = self.github_repository.split("/", 1)
        return owner, repo


def get_settings(require_credentials: bool = True, **overrides: Any) -> PrtagSettings:
    """Return populated settings, checking credentials when the GitHub API will be used.

    Precedence (highest to lowest):
    1. overrides (CLI flags)
    2. PRTAG_* / GITHUB_* environment variables, then .env
    3. [prtag] table in .prtag.toml
    4. built-in defaults
    """
    settings = PrtagSettings(**{k: v for k, v in overrides.items() if v is not None})

    if require_credentials:
        if not settings.github_token:
            raise ConfigError(
                "Missing GitHub credentials. Set GITHUB_TOKEN (or PRTAG_GITHUB_TOKEN) in the workflow environment."
            )
        _owner, _repo = settings.owner_repo
    return settings
