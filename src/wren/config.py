"""Application configuration.

AppConfig is a frozen dataclass — immutable after creation, IDE-autocompletable,
no string-key dict lookups.  ``AppConfig.from_env()`` layers ``WREN_*``
environment variables and ``.env`` entries over the defaults, validated by
a pydantic-settings model.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Annotated, Any

from pydantic import ValidationError, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

from wren.errors import ConfigurationError


@dataclass(frozen=True, slots=True)
class AppConfig:
    """Application configuration. Immutable after creation.

    All fields have sensible defaults. Override what you need::

        config = AppConfig(template_dir="views", use_index_files=True)
    """

    # Server
    host: str = "127.0.0.1"
    port: int = 8000
    debug: bool = False
    workers: int = 0  # 0 = auto-detect from CPU count (production only)

    # Reload (development mode, requires debug=True)
    reload_include: tuple[str, ...] = ()
    reload_dirs: tuple[str, ...] = ()

    # Templates
    template_dir: str | Path = "templates"
    template_page_root: str | Path | None = None  # Sub-root joined to every lookup
    template_suffixes: tuple[str, ...] = ()  # Empty = every regular file is a template
    strict_templates: bool = False  # Conflicting identifiers abort startup
    use_index_files: bool = False
    template_rank: int = 10
    not_found_template: str = "404"
    render_timeout: float | None = None
    autoescape: bool = True
    trim_blocks: bool = True
    lstrip_blocks: bool = True

    # Static files
    public_dir: str | Path | None = "public"
    static_rank: int = 15
    static_index: str = "index.html"
    cache_control: str = "public, max-age=3600"

    # Logging
    log_level: str = "info"
    log_format: str = "text"

    @classmethod
    def from_env(
        cls,
        prefix: str = "WREN_",
        env_file: str | Path | None = ".env",
        **overrides: Any,
    ) -> "AppConfig":
        """Build a config from defaults, the environment, then overrides.

        Each field reads ``<prefix><FIELD_NAME>`` from the process
        environment or, failing that, from *env_file* (``.env`` in the
        working directory by default; ``None`` skips it).  Values are
        validated by :class:`EnvSettings`; fields nobody set keep the
        ``AppConfig`` default.

        Raises:
            ConfigurationError: If a variable fails validation.
        """
        try:
            settings = EnvSettings(_env_prefix=prefix, _env_file=env_file)
        except ValidationError as exc:
            problems = "; ".join(
                f"{prefix}{'.'.join(str(part) for part in error['loc']).upper()}: {error['msg']}"
                for error in exc.errors()
            )
            raise ConfigurationError(f"Invalid configuration: {problems}") from exc

        values = settings.model_dump(exclude_unset=True)
        values.update(overrides)
        return cls(**values)


class EnvSettings(BaseSettings):
    """``WREN_*`` variables and ``.env`` entries, typed like :class:`AppConfig`.

    Tuple fields take comma-separated lists (``WREN_TEMPLATE_SUFFIXES=.html,.hbs``);
    optional fields treat an empty value as unset (``WREN_PUBLIC_DIR=``
    disables static files).
    """

    model_config = SettingsConfigDict(env_prefix="WREN_", env_file=".env", extra="ignore")

    host: str = "127.0.0.1"
    port: int = 8000
    debug: bool = False
    workers: int = 0

    reload_include: Annotated[tuple[str, ...], NoDecode] = ()
    reload_dirs: Annotated[tuple[str, ...], NoDecode] = ()

    template_dir: str | Path = "templates"
    template_page_root: str | Path | None = None
    template_suffixes: Annotated[tuple[str, ...], NoDecode] = ()
    strict_templates: bool = False
    use_index_files: bool = False
    template_rank: int = 10
    not_found_template: str = "404"
    render_timeout: float | None = None
    autoescape: bool = True
    trim_blocks: bool = True
    lstrip_blocks: bool = True

    public_dir: str | Path | None = "public"
    static_rank: int = 15
    static_index: str = "index.html"
    cache_control: str = "public, max-age=3600"

    log_level: str = "info"
    log_format: str = "text"

    @field_validator("reload_include", "reload_dirs", "template_suffixes", mode="before")
    @classmethod
    def _split_commas(cls, value: Any) -> Any:
        if isinstance(value, str):
            return tuple(part.strip() for part in value.split(",") if part.strip())
        return value

    @field_validator("template_page_root", "public_dir", "render_timeout", mode="before")
    @classmethod
    def _blank_is_none(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value
