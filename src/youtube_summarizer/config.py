"""Server configuration via environment variables."""

from __future__ import annotations

import logging
import os

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .prompts.summary import DEFAULT_FAMILY_FORMATTING, NEWER_FAMILY_FORMATTING

DEFAULT_MODEL = "gemini-1.5-flash"
DEFAULT_NEWER_MARKERS: tuple[str, ...] = ("2.0",)
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


class ModelFamily(BaseModel):
    """Generation defaults shared by a group of Gemini model ids.

    A model belongs to the family when any of ``markers`` occurs in its id.
    The family with no markers is the catch-all default.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    markers: tuple[str, ...] = ()
    temperature: float
    top_p: float = 0.8
    max_output_tokens: int
    clean_output: bool = False
    formatting_instructions: str

    @field_validator("markers")
    @classmethod
    def strip_markers(cls, value: tuple[str, ...]) -> tuple[str, ...]:
        return tuple(m.strip() for m in value if m and m.strip())

    def matches(self, model: str) -> bool:
        return any(marker in model for marker in self.markers)


def default_model_families(
    newer_markers: tuple[str, ...] = DEFAULT_NEWER_MARKERS,
) -> tuple[tuple[ModelFamily, ...], ModelFamily]:
    """Return ``(matched_families, fallback_family)`` with the stock settings."""
    newer = ModelFamily(
        name="newer",
        markers=newer_markers,
        temperature=0.6,
        max_output_tokens=8192,
        clean_output=True,
        formatting_instructions=NEWER_FAMILY_FORMATTING,
    )
    fallback = ModelFamily(
        name="default",
        temperature=0.7,
        max_output_tokens=3000,
        formatting_instructions=DEFAULT_FAMILY_FORMATTING,
    )
    return (newer,), fallback


def _parse_markers(raw: str) -> tuple[str, ...]:
    markers = tuple(part.strip() for part in raw.split(",") if part.strip())
    return markers or DEFAULT_NEWER_MARKERS


def _resolve_tracing_enabled(flag_value: str, tracking_uri: str) -> bool:
    """``GEMINI_TRACING_ENABLED=false`` always wins; otherwise a tracking URI enables tracing."""
    if flag_value.lower() == "false":
        return False
    return bool(tracking_uri)


class ServerConfig(BaseModel):
    """Runtime configuration resolved once from the environment."""

    model_config = ConfigDict(frozen=True)

    gemini_api_key: str = Field(default="")
    youtube_api_key: str = Field(default="")
    default_model: str = Field(default=DEFAULT_MODEL)
    model_families: tuple[ModelFamily, ...] = Field(
        default_factory=lambda: default_model_families()[0]
    )
    default_family: ModelFamily = Field(
        default_factory=lambda: default_model_families()[1]
    )
    transcript_languages: tuple[str, ...] = ("en",)
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=5000)
    log_level: str = Field(default="INFO")
    tracing_enabled: bool = Field(default=False)
    mlflow_tracking_uri: str = Field(default="")
    mlflow_experiment_name: str = Field(default="youtube-summarizer")

    @field_validator("port")
    @classmethod
    def validate_port(cls, value: int) -> int:
        if not 1 <= value <= 65535:
            raise ValueError(f"Invalid port {value}; must be between 1 and 65535")
        return value

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        level = value.strip().upper()
        if level not in logging.getLevelNamesMapping():
            raise ValueError(f"Unknown log level '{value}'")
        return level

    @field_validator("transcript_languages")
    @classmethod
    def validate_languages(cls, value: tuple[str, ...]) -> tuple[str, ...]:
        languages = tuple(lang.strip() for lang in value if lang.strip())
        if not languages:
            raise ValueError("At least one transcript language is required")
        return languages

    @model_validator(mode="after")
    def validate_families(self) -> ServerConfig:
        for family in self.model_families:
            if not family.markers:
                raise ValueError(f"Model family '{family.name}' needs at least one marker")
        return self

    @property
    def has_gemini_key(self) -> bool:
        return bool(self.gemini_api_key)

    @property
    def has_youtube_key(self) -> bool:
        return bool(self.youtube_api_key)

    def resolve_family(self, model: str) -> ModelFamily:
        """Return the first family whose markers match *model*, else the default."""
        for family in self.model_families:
            if family.matches(model):
                return family
        return self.default_family

    @classmethod
    def from_env(cls) -> ServerConfig:
        """Build config from environment variables."""
        families, fallback = default_model_families(
            _parse_markers(os.getenv("GEMINI_NEWER_MODEL_MARKERS", ""))
        )
        languages = os.getenv("TRANSCRIPT_LANGUAGES", "en")
        return cls(
            gemini_api_key=os.getenv("GEMINI_API_KEY", ""),
            youtube_api_key=os.getenv("YOUTUBE_API_KEY", ""),
            default_model=os.getenv("GEMINI_MODEL", "") or DEFAULT_MODEL,
            model_families=families,
            default_family=fallback,
            transcript_languages=tuple(languages.split(",")),
            host=os.getenv("HOST", "0.0.0.0"),
            port=int(os.getenv("PORT", "5000")),
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            tracing_enabled=_resolve_tracing_enabled(
                os.getenv("GEMINI_TRACING_ENABLED", ""),
                os.getenv("MLFLOW_TRACKING_URI", ""),
            ),
            mlflow_tracking_uri=os.getenv("MLFLOW_TRACKING_URI", ""),
            mlflow_experiment_name=os.getenv("MLFLOW_EXPERIMENT_NAME", "youtube-summarizer"),
        )


_config: ServerConfig | None = None


def get_config() -> ServerConfig:
    """Return the process-wide config, creating it on first access.

    Loads ``~/.config/youtube-summarizer/.env`` before reading env vars.
    Process environment always takes precedence over the config file.
    """
    global _config
    if _config is None:
        from .dotenv import load_dotenv

        injected = load_dotenv()
        if injected:
            logging.getLogger(__name__).info(
                "Loaded %d var(s) from config: %s",
                len(injected),
                ", ".join(injected.keys()),
            )
        _config = ServerConfig.from_env()
    return _config


def configure_logging(level: str = "INFO") -> None:
    """Install the console log handler used by every entry point."""
    logging.basicConfig(level=level, format=LOG_FORMAT)
