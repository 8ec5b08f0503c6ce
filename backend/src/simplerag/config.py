import logging
import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

import toml
from dotenv import load_dotenv

logger = logging.getLogger(__name__)

DEFAULT_CHUNK_SIZE = 500
DEFAULT_CHUNK_OVERLAP = 100
DEFAULT_BATCH_SIZE = 10
DEFAULT_TOP_K = 5
DEFAULT_SCORE_THRESHOLD = 0.6

DEFAULT_VECTOR_STORE_URL = "http://localhost:6333"
DEFAULT_COLLECTION_NAME = "documents"

PROMPT_TEMPLATE = """Answer the question based only on the following context:

{context}

---

Answer the question based on the above context: {question}"""


def resolve_path(path: str | Path, config_path: Path) -> Path:
    """Resolve a path relative to the config file's parent directory.

    If the path is absolute, return it as-is.
    If the path is relative, resolve it relative to the config file's parent.

    Args:
        path: The path to resolve (absolute or relative).
        config_path: Path to the configuration file.

    Returns:
        Resolved absolute path.
    """
    path = Path(path)
    if path.is_absolute():
        return path
    return (config_path.parent / path).resolve()


def find_config_path(explicit_path: Path | None = None) -> Path | None:
    """Centralized config path resolution.

    Returns None when no config file exists; settings then come from the
    environment alone.
    """
    if explicit_path:
        if not explicit_path.exists():
            raise FileNotFoundError(f"Config file not found: {explicit_path}")
        return explicit_path
    candidates = [
        Path("config.toml"),
        Path(__file__).parent.parent.parent.parent / "config.toml",
    ]
    for path in candidates:
        if path.exists():
            return path
    return None


def load_config(config_path: Path | None = None) -> dict[str, Any]:
    """Load configuration from TOML file with environment variable substitution.

    Supports ${ENV_VAR} and ${ENV_VAR:-default} syntax. A ``.env`` file in
    the working directory is loaded into the environment first.

    Args:
        config_path: Path to the TOML configuration file, or None for an
            empty configuration.

    Returns:
        Dictionary with configuration values.
    """
    load_dotenv()
    if config_path is None:
        return {}
    config = toml.load(config_path)
    return _substitute_env_vars(config)


def _substitute_env_vars(value: Any) -> Any:
    """Recursively substitute environment variables in config values."""
    if isinstance(value, str):
        return _substitute_string(value)
    elif isinstance(value, dict):
        return {k: _substitute_env_vars(v) for k, v in value.items()}
    elif isinstance(value, list):
        return [_substitute_env_vars(item) for item in value]
    return value


def _substitute_string(value: str) -> str:
    """Substitute environment variables in a string.

    Supports ${VAR} and ${VAR:-default} syntax.
    """
    pattern = r"\$\{([^}:]+)(?::-([^}]*))?\}"

    def replacer(match):
        var_name = match.group(1)
        default = match.group(2) or ""
        return os.environ.get(var_name, default)

    return re.sub(pattern, replacer, value)


def get_config_value(config: dict, key_path: str, default: Any = None) -> Any:
    """Get a nested config value using dot notation.

    Empty strings (e.g. an unset ``${VAR}`` placeholder) count as missing.

    Args:
        config: Configuration dictionary.
        key_path: Dot-separated path (e.g., "embedding.model").
        default: Default value if key not found.

    Returns:
        The config value or default.
    """
    keys = key_path.split(".")
    value = config

    for key in keys:
        if isinstance(value, dict) and key in value:
            value = value[key]
        else:
            return default

    if value == "":
        return default
    return value


def _setting(
    config: dict, key_path: str, env_var: str | None, default: Any = None
) -> Any:
    """Look a setting up in the config file, then the environment."""
    if env_var:
        default = os.environ.get(env_var) or default
    return get_config_value(config, key_path, default)


def _fill_unset(instance: Any, **defaults: Any) -> None:
    """Replace None fields of a frozen dataclass with their defaults."""
    for name, default in defaults.items():
        if getattr(instance, name) is None:
            object.__setattr__(instance, name, default)


@dataclass(frozen=True)
class IndexerConfig:
    """Indexing options. Unset fields fall back to their documented defaults."""

    chunk_size: Optional[int] = DEFAULT_CHUNK_SIZE
    chunk_overlap: Optional[int] = DEFAULT_CHUNK_OVERLAP
    enable_logging: Optional[bool] = True
    batch_size: Optional[int] = DEFAULT_BATCH_SIZE

    def __post_init__(self) -> None:
        _fill_unset(
            self,
            chunk_size=DEFAULT_CHUNK_SIZE,
            chunk_overlap=DEFAULT_CHUNK_OVERLAP,
            enable_logging=True,
            batch_size=DEFAULT_BATCH_SIZE,
        )
        if self.chunk_size <= 0:
            raise ValueError(f"chunk_size must be positive, got {self.chunk_size}")
        if not 0 <= self.chunk_overlap < self.chunk_size:
            raise ValueError(
                f"chunk_overlap ({self.chunk_overlap}) must be non-negative "
                f"and smaller than chunk_size ({self.chunk_size})"
            )
        if self.batch_size <= 0:
            raise ValueError(f"batch_size must be positive, got {self.batch_size}")

    @classmethod
    def from_config(cls, config: dict[str, Any]) -> "IndexerConfig":
        return cls(
            chunk_size=int(
                get_config_value(config, "ingestion.chunk_size", DEFAULT_CHUNK_SIZE)
            ),
            chunk_overlap=int(
                get_config_value(
                    config, "ingestion.chunk_overlap", DEFAULT_CHUNK_OVERLAP
                )
            ),
            enable_logging=_as_bool(
                get_config_value(config, "ingestion.enable_logging", True)
            ),
            batch_size=int(
                get_config_value(config, "ingestion.batch_size", DEFAULT_BATCH_SIZE)
            ),
        )


@dataclass(frozen=True)
class QueryConfig:
    """Retrieval options for the query service."""

    top_k: Optional[int] = DEFAULT_TOP_K
    score_threshold: Optional[float] = DEFAULT_SCORE_THRESHOLD
    prompt_template: Optional[str] = PROMPT_TEMPLATE

    def __post_init__(self) -> None:
        _fill_unset(
            self,
            top_k=DEFAULT_TOP_K,
            score_threshold=DEFAULT_SCORE_THRESHOLD,
            prompt_template=PROMPT_TEMPLATE,
        )

    @classmethod
    def from_config(cls, config: dict[str, Any]) -> "QueryConfig":
        return cls(
            top_k=int(get_config_value(config, "retrieval.top_k", DEFAULT_TOP_K)),
            score_threshold=float(
                get_config_value(
                    config, "retrieval.score_threshold", DEFAULT_SCORE_THRESHOLD
                )
            ),
            prompt_template=get_config_value(
                config, "retrieval.prompt_template", PROMPT_TEMPLATE
            ),
        )


@dataclass(frozen=True)
class ProviderSettings:
    """Provider name, model and any extra adapter keyword arguments."""

    provider: str
    model: str
    options: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class VectorStoreSettings:
    provider: str = "qdrant"
    url: str = DEFAULT_VECTOR_STORE_URL
    collection_name: str = DEFAULT_COLLECTION_NAME
    storage_dir: Path = Path("storage")


@dataclass(frozen=True)
class Settings:
    """Process-wide settings, built once at start-up and passed explicitly."""

    embedding: ProviderSettings
    llm: ProviderSettings
    vector_store: VectorStoreSettings
    indexer: IndexerConfig
    query: QueryConfig
    data_dir: Path

    @classmethod
    def from_config(
        cls, config: dict[str, Any], config_path: Path | None = None
    ) -> "Settings":
        base = config_path or Path("config.toml")

        embedding = _provider_settings(
            config,
            "embedding",
            provider_env="EMBEDDINGS_PROVIDER",
            model_env="EMBEDDINGS_MODEL",
            base_url_env="EMBEDDINGS_BASE_URL",
            default_model="nomic-embed-text",
        )
        llm = _provider_settings(
            config,
            "llm",
            provider_env="MODEL_PROVIDER",
            model_env="MODEL",
            base_url_env="MODEL_BASE_URL",
            default_model="llama3",
        )
        vector_store = VectorStoreSettings(
            provider=_setting(
                config, "vector_store.provider", "VECTOR_STORE_PROVIDER", "qdrant"
            ),
            url=_setting(
                config, "vector_store.url", "VECTOR_STORE_URL", DEFAULT_VECTOR_STORE_URL
            ),
            collection_name=_setting(
                config,
                "vector_store.collection",
                "VECTOR_STORE_COLLECTION",
                DEFAULT_COLLECTION_NAME,
            ),
            storage_dir=resolve_path(
                get_config_value(config, "vector_store.storage_dir", "storage"), base
            ),
        )

        return cls(
            embedding=embedding,
            llm=llm,
            vector_store=vector_store,
            indexer=IndexerConfig.from_config(config),
            query=QueryConfig.from_config(config),
            data_dir=resolve_path(
                get_config_value(config, "ingestion.directory", "data"), base
            ),
        )


def _provider_settings(
    config: dict[str, Any],
    section: str,
    provider_env: str,
    model_env: str,
    base_url_env: str,
    default_model: str,
) -> ProviderSettings:
    section_config = config.get(section, {})
    options = {
        k: v
        for k, v in section_config.items()
        if k not in ("provider", "model") and v != ""
    }
    base_url = _setting(config, f"{section}.base_url", base_url_env)
    if base_url:
        options["base_url"] = base_url

    return ProviderSettings(
        provider=_setting(config, f"{section}.provider", provider_env, "ollama"),
        model=_setting(config, f"{section}.model", model_env, default_model),
        options=options,
    )


def _as_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in ("1", "true", "yes", "on")
    return bool(value)


def load_settings(config_path: Path | None = None) -> Settings:
    """Locate and load configuration, returning resolved settings."""
    path = find_config_path(config_path)
    if path is None:
        logger.debug("No config.toml found, using environment only")
    config = load_config(path)
    return Settings.from_config(config, path)
