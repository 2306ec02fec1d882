import os
import re
from pathlib import Path
from typing import Any

import toml

MAX_FILE_SIZE_MB = 10
SUPPORTED_EXTENSIONS = [".pdf", ".docx", ".txt", ".md"]
DEFAULT_CHUNK_SIZE = 1000
DEFAULT_CHUNK_OVERLAP = 200
DEFAULT_MAX_RESULTS = 5
DEFAULT_SIMILARITY_THRESHOLD = 0.7
DEFAULT_EMBEDDING_DIMENSION = 768

API_KEY_ENV_VARS = {
    "jina": "JINA_API_KEY",
    "gemini": "GEMINI_API_KEY",
    "openai": "OPENAI_API_KEY",
}


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


def find_config_path(explicit_path: Path | None = None) -> Path:
    """Centralized config path resolution."""
    if explicit_path:
        return explicit_path
    env_path = os.environ.get("RAG_ASSISTANT_CONFIG")
    candidates = [
        Path(env_path) if env_path else None,
        Path("config.toml"),
        Path(__file__).parent.parent.parent / "config.toml",
    ]
    for path in candidates:
        if path is not None and path.exists():
            return path
    raise FileNotFoundError("config.toml not found")


def load_config(config_path: Path = Path("config.toml")) -> dict[str, Any]:
    """Load configuration from TOML file with environment variable substitution.

    Supports ${ENV_VAR} and ${ENV_VAR:-default} syntax.

    Args:
        config_path: Path to the TOML configuration file.

    Returns:
        Dictionary with configuration values.
    """
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

    Args:
        config: Configuration dictionary.
        key_path: Dot-separated path (e.g., "embedding.jina.model").
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

    return value


def get_storage_dir(config: dict, config_path: Path) -> Path:
    """Get the local storage directory used by the FAISS fallback store."""
    storage_dir = config.get("storage", {}).get("directory", "storage")
    return resolve_path(storage_dir, config_path)


def get_max_file_size(config: dict) -> int:
    """Maximum upload size in bytes."""
    size_mb = get_config_value(config, "ingestion.max_file_size_mb", MAX_FILE_SIZE_MB)
    return int(size_mb * 1024 * 1024)


def get_supported_extensions(config: dict) -> list[str]:
    extensions = get_config_value(
        config, "ingestion.supported_extensions", SUPPORTED_EXTENSIONS
    )
    return [ext.lower() if ext.startswith(".") else f".{ext.lower()}" for ext in extensions]


def _resolve_api_key(section_config: dict, provider: str) -> str:
    env_var = API_KEY_ENV_VARS.get(provider)
    return section_config.get("api_key") or (os.environ.get(env_var, "") if env_var else "")


def validate_api_keys(config: dict) -> tuple[bool, list[str]]:
    """Report which credentials are missing for the configured providers.

    Missing credentials never stop the app; they switch the affected
    component to its mock or local implementation.

    Returns:
        Tuple of (is_valid, missing environment variable names).
    """
    missing: list[str] = []

    for section in ("llm", "embedding"):
        section_config = config.get(section, {})
        provider = section_config.get("provider", "")
        env_var = API_KEY_ENV_VARS.get(provider)
        if env_var and not _resolve_api_key(section_config, provider):
            if env_var not in missing:
                missing.append(env_var)

    store_config = config.get("vector_store", {})
    if store_config.get("provider", "supabase") == "supabase":
        if not store_config.get("url"):
            missing.append("SUPABASE_URL")
        if not store_config.get("key"):
            missing.append("SUPABASE_ANON_KEY")

    return len(missing) == 0, missing
