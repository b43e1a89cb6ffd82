"""Groundwork configuration loader.

Priority (high → low):
  1. CLI flags           (handled at call site — not in this module)
  2. Environment variables  (GROUNDWORK_EMBEDDING_MODEL, GROUNDWORK_SNAPSHOT_PATH,
                             GROUNDWORK_LOG_LEVEL)
  3. Per-project groundwork.yaml
  4. Global ~/.groundwork/config.yaml  (model defaults only — no API keys)
  5. Hardcoded defaults

Global config must never contain API keys; use environment variables instead.
All YAML reads use yaml.safe_load() — never yaml.load().
"""

from __future__ import annotations

import os
import re
import warnings
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

_GLOBAL_CONFIG_DIR: Path = Path.home() / ".groundwork"
_GLOBAL_CONFIG_PATH: Path = _GLOBAL_CONFIG_DIR / "config.yaml"
_PROJECT_CONFIG_NAME: str = "groundwork.yaml"

# Fields that suggest an API key — forbidden in global config.
# Does NOT match legitimate config keys like batch_size or top_k.
_API_KEY_RE: re.Pattern[str] = re.compile(
    r"api[_\-]?(?:key|secret)"
    r"|_token$"
    r"|^token$"
    r"|_secret$"
    r"|^secret$"
    r"|passw(?:ord|d)"
    r"|credential",
    re.IGNORECASE,
)

_KNOWN_SECTIONS: frozenset[str] = frozenset(
    ["embedding", "chunker", "retrieval", "store", "logging"]
)


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class ConfigError(ValueError):
    """Raised when a config file contains an invalid or forbidden value."""


# ---------------------------------------------------------------------------
# Data model
# ---------------------------------------------------------------------------


@dataclass
class EmbeddingCfg:
    """Embedding model configuration (groundwork.yaml: embedding:)."""

    model: str = "openai/text-embedding-3-small"
    batch_size: int = 100


@dataclass
class ChunkerCfg:
    """Chunk size and overlap in characters (groundwork.yaml: chunker:).

    Attributes:
        chunk_size: Window length in characters.
        overlap: Characters shared by consecutive windows; must be < chunk_size.
        min_chars: Pages whose extracted text is shorter than this are skipped.
    """

    chunk_size: int = 1000
    overlap: int = 200
    min_chars: int = 0


@dataclass
class RetrievalCfg:
    """Search configuration (groundwork.yaml: retrieval:)."""

    top_k: int = 5
    window_days: int = 7


@dataclass
class StoreCfg:
    """Snapshot location (groundwork.yaml: store:)."""

    snapshot_path: str = "data/rag-data.json"


@dataclass
class LoggingCfg:
    """Log verbosity (groundwork.yaml: logging:)."""

    level: str = "WARNING"


@dataclass
class GroundworkConfig:
    """Root configuration object, built by load_config() from merged YAML layers."""

    embedding: EmbeddingCfg = field(default_factory=EmbeddingCfg)
    chunker: ChunkerCfg = field(default_factory=ChunkerCfg)
    retrieval: RetrievalCfg = field(default_factory=RetrievalCfg)
    store: StoreCfg = field(default_factory=StoreCfg)
    logging: LoggingCfg = field(default_factory=LoggingCfg)


# ---------------------------------------------------------------------------
# Validation helpers
# ---------------------------------------------------------------------------


def _check_no_api_keys(data: dict[str, Any], source: Path) -> None:
    """Raise ConfigError if *data* contains any API-key-like key names."""

    def _scan(obj: Any, path: str) -> None:
        if isinstance(obj, dict):
            for k, v in obj.items():
                full = f"{path}.{k}" if path else k
                if _API_KEY_RE.search(str(k)):
                    raise ConfigError(
                        f"Global config '{source}' contains a forbidden key '{full}'.\n"
                        f"  API keys must be set via environment variables, not config files.\n"
                        f"  Remove '{full}' from {source.name} and use:\n"
                        f"    export {str(k).upper().replace('-', '_')}=<value>"
                    )
                _scan(v, full)

    _scan(data, "")


def _warn_unknown_keys(data: dict[str, Any], source: Path) -> None:
    """Emit a UserWarning for unrecognised top-level keys."""
    for key in data:
        if key not in _KNOWN_SECTIONS:
            warnings.warn(
                f"Unknown config key '{key}' in '{source}' — ignored.",
                UserWarning,
                stacklevel=4,
            )


def _validate_chunker(cfg: ChunkerCfg) -> None:
    if cfg.chunk_size < 1:
        raise ConfigError(f"chunker.chunk_size must be >= 1, got {cfg.chunk_size}")
    if not 0 <= cfg.overlap < cfg.chunk_size:
        raise ConfigError(
            f"chunker.overlap must be in [0, chunk_size), got {cfg.overlap} "
            f"(chunk_size={cfg.chunk_size})"
        )


def _validate_retrieval(cfg: RetrievalCfg) -> None:
    if cfg.top_k < 1:
        raise ConfigError(f"retrieval.top_k must be >= 1, got {cfg.top_k}")
    if cfg.window_days < 0:
        raise ConfigError(f"retrieval.window_days must be >= 0, got {cfg.window_days}")


def _read_yaml(path: Path) -> dict[str, Any]:
    raw = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    if not isinstance(raw, dict):
        raise ConfigError(f"Config file '{path}' must contain a mapping at the top level.")
    return raw


# ---------------------------------------------------------------------------
# Merge + build
# ---------------------------------------------------------------------------


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Return a new dict that is *base* deep-merged with *override*."""
    result = dict(base)
    for k, v in override.items():
        if k in result and isinstance(result[k], dict) and isinstance(v, dict):
            result[k] = _deep_merge(result[k], v)
        else:
            result[k] = v
    return result


def _cfg_from_dict(data: dict[str, Any]) -> GroundworkConfig:
    """Build a *GroundworkConfig* from a merged raw YAML dict."""
    cfg = GroundworkConfig()

    if "embedding" in data:
        e = data["embedding"] or {}
        cfg.embedding = EmbeddingCfg(
            model=str(e.get("model", cfg.embedding.model)),
            batch_size=int(e.get("batch_size", cfg.embedding.batch_size)),
        )

    if "chunker" in data:
        c = data["chunker"] or {}
        cfg.chunker = ChunkerCfg(
            chunk_size=int(c.get("chunk_size", cfg.chunker.chunk_size)),
            overlap=int(c.get("overlap", cfg.chunker.overlap)),
            min_chars=int(c.get("min_chars", cfg.chunker.min_chars)),
        )

    if "retrieval" in data:
        r = data["retrieval"] or {}
        cfg.retrieval = RetrievalCfg(
            top_k=int(r.get("top_k", cfg.retrieval.top_k)),
            window_days=int(r.get("window_days", cfg.retrieval.window_days)),
        )

    if "store" in data:
        s = data["store"] or {}
        cfg.store = StoreCfg(
            snapshot_path=str(s.get("snapshot_path", cfg.store.snapshot_path)),
        )

    if "logging" in data:
        lg = data["logging"] or {}
        cfg.logging = LoggingCfg(level=str(lg.get("level", cfg.logging.level)).upper())

    return cfg


def _apply_env_overrides(cfg: GroundworkConfig) -> GroundworkConfig:
    """Apply GROUNDWORK_* environment variable overrides."""
    if model := os.environ.get("GROUNDWORK_EMBEDDING_MODEL"):
        cfg.embedding.model = model
    if snapshot := os.environ.get("GROUNDWORK_SNAPSHOT_PATH"):
        cfg.store.snapshot_path = snapshot
    if level := os.environ.get("GROUNDWORK_LOG_LEVEL"):
        cfg.logging.level = level.upper()
    return cfg


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def load_config(
    project_dir: Path | None = None,
    *,
    global_config_path: Path | None = None,
) -> GroundworkConfig:
    """Load and return a merged *GroundworkConfig*.

    Applies layers in order: global → per-project → env vars.
    CLI flag overrides must be applied by the caller after this function.

    Args:
        project_dir: Directory to search for *groundwork.yaml*. Defaults to CWD.
        global_config_path: Override the global config path (for testing).

    Returns:
        Fully merged *GroundworkConfig* with env var overrides applied.

    Raises:
        ConfigError: If global config contains API-key-like fields, if a value
            has the wrong type, or if chunker, retrieval or batch settings are
            out of range.
    """
    global_path = global_config_path if global_config_path is not None else _GLOBAL_CONFIG_PATH
    search_dir = project_dir if project_dir is not None else Path.cwd()

    merged: dict[str, Any] = {}

    # Layer 1: global config
    if global_path.exists():
        raw_global = _read_yaml(global_path)
        _check_no_api_keys(raw_global, global_path)
        _warn_unknown_keys(raw_global, global_path)
        merged = _deep_merge(merged, raw_global)

    # Layer 2: per-project config
    project_cfg_path = search_dir / _PROJECT_CONFIG_NAME
    if project_cfg_path.exists():
        raw_project = _read_yaml(project_cfg_path)
        _warn_unknown_keys(raw_project, project_cfg_path)
        merged = _deep_merge(merged, raw_project)

    try:
        cfg = _cfg_from_dict(merged)
    except (AttributeError, TypeError, ValueError) as exc:
        raise ConfigError(f"Invalid config value: {exc}") from exc
    _validate_chunker(cfg.chunker)
    _validate_retrieval(cfg.retrieval)
    if cfg.embedding.batch_size < 1:
        raise ConfigError(f"embedding.batch_size must be >= 1, got {cfg.embedding.batch_size}")

    # Layer 3: env var overrides
    return _apply_env_overrides(cfg)
