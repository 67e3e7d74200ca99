"""Unified configuration layer for the streaming client.

Goals
-----
* Centralize defaults (model, base URL, decoder bound).
* Merge sources in a predictable order (later wins):
    1. Built-in defaults
    2. Optional external config file (JSON or YAML) pointed to by
       ``GEMINI_STREAM_CONFIG_FILE``
    3. Environment variables (``GEMINI_MODEL``, ``GEMINI_BASE_URL``,
       ``GEMINI_MAX_ELEMENT_BYTES``; bare ``MODEL`` as a fallback)
    4. API key resolved from the environment
    5. In-code overrides passed to the helper
* Provide a single call site: ``get_client_config(overrides)``.
* Keep zero hard dependency on PyYAML (load YAML only if available).

A ``.env`` file in the working directory (or at ``DOTENV_FILE``) is loaded
once before the environment is read.

External Config File (Optional)
-------------------------------
Either a flat mapping or one nested under a ``gemini`` key::

    gemini:
      model: gemini-pro
      base_url: https://generativelanguage.googleapis.com/v1beta
      max_element_bytes: 2097152
"""
from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Optional
import json
import os

from ..base.errors import ErrorKind, StreamError
from .defaults import (
    GEMINI_DEFAULT_BASE_URL,
    GEMINI_DEFAULT_MAX_ELEMENT_BYTES,
    GEMINI_DEFAULT_MODEL,
)
from .env import is_placeholder, resolve_api_key

try:  # Optional YAML support
    import yaml  # type: ignore
except ImportError:  # pragma: no cover
    yaml = None  # type: ignore

CONFIG_FILE_ENV = "GEMINI_STREAM_CONFIG_FILE"
CONFIG_SECTION = "gemini"

DEFAULTS: Dict[str, Any] = {
    "model": GEMINI_DEFAULT_MODEL,
    "base_url": GEMINI_DEFAULT_BASE_URL,
    "max_element_bytes": GEMINI_DEFAULT_MAX_ELEMENT_BYTES,
}

# field -> env var names, highest precedence first
ENV_FIELD_MAP: Dict[str, tuple] = {
    "model": ("GEMINI_MODEL", "MODEL"),
    "base_url": ("GEMINI_BASE_URL",),
    "max_element_bytes": ("GEMINI_MAX_ELEMENT_BYTES",),
}


_FILE_CACHE: Optional[Dict[str, Any]] = None
_FILE_CACHE_PATH: Optional[str] = None
_DOTENV_LOADED = False


def _load_dotenv_once() -> None:
    """Lightweight .env loader (no external dependency).

    Parses KEY=VALUE lines, ignoring comments and blank lines. Safe to call
    multiple times. Overrides existing environment variables only if their
    current values appear to be placeholders.
    """
    global _DOTENV_LOADED
    if _DOTENV_LOADED:
        return
    path = os.getenv("DOTENV_FILE", ".env")
    if not os.path.isfile(path):
        _DOTENV_LOADED = True
        return
    try:
        with open(path, "r", encoding="utf-8") as fh:
            for line in fh:
                line = line.strip()
                if not line or line.startswith("#") or "=" not in line:
                    continue
                k, v = line.split("=", 1)
                k = k.strip()
                v = v.strip().strip('"').strip("'")
                if k and (k not in os.environ or is_placeholder(os.environ.get(k))):
                    os.environ[k] = v
    finally:
        _DOTENV_LOADED = True


def _load_external_config() -> Dict[str, Any]:
    global _FILE_CACHE, _FILE_CACHE_PATH
    path = os.getenv(CONFIG_FILE_ENV)
    if _FILE_CACHE is not None and _FILE_CACHE_PATH == path:
        return _FILE_CACHE
    data: Any = {}
    if path and Path(path).is_file():
        text = Path(path).read_text(encoding="utf-8")
        try:
            data = json.loads(text)
        except ValueError:
            if yaml is None:
                raise StreamError(
                    kind=ErrorKind.CONFIG,
                    message=f"{path}: not valid JSON (install PyYAML for YAML config files)",
                ) from None
            try:
                data = yaml.safe_load(text) or {}
            except yaml.YAMLError as exc:
                raise StreamError(kind=ErrorKind.CONFIG, message=f"{path}: {exc}", cause=exc) from exc
    if not isinstance(data, dict):
        data = {}
    section = data.get(CONFIG_SECTION)
    _FILE_CACHE = dict(section) if isinstance(section, dict) else data
    _FILE_CACHE_PATH = path
    return _FILE_CACHE


def _env_overrides() -> Dict[str, Any]:
    out: Dict[str, Any] = {}
    for field, names in ENV_FIELD_MAP.items():
        for name in names:
            val = os.getenv(name)
            if val:
                out[field] = val
                break
    return out


def _coerce_max_element_bytes(value: Any) -> int:
    try:
        bound = int(value)
    except (TypeError, ValueError):
        raise StreamError(
            kind=ErrorKind.CONFIG,
            message=f"max_element_bytes must be an integer, got {value!r}",
        ) from None
    if bound <= 0:
        raise StreamError(kind=ErrorKind.CONFIG, message=f"max_element_bytes must be positive, got {bound}")
    return bound


def get_client_config(overrides: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """Return the merged client configuration.

    Keys: ``model``, ``base_url``, ``max_element_bytes`` and, when one is
    found, ``api_key``. Merge order (later wins): defaults -> config file ->
    env vars -> API key from env -> overrides (``None`` values ignored).

    Raises:
        StreamError: ``CONFIG`` for an unreadable config file or an invalid
            element bound.
    """
    _load_dotenv_once()
    cfg: Dict[str, Any] = dict(DEFAULTS)
    cfg |= _load_external_config()
    cfg |= _env_overrides()
    if not cfg.get("api_key") or is_placeholder(cfg.get("api_key")):
        cfg.pop("api_key", None)
        if key := resolve_api_key():
            cfg["api_key"] = key
    if overrides:
        cfg |= {k: v for k, v in overrides.items() if v is not None}
    cfg["max_element_bytes"] = _coerce_max_element_bytes(cfg.get("max_element_bytes"))
    cfg["base_url"] = str(cfg.get("base_url") or GEMINI_DEFAULT_BASE_URL).rstrip("/")
    return cfg


def reset_config_cache() -> None:
    """Forget the cached config file and ``.env`` state (test helper)."""
    global _FILE_CACHE, _FILE_CACHE_PATH, _DOTENV_LOADED
    _FILE_CACHE = None
    _FILE_CACHE_PATH = None
    _DOTENV_LOADED = False


__all__ = [
    "get_client_config",
    "reset_config_cache",
    "DEFAULTS",
    "CONFIG_FILE_ENV",
]
