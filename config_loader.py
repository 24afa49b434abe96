"""Helpers for resolving configuration files and import settings."""

import json
import os
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from anvil_client import DEFAULT_API_BASE_URL
from anvil_transform.sanitizer import DEFAULT_IMAGE_ORIGIN
from anvil_transform.stylesheet import (
    DEFAULT_ASSET_TARGET,
    DEFAULT_RESERVED_CLASS,
    DEFAULT_STYLESHEET_NAME,
)

DEFAULT_CONFIG_NAME = "config.json"
CONFIG_ENV_VAR = "ANVIL_IMPORT_CONFIG"
DEFAULT_LANG_PATH = os.path.join(os.path.dirname(__file__), "lang", "en.json")


class ConfigError(Exception):
    """Raised when runtime configuration cannot be loaded."""


def _empty_folder_map() -> Dict[str, str]:
    return {}


@dataclass(slots=True)
class ImportSettings:
    """Resolved settings for a single import run."""

    journal_dir: str
    api_base_url: str = DEFAULT_API_BASE_URL
    application_key: str = ""
    auth_token: str = ""
    world_id: Optional[str] = None
    image_origin: str = DEFAULT_IMAGE_ORIGIN
    upload_url: Optional[str] = None
    asset_target: str = DEFAULT_ASSET_TARGET
    stylesheet_name: str = DEFAULT_STYLESHEET_NAME
    reserved_class: str = DEFAULT_RESERVED_CLASS
    upload_timeout: Optional[float] = None
    lang_path: str = DEFAULT_LANG_PATH
    category_folders: Dict[str, str] = field(
        default_factory=_empty_folder_map
    )


def _resolve_config_path(path: Optional[str]) -> str:
    """Return the absolute config path, honoring overrides and defaults."""
    env_override = os.environ.get(CONFIG_ENV_VAR)
    candidate = path or env_override or DEFAULT_CONFIG_NAME
    expanded = os.path.expanduser(candidate)
    if os.path.isabs(expanded) and os.path.isfile(expanded):
        return expanded

    search_roots = [os.getcwd(), os.path.dirname(__file__)]
    for root in search_roots:
        resolved = os.path.abspath(os.path.join(root, expanded))
        if os.path.isfile(resolved):
            return resolved

    raise ConfigError(f"Configuration file not found: {candidate}")


def _resolve_path(value: str, base_dir: str) -> str:
    """Resolve ``value`` into an absolute path relative to ``base_dir``."""
    expanded = os.path.expanduser(value)
    if os.path.isabs(expanded):
        return expanded
    return os.path.abspath(os.path.join(base_dir, expanded))


def load_config(path: Optional[str] = None) -> Dict[str, Any]:
    """Load a JSON config file and normalize any filesystem paths."""
    config_path = _resolve_config_path(path)
    try:
        with open(config_path, "r", encoding="utf-8") as config_file:
            data = json.load(config_file)
    except ValueError as exc:
        raise ConfigError(f"Invalid JSON in {config_path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"Configuration must be an object: {config_path}")

    base_dir = os.path.dirname(config_path)
    resolved: Dict[str, Any] = {}
    for key, value in data.items():
        if isinstance(value, str) and key.endswith(("_dir", "_path")):
            resolved[key] = _resolve_path(value, base_dir)
        else:
            resolved[key] = value

    return resolved


def resolve_runtime_settings(
    *,
    config_path: Optional[str] = None,
    journal_dir: Optional[str] = None,
    require_config: bool = True,
) -> ImportSettings:
    """Resolve import settings by combining CLI overrides with config."""
    try:
        config = load_config(config_path)
    except ConfigError:
        if require_config or config_path:
            raise
        config = {}

    resolved_journal = journal_dir or config.get("journal_dir")
    if not resolved_journal:
        raise ConfigError("Missing journal_dir configuration.")

    timeout = config.get("upload_timeout")
    try:
        upload_timeout = float(timeout) if timeout is not None else None
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"Invalid upload_timeout: {timeout!r}") from exc

    folders = config.get("category_folders") or {}
    if not isinstance(folders, dict):
        raise ConfigError("category_folders must map category ids to names.")

    world_id = config.get("world_id")
    return ImportSettings(
        journal_dir=_resolve_path(resolved_journal, os.getcwd()),
        api_base_url=config.get("api_base_url") or DEFAULT_API_BASE_URL,
        application_key=config.get("application_key") or "",
        auth_token=config.get("auth_token") or "",
        world_id=str(world_id) if world_id else None,
        image_origin=config.get("image_origin") or DEFAULT_IMAGE_ORIGIN,
        upload_url=config.get("upload_url") or None,
        asset_target=config.get("asset_target") or DEFAULT_ASSET_TARGET,
        stylesheet_name=(
            config.get("stylesheet_name") or DEFAULT_STYLESHEET_NAME
        ),
        reserved_class=config.get("reserved_class") or DEFAULT_RESERVED_CLASS,
        upload_timeout=upload_timeout,
        lang_path=config.get("lang_path") or DEFAULT_LANG_PATH,
        category_folders={str(k): str(v) for k, v in folders.items()},
    )
