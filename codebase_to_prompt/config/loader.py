# codebase_to_prompt/config/loader.py
"""
Handles loading and merging of configuration from TOML files.

Precedence, lowest first: built-in defaults, the user's global config file,
the project config file found in the target directory, the selected profile,
and finally command-line flags (applied by the CLI).
"""
import toml
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional
import structlog

from codebase_to_prompt.exceptions import ConfigError

from .settings import DEFAULT_MAX_FILE_SIZE, BundleConfig, FilterConfig, OutputFormat

log = structlog.get_logger(__name__)

TOOL_NAME = "codebase-to-prompt"
PROJECT_CONFIG_FILENAMES = [f".{TOOL_NAME}.toml", f"{TOOL_NAME}.toml", "pyproject.toml"]
USER_CONFIG_DIR = Path.home() / ".config" / TOOL_NAME
USER_CONFIG_FILE = USER_CONFIG_DIR / "config.toml"

BOOL_KEYS = {"line_numbers", "ignore_hidden", "respect_gitignore", "append_date", "append_git_hash"}
LIST_KEYS = {"include", "exclude", "ignore_patterns"}
CONFIG_KEYS = BOOL_KEYS | LIST_KEYS | {"format", "output", "max_file_size"}


def _load_toml_file_data(file_path: Path) -> Dict[str, Any]:
    if not file_path.is_file():
        return {}
    log.debug("loading_toml_config_file", path=str(file_path))
    try:
        data = toml.load(file_path)
    except (toml.TomlDecodeError, OSError) as e:
        raise ConfigError(f"could not read config file {file_path}: {e}")
    if file_path.name == "pyproject.toml":
        return data.get("tool", {}).get(TOOL_NAME, {})
    return data


def load_and_merge_configs(project_dir: Path, user_config_file: Optional[Path] = None) -> Dict[str, Any]:
    # merges the user's global file with the first project file found in project_dir.
    user_file = user_config_file if user_config_file is not None else USER_CONFIG_FILE
    merged_toml_data: Dict[str, Any] = {}
    if user_file.is_file():
        log.info("loading_user_global_config", path=str(user_file))
        merged_toml_data.update(_load_toml_file_data(user_file))

    for filename in PROJECT_CONFIG_FILENAMES:
        candidate = project_dir / filename
        if not candidate.is_file():
            continue
        project_settings = _load_toml_file_data(candidate)
        if not project_settings:
            continue
        log.info("loading_project_local_config", path=str(candidate))
        project_profiles = project_settings.pop("profiles", {})
        if project_profiles:
            if not isinstance(project_profiles, dict):
                raise ConfigError(f"'profiles' in {candidate} must be a table")
            merged_toml_data.setdefault("profiles", {}).update(project_profiles)
        merged_toml_data.update(project_settings)
        break

    if not merged_toml_data:
        log.debug("no_configuration_files_loaded")
    return merged_toml_data


def select_settings(raw_config: Dict[str, Any], profile_name: Optional[str] = None) -> Dict[str, Any]:
    # top-level settings overlaid with the named profile; unknown keys are dropped.
    settings = {k: v for k, v in raw_config.items() if k != "profiles"}
    if profile_name:
        profiles = raw_config.get("profiles", {})
        if profile_name not in profiles:
            raise ConfigError(f"profile '{profile_name}' not found in configuration files")
        log.info("applying_profile_settings", profile=profile_name)
        settings.update(profiles[profile_name])

    known: Dict[str, Any] = {}
    for key, value in settings.items():
        if key in CONFIG_KEYS:
            known[key] = value
        elif key != "description":
            log.warning("unknown_config_key_ignored", key=key)
    return known


def _as_list(key: str, value: Any) -> List[str]:
    if isinstance(value, str):
        return [value]
    if isinstance(value, list) and all(isinstance(v, str) for v in value):
        return value
    raise ConfigError(f"config key '{key}' must be a string or a list of strings")


def _check_types(settings: Dict[str, Any]) -> None:
    for key, value in settings.items():
        if key in BOOL_KEYS and not isinstance(value, bool):
            raise ConfigError(f"config key '{key}' must be true or false, got {value!r}")
        if key in LIST_KEYS:
            _as_list(key, value)
        if key == "max_file_size" and (isinstance(value, bool) or not isinstance(value, int)):
            raise ConfigError(f"config key 'max_file_size' must be an integer, got {value!r}")
        if key in ("format", "output") and not isinstance(value, str):
            raise ConfigError(f"config key '{key}' must be a string, got {value!r}")


def build_bundle_config(directory: Path, settings: Dict[str, Any]) -> BundleConfig:
    """Builds a BundleConfig from merged settings (TOML keys overlaid with CLI values).

    Keys missing from `settings` take the dataclass defaults.
    """
    _check_types(settings)

    def list_value(key: str) -> Iterable[str]:
        return _as_list(key, settings[key]) if key in settings else ()

    filters = FilterConfig.from_lists(
        include=list_value("include"),
        exclude=list_value("exclude"),
        ignore_hidden=settings.get("ignore_hidden", False),
        respect_gitignore=settings.get("respect_gitignore", True),
        ignore_patterns=list_value("ignore_patterns"),
    )
    output = settings.get("output")
    config = BundleConfig(
        directory=directory,
        output=Path(output) if output else None,
        filters=filters,
        format=OutputFormat.from_string(settings.get("format", OutputFormat.CONSOLE.value)),
        line_numbers=settings.get("line_numbers", False),
        append_date=settings.get("append_date", False),
        append_git_hash=settings.get("append_git_hash", False),
        max_file_size=settings.get("max_file_size", DEFAULT_MAX_FILE_SIZE),
        color=settings.get("color"),
    )
    log.debug("bundle_config_built", settings=sorted(settings))
    return config
