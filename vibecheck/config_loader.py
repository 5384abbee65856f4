"""
Config file discovery, parsing and ``extends`` resolution.

Recognized file names, searched in the scan root and then each ancestor:

    vibecheck.config.json, .vibecheckrc, .vibecheckrc.json

``.vibecheckrc`` is JSON. Python configs (``vibecheck_config.py`` and
``.vibecheckrc.py`` defining a ``CONFIG`` dict) are only considered when
``allow_python=True``: loading one executes arbitrary code, so it is a trust
boundary the caller must opt into.

``extends`` is either ``vibecheck:<profile>`` (see config.BUILTIN_PROFILES)
or a path relative to the extending file. Chains are resolved recursively;
a cycle raises ConfigError, and any other unresolvable target is logged and
the extending config is used on its own.
"""

from __future__ import annotations

import importlib.util
import json
import logging
from pathlib import Path
from typing import Any, Optional

from pydantic import ValidationError

from vibecheck.config import BUILTIN_PREFIX, BUILTIN_PROFILES, ConfigFile, ReportOptions
from vibecheck.errors import ConfigError, ExtendsCycleError

logger = logging.getLogger(__name__)

CONFIG_FILE_NAMES = (
    "vibecheck.config.json",
    ".vibecheckrc",
    ".vibecheckrc.json",
)
PYTHON_CONFIG_FILE_NAMES = (
    "vibecheck_config.py",
    ".vibecheckrc.py",
)


def find_config_file(start: Path, allow_python: bool = False) -> Optional[Path]:
    """Return the first config file found in ``start`` or its ancestors."""
    names = CONFIG_FILE_NAMES + (PYTHON_CONFIG_FILE_NAMES if allow_python else ())
    current = Path(start).resolve()
    for directory in (current, *current.parents):
        for name in names:
            candidate = directory / name
            if candidate.is_file():
                return candidate
    return None


def load_config(root: Path, allow_python: bool = False) -> Optional[ConfigFile]:
    """
    Discover and load the config for a scan root.

    Returns None when no config file exists or the discovered file is
    broken; the error is logged and the scan proceeds with defaults.
    """
    path = find_config_file(root, allow_python=allow_python)
    if path is None:
        logger.debug("No configuration file found")
        return None
    try:
        return load_config_file(path, allow_python=allow_python)
    except ConfigError as e:
        logger.error("Error loading configuration: %s", e)
        return None


def load_config_file(path: Path, allow_python: bool = False) -> ConfigFile:
    """
    Load an explicit config file and resolve its ``extends`` chain.

    Raises:
        ConfigError: the file is missing, unparseable, invalid, or its
            extends chain is cyclic.
    """
    path = Path(path).resolve()
    logger.debug("Loading configuration from %s", path)
    return _resolve(path, allow_python, seen=())


def _resolve(path: Path, allow_python: bool, seen: tuple[Path, ...]) -> ConfigFile:
    if path in seen:
        chain = " -> ".join(str(p) for p in (*seen, path))
        raise ExtendsCycleError(f"Circular extends chain: {chain}")
    config = parse_config_file(path, allow_python=allow_python)
    if not config.extends:
        return config
    base = resolve_extends(config.extends, path.parent, allow_python, seen=(*seen, path))
    if base is None:
        return config
    return merge_configs(base, config)


def resolve_extends(
    target: str,
    base_dir: Path,
    allow_python: bool = False,
    seen: tuple[Path, ...] = (),
) -> Optional[ConfigFile]:
    """
    Resolve an ``extends`` reference to a fully merged base config.

    Returns None (after logging) when the target cannot be found or parsed.
    """
    if target.startswith(BUILTIN_PREFIX):
        profile = load_builtin_config(target[len(BUILTIN_PREFIX):])
        if profile is None:
            logger.error("Unknown built-in configuration: %s", target)
        return profile

    path = Path(target)
    if not path.is_absolute():
        path = base_dir / path
    path = path.resolve()
    if not path.is_file():
        logger.error("Extended config not found: %s", target)
        return None
    try:
        return _resolve(path, allow_python, seen)
    except ExtendsCycleError:
        raise
    except ConfigError as e:
        logger.error("Error loading extended configuration %s: %s", target, e)
        return None


def load_builtin_config(name: str) -> Optional[ConfigFile]:
    """Return a copy of a built-in profile, or None for an unknown name."""
    profile = BUILTIN_PROFILES.get(name)
    return profile.model_copy(deep=True) if profile is not None else None


def parse_config_file(path: Path, allow_python: bool = False) -> ConfigFile:
    """Parse one config file by name without following ``extends``."""
    if not path.is_file():
        raise ConfigError(f"Config file not found: {path}")
    if path.suffix == ".py":
        if not allow_python:
            raise ConfigError(f"Python config files require --allow-python-config: {path}")
        raw = _load_python_config(path)
    elif path.suffix == ".json" or path.name == ".vibecheckrc":
        raw = _load_json_config(path)
    else:
        raise ConfigError(f"Unsupported config file type: {path.name}")

    if not isinstance(raw, dict):
        raise ConfigError(f"Config in {path} must be an object, got {type(raw).__name__}")
    try:
        return ConfigFile.model_validate(raw)
    except ValidationError as e:
        raise ConfigError(f"Invalid config in {path}: {e}") from e


def _load_json_config(path: Path) -> Any:
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except OSError as e:
        raise ConfigError(f"Could not read config file {path}: {e}") from e
    except json.JSONDecodeError as e:
        raise ConfigError(f"Failed to parse JSON config file {path}: {e}") from e


def _load_python_config(path: Path) -> Any:
    spec = importlib.util.spec_from_file_location(f"vibecheck_user_config_{abs(hash(path))}", path)
    if spec is None or spec.loader is None:
        raise ConfigError(f"Cannot import Python config file {path}")
    module = importlib.util.module_from_spec(spec)
    try:
        spec.loader.exec_module(module)
    except Exception as e:
        raise ConfigError(f"Failed to load Python config file {path}: {e}") from e
    if not hasattr(module, "CONFIG"):
        raise ConfigError(f"Python config file {path} does not define CONFIG")
    return module.CONFIG


def merge_configs(base: ConfigFile, child: ConfigFile) -> ConfigFile:
    """
    Merge a base config under a child config.

    Lists are concatenated base-then-child; reportOptions and checkerOptions
    are shallow-merged with the child's keys winning. The result carries no
    ``extends`` since the chain is already resolved.
    """
    report = {
        **base.report_options.model_dump(exclude_none=True),
        **child.report_options.model_dump(exclude_none=True),
    }
    return ConfigFile(
        extends=None,
        ignore_patterns=[*base.ignore_patterns, *child.ignore_patterns],
        skip_checkers=[*base.skip_checkers, *child.skip_checkers],
        severity_overrides=[*base.severity_overrides, *child.severity_overrides],
        ignore_issues=[*base.ignore_issues, *child.ignore_issues],
        report_options=ReportOptions(**report),
        checker_options={**base.checker_options, **child.checker_options},
    )
