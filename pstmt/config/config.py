# Copyright The pstmt Authors
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Layered configuration for pstmt.

The packaged config.yml holds every key with its default. Callers layer their
own overrides on top with configure(), and read the result through the
immutable view returned by get_config().
"""

# Standard
from typing import Any, Dict, List, Optional, Union
import os

# First Party
import aconfig
import alog

log = alog.use_channel("CONFIG")

BASE_CONFIG_PATH = os.path.realpath(
    os.path.join(os.path.dirname(__file__), "config.yml")
)

# Environment variable naming extra config files when config_files is unset
CONFIG_FILES_ENV_VAR = "CONFIG_FILES"

# Mutable config that every configure() call merges into
_CONFIG: aconfig.Config = aconfig.Config({})
# Read-only view of _CONFIG handed out by get_config()
_IMMUTABLE_CONFIG: aconfig.ImmutableConfig = aconfig.ImmutableConfig({})

_CONFIG_TYPE = Union[dict, aconfig.Config]


def get_config() -> aconfig.Config:
    """Get the current pstmt configuration"""
    return _IMMUTABLE_CONFIG


def configure(
    config_yml_path: Optional[str] = None, config_dict: Optional[Dict[str, Any]] = None
):
    """Merge overrides into the pstmt configuration.

    Precedence, lowest first:
        1. The configuration built by earlier calls (initially config.yml)
        2. config_yml_path
        3. config_dict
        4. Each file named by config_files (or the CONFIG_FILES environment
           variable), left to right
        5. Environment variables in ALL_CAPS_SNAKE_FORMAT, e.g.
           VALIDATION_POLICIES_REQUIRE_TASKS=true

    An override holding `merge_strategy: override` replaces top-level keys
    instead of deep-merging them.

    Args:
        config_yml_path (Optional[str]): Path to a yaml file with overrides
        config_dict (Optional[Dict[str, Any]]): Overrides as a dict
    """
    if not config_yml_path and not config_dict:
        log.error("<PST43273054E>", "No config_file or config_dict provided")
        raise ValueError("No config_file or config_dict provided")

    if config_yml_path:
        overrides = aconfig.Config.from_yaml(config_yml_path)
    else:
        overrides = aconfig.Config(config_dict)

    cfg = merge_configs(
        aconfig.Config(_CONFIG), overrides, _get_merge_strategy(overrides)
    )
    for file_name in _extra_config_files(
        cfg.get("config_files") or os.environ.get(CONFIG_FILES_ENV_VAR)
    ):
        log.info("<PST17612094I>", "Loading config file '%s'", file_name)
        file_overrides = aconfig.Config.from_yaml(file_name, override_env_vars=True)
        cfg = merge_configs(cfg, file_overrides, _get_merge_strategy(file_overrides))
    _set_global_config(cfg)


def merge_configs(
    base: Optional[_CONFIG_TYPE],
    overrides: Optional[_CONFIG_TYPE],
    merge_strategy: str = "merge",
) -> _CONFIG_TYPE:
    """Merge overrides into base in place and return base.

    With the "merge" strategy, keys holding a dict on both sides are merged
    recursively and every other value, lists included, is replaced. The
    "override" strategy replaces top-level keys wholesale.

    Args:
        base (Optional[dict]): The config to update
        overrides (Optional[dict]): The values to apply
        merge_strategy (str): Either "merge" or "override"

    Returns:
        merged (dict): base with overrides applied
    """
    if base is None:
        return overrides or {}
    if overrides is None:
        return base or {}

    if merge_strategy == "override":
        base.update(overrides)
        return base

    for key, value in overrides.items():
        if isinstance(base.get(key), dict) and isinstance(value, dict):
            base[key] = merge_configs(base[key], value, merge_strategy)
        else:
            base[key] = value
    return base


## Implementation Details ######################################################


def _set_global_config(cfg: aconfig.Config):
    # pylint: disable=global-statement
    global _CONFIG, _IMMUTABLE_CONFIG
    _CONFIG = cfg
    # The view must mirror _CONFIG exactly, so env vars are not applied again
    _IMMUTABLE_CONFIG = aconfig.ImmutableConfig(_CONFIG, override_env_vars=False)


def _extra_config_files(config_files: Optional[Union[str, List[str]]]) -> List[str]:
    """config_files may be a yaml list or a comma-separated string"""
    if not config_files:
        return []
    if isinstance(config_files, str):
        config_files = config_files.split(",")
    return [str(name).strip() for name in config_files if str(name).strip()]


def _get_merge_strategy(cfg: _CONFIG_TYPE) -> str:
    return cfg.get("merge_strategy", "merge")


configure(BASE_CONFIG_PATH)
