# Copyright 2025 Hathor Labs
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#    http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

import importlib
import os
from typing import Optional

import structlog

from stakepool.conf.settings import StakePoolSettings

logger = structlog.get_logger()

CONFIG_FILE_ENV_VAR = 'STAKEPOOL_CONFIG_FILE'
DEFAULT_CONFIG_MODULE = 'stakepool.conf.testnet'

_settings_singleton: Optional[StakePoolSettings] = None
_config_module: Optional[str] = None


def get_global_settings() -> StakePoolSettings:
    """Return the settings of the module named by STAKEPOOL_CONFIG_FILE.

    The module must expose a `SETTINGS` instance. Settings are loaded once;
    asking for them again with a different module configured is an error.
    """
    global _settings_singleton, _config_module

    config_module = os.environ.get(CONFIG_FILE_ENV_VAR, DEFAULT_CONFIG_MODULE)
    if _settings_singleton is not None:
        if config_module != _config_module:
            raise Exception(
                f'loading config twice with a different file: {_config_module} != {config_module}'
            )
        return _settings_singleton

    settings = load_settings_module(config_module)
    logger.info('settings loaded', config_module=config_module, network=settings.NETWORK_NAME)
    _settings_singleton = settings
    _config_module = config_module
    return settings


def load_settings_module(module_path: str) -> StakePoolSettings:
    module = importlib.import_module(module_path)
    settings = getattr(module, 'SETTINGS', None)
    if not isinstance(settings, StakePoolSettings):
        raise TypeError(f'{module_path}.SETTINGS must be a StakePoolSettings instance')
    return settings
