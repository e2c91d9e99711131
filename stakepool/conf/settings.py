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

from pydantic import BaseModel, ConfigDict, ValidationInfo, field_validator

DAY_IN_SECONDS: int = 60 * 60 * 24


class StakePoolSettings(BaseModel):
    """Network-wide settings. Instances are immutable."""
    model_config = ConfigDict(frozen=True, extra='forbid')

    # Name of the network, used in logs and API responses.
    NETWORK_NAME: str

    # Uid of the native token, which can be used as staking or reward token like any other.
    NATIVE_TOKEN_UID: bytes = b'\x00'

    # Rewards duration used when deploying a pool without an explicit one.
    DEFAULT_REWARDS_DURATION: int = 7 * DAY_IN_SECONDS

    # Pagination limits of the history API.
    API_DEFAULT_EVENTS_PER_PAGE: int = 20
    API_MAX_EVENTS_PER_PAGE: int = 100

    # Known blueprints: blueprint id -> blueprint class name.
    BLUEPRINTS: dict[bytes, str] = {}

    @field_validator('DEFAULT_REWARDS_DURATION')
    @classmethod
    def _validate_rewards_duration(cls, duration: int) -> int:
        if duration <= 0:
            raise ValueError('DEFAULT_REWARDS_DURATION must be positive')
        return duration

    @field_validator('API_MAX_EVENTS_PER_PAGE')
    @classmethod
    def _validate_max_events(cls, value: int, info: ValidationInfo) -> int:
        default = info.data.get('API_DEFAULT_EVENTS_PER_PAGE')
        if default is not None and value < default:
            raise ValueError('API_MAX_EVENTS_PER_PAGE must not be lower than API_DEFAULT_EVENTS_PER_PAGE')
        return value

    @field_validator('BLUEPRINTS', mode='before')
    @classmethod
    def _parse_blueprints(cls, blueprints: dict) -> dict[bytes, str]:
        """Accept hex-encoded blueprint ids as well as raw bytes."""
        return {
            bytes.fromhex(key) if isinstance(key, str) else key: name
            for key, name in blueprints.items()
        }
