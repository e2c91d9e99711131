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

from stakepool.conf.settings import DAY_IN_SECONDS, StakePoolSettings

SETTINGS = StakePoolSettings(
    NETWORK_NAME='stakepool-testnet',
    NATIVE_TOKEN_UID=b'\x00',
    DEFAULT_REWARDS_DURATION=7 * DAY_IN_SECONDS,
    API_DEFAULT_EVENTS_PER_PAGE=20,
    API_MAX_EVENTS_PER_PAGE=100,
    BLUEPRINTS={
        bytes.fromhex(
            "3f1c2a8d9b7e4c6a5d0e1f2b3c4d5e6f708192a3b4c5d6e7f8091a2b3c4d5e6f"
        ): "StakingRewards",
    },
)
