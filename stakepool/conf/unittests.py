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

from stakepool.conf.settings import StakePoolSettings

SETTINGS = StakePoolSettings(
    NETWORK_NAME='unittests',
    DEFAULT_REWARDS_DURATION=1000,
    API_DEFAULT_EVENTS_PER_PAGE=5,
    API_MAX_EVENTS_PER_PAGE=10,
    BLUEPRINTS={
        bytes.fromhex(
            "0000000000000000000000000000000000000000000000000000000000000001"
        ): "StakingRewards",
    },
)
