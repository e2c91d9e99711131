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

from typing import TYPE_CHECKING

from stakepool.nanocontracts.blueprints.staking_rewards import StakingRewards

if TYPE_CHECKING:
    from stakepool.nanocontracts.blueprint import Blueprint

_blueprints_mapper: dict[str, type['Blueprint']] = {
    'StakingRewards': StakingRewards,
}

__all__ = [
    'StakingRewards',
    'get_blueprint_class_by_name',
]


def get_blueprint_class_by_name(name: str) -> type['Blueprint']:
    try:
        return _blueprints_mapper[name]
    except KeyError:
        raise ValueError(f'unknown blueprint: {name}')
