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

from typing import Any

from stakepool.types import Address, Timestamp


class Context:
    """Context passed to a public method call.

    It identifies the caller and the time at which the call is executed. The
    context is immutable; blueprints must not keep references to it across
    calls.
    """
    __slots__ = ('_address', '_timestamp')

    def __init__(self, address: Address, timestamp: int) -> None:
        if timestamp < 0:
            raise ValueError('timestamp must not be negative')
        self._address = Address(bytes(address))
        self._timestamp = Timestamp(int(timestamp))

    @property
    def address(self) -> Address:
        return self._address

    @property
    def timestamp(self) -> Timestamp:
        return self._timestamp

    def __repr__(self) -> str:
        return f'Context(address={self._address.hex()}, timestamp={self._timestamp})'

    def to_json(self) -> dict[str, Any]:
        return {
            'address': self._address.hex(),
            'timestamp': self._timestamp,
        }
