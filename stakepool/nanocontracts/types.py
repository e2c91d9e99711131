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

from dataclasses import dataclass
from typing import Any, Callable, NamedTuple, TypeVar

from stakepool.types import Address, Amount, BlueprintId, ContractId, Timestamp, TokenUid

__all__ = [
    'Address',
    'Amount',
    'BlueprintId',
    'ContractId',
    'NCEvent',
    'PublicMethodInfo',
    'Timestamp',
    'TokenUid',
    'get_public_info',
    'is_view',
    'public',
    'view',
]

NC_PUBLIC_METHOD_ATTR = '__nc_public__'
NC_VIEW_METHOD_ATTR = '__nc_view__'

T = TypeVar('T', bound=Callable[..., Any])


@dataclass(frozen=True, slots=True)
class PublicMethodInfo:
    """Flags the runner enforces before a public method runs."""
    pausable: bool = False
    nonreentrant: bool = False
    authority: bool = False


def public(
    fn: T | None = None,
    *,
    pausable: bool = False,
    nonreentrant: bool = False,
    authority: bool = False,
) -> Any:
    """Decorator to mark a blueprint method as public.

    - `pausable`: the call fails with `Paused` while the access gate reports the contract paused.
    - `nonreentrant`: the call runs inside the contract reentrancy guard.
    - `authority`: only the contract authority may call it.
    """
    info = PublicMethodInfo(pausable=pausable, nonreentrant=nonreentrant, authority=authority)

    def decorator(method: T) -> T:
        setattr(method, NC_PUBLIC_METHOD_ATTR, info)
        return method

    if fn is not None:
        return decorator(fn)
    return decorator


def view(fn: T) -> T:
    """Decorator to mark a blueprint method as view (read-only)."""
    setattr(fn, NC_VIEW_METHOD_ATTR, True)
    return fn


def get_public_info(method: Any) -> PublicMethodInfo | None:
    return getattr(method, NC_PUBLIC_METHOD_ATTR, None)


def is_view(method: Any) -> bool:
    return getattr(method, NC_VIEW_METHOD_ATTR, False)


class NCEvent(NamedTuple):
    """A notification committed by a successful public call."""
    contract_id: ContractId
    timestamp: Timestamp
    data: NamedTuple

    @property
    def name(self) -> str:
        return type(self.data).__name__

    def to_json(self) -> dict[str, Any]:
        payload: dict[str, Any] = {}
        for key, value in self.data._asdict().items():
            payload[key] = value.hex() if isinstance(value, bytes) else value
        return {
            'contract_id': self.contract_id.hex(),
            'timestamp': self.timestamp,
            'name': self.name,
            'data': payload,
        }
