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

from typing import Protocol

import structlog

from stakepool.nanocontracts.exception import Unauthorized
from stakepool.types import Address, ContractId

logger = structlog.get_logger()


class AccessGate(Protocol):
    """Answers the authority and pause questions the runner asks before each call."""

    def register(self, contract_id: ContractId, authority: Address) -> None:
        ...

    def is_authority(self, contract_id: ContractId, address: Address) -> bool:
        ...

    def is_paused(self, contract_id: ContractId) -> bool:
        ...


class SimpleAccessGate:
    """One authority per contract and a pause flag it controls."""

    def __init__(self) -> None:
        self.log = logger.new()
        self._authorities: dict[ContractId, Address] = {}
        self._paused: set[ContractId] = set()

    def register(self, contract_id: ContractId, authority: Address) -> None:
        if contract_id in self._authorities:
            raise ValueError(f'contract {contract_id.hex()} already has an authority')
        self._authorities[contract_id] = authority
        self.log.info('authority registered', contract_id=contract_id.hex(), authority=authority.hex())

    def get_authority(self, contract_id: ContractId) -> Address | None:
        return self._authorities.get(contract_id)

    def is_authority(self, contract_id: ContractId, address: Address) -> bool:
        authority = self._authorities.get(contract_id)
        return authority is not None and authority == address

    def is_paused(self, contract_id: ContractId) -> bool:
        return contract_id in self._paused

    def pause(self, contract_id: ContractId, caller: Address) -> None:
        self._require_authority(contract_id, caller)
        self._paused.add(contract_id)
        self.log.info('contract paused', contract_id=contract_id.hex())

    def unpause(self, contract_id: ContractId, caller: Address) -> None:
        self._require_authority(contract_id, caller)
        self._paused.discard(contract_id)
        self.log.info('contract unpaused', contract_id=contract_id.hex())

    def transfer_authority(self, contract_id: ContractId, caller: Address, new_authority: Address) -> None:
        self._require_authority(contract_id, caller)
        self._authorities[contract_id] = new_authority
        self.log.info('authority transferred', contract_id=contract_id.hex(), authority=new_authority.hex())

    def _require_authority(self, contract_id: ContractId, caller: Address) -> None:
        if not self.is_authority(contract_id, caller):
            raise Unauthorized('Unauthorized')
