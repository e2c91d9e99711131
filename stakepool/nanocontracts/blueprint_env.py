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

from typing import TYPE_CHECKING, NamedTuple

from stakepool.nanocontracts.exception import NCViewMethodError, TransferFailed
from stakepool.nanocontracts.storage import NCStorage
from stakepool.types import Address, Amount, ContractId, TokenUid

if TYPE_CHECKING:
    from structlog.stdlib import BoundLogger

    from stakepool.nanocontracts.runner import Runner


class BlueprintEnvironment:
    """Syscalls available to a running blueprint method."""

    def __init__(
        self,
        runner: 'Runner',
        contract_id: ContractId,
        storage: NCStorage,
        *,
        log: 'BoundLogger',
        read_only: bool = False,
    ) -> None:
        self.__runner = runner
        self.__contract_id = contract_id
        self.__storage = storage
        self.__read_only = read_only
        self.log = log

    @property
    def storage(self) -> NCStorage:
        return self.__storage

    def get_contract_id(self) -> ContractId:
        return self.__contract_id

    def get_current_balance(self, token_uid: TokenUid) -> Amount:
        """Return the amount of `token_uid` held in the custody of this contract."""
        return self.__runner.token_mover.balance_of(self.__contract_id, token_uid)

    def transfer_in(self, token_uid: TokenUid, address: Address, amount: int) -> None:
        """Pull `amount` of `token_uid` from `address` into contract custody."""
        self._check_writable()
        if not self.__runner.token_mover.pull(self.__contract_id, token_uid, address, Amount(amount)):
            raise TransferFailed(f'could not pull {amount} of {token_uid.hex()}', address=address)

    def transfer_out(self, token_uid: TokenUid, address: Address, amount: int) -> None:
        """Push `amount` of `token_uid` from contract custody to `address`."""
        self._check_writable()
        if not self.__runner.token_mover.push(self.__contract_id, token_uid, address, Amount(amount)):
            raise TransferFailed(f'could not push {amount} of {token_uid.hex()}', address=address)

    def emit_event(self, data: NamedTuple) -> None:
        """Emit a notification. It is only published if the whole call succeeds."""
        self._check_writable()
        self.__runner.emit_event(self.__contract_id, data)

    def _check_writable(self) -> None:
        if self.__read_only:
            raise NCViewMethodError('view methods cannot move tokens or emit events')
