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

from stakepool.types import Address, ContractId


class NCError(Exception):
    """Base exception for errors raised by the runtime itself."""
    pass


class BlueprintDoesNotExist(NCError):
    pass


class ContractAlreadyExists(NCError):
    pass


class NanoContractDoesNotExist(NCError):
    def __init__(self, contract_id: ContractId) -> None:
        super().__init__(f'contract {contract_id.hex()} does not exist')
        self.contract_id = contract_id


class NCMethodNotFound(NCError):
    """Raised when a method is not found or is not exposed with the requested decorator."""
    pass


class NCFail(Exception):
    """Raised by blueprint methods to abort a call.

    Every change performed by the failed call is discarded, including token
    movements and emitted events.
    """
    pass


class NCViewMethodError(NCFail):
    """Raised when a view method tries to change the contract state."""
    pass


class NCUninitializedContractError(NCFail):
    pass


class NCArithmeticError(NCFail):
    """Base class for unsigned 256-bit arithmetic faults."""
    pass


class NCOverflow(NCArithmeticError):
    pass


class NCUnderflow(NCArithmeticError):
    pass


class NCDivisionByZero(NCArithmeticError):
    pass


class Unauthorized(NCFail):
    """Raised when the caller is not the contract authority."""
    pass


class Paused(NCFail):
    """Raised when a user-facing method is called while the contract is paused."""
    pass


class Reentrant(NCFail):
    """Raised when a guarded method is entered while another guarded call is running."""
    pass


class TransferFailed(NCFail):
    """Raised when the token mover refuses a transfer."""

    def __init__(self, message: str, *, address: Address | None = None) -> None:
        super().__init__(message)
        self.address = address
