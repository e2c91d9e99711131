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

from collections import defaultdict
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, Callable, Iterator, NamedTuple, Optional

import structlog

from stakepool.nanocontracts.access_gate import AccessGate
from stakepool.nanocontracts.blueprint import Blueprint
from stakepool.nanocontracts.blueprint_env import BlueprintEnvironment
from stakepool.nanocontracts.context import Context
from stakepool.nanocontracts.exception import (
    BlueprintDoesNotExist,
    ContractAlreadyExists,
    NanoContractDoesNotExist,
    NCMethodNotFound,
    Paused,
    Reentrant,
    Unauthorized,
)
from stakepool.nanocontracts.storage import NCChangesTracker, NCMemoryStorageFactory, NCReadOnlyStorage, NCStorage
from stakepool.nanocontracts.token_ledger import TokenMover
from stakepool.nanocontracts.types import NCEvent, get_public_info, is_view
from stakepool.types import BlueprintId, ContractId

logger = structlog.get_logger()

INITIALIZE_METHOD_NAME = 'initialize'


@dataclass
class _CallFrame:
    contract_id: ContractId
    method_name: str
    ctx: Context
    changes: NCChangesTracker
    events: list[NCEvent] = field(default_factory=list)


class Runner:
    """Execute the public and view methods of contracts.

    Each public call is all-or-nothing: storage writes are staged in a
    changes tracker, token movements are journaled and events are buffered
    until the method returns. When the method raises, everything is
    discarded and the exception propagates to the caller.

    An outermost call opens a transaction. Contracts reached through nested
    calls are staged under that transaction too, and nothing is committed
    until the outermost call returns.
    """

    def __init__(
        self,
        storage_factory: Callable[[ContractId], NCStorage],
        token_mover: TokenMover,
        access_gate: AccessGate,
    ) -> None:
        self.log = logger.new()
        self.storage_factory = storage_factory
        self.token_mover = token_mover
        self.access_gate = access_gate
        self.events: list[NCEvent] = []

        self._blueprints: dict[BlueprintId, type[Blueprint]] = {}
        self._contracts: dict[ContractId, BlueprintId] = {}
        self._storages: dict[ContractId, NCStorage] = {}
        self._call_stack: list[_CallFrame] = []
        self._entered: set[ContractId] = set()
        # staged changes of every contract touched by the running outermost call
        self._transaction: Optional[dict[ContractId, NCChangesTracker]] = None
        self._events_by_contract: defaultdict[ContractId, list[NCEvent]] = defaultdict(list)

    @classmethod
    def in_memory(cls, token_mover: TokenMover, access_gate: AccessGate) -> 'Runner':
        return cls(NCMemoryStorageFactory(), token_mover, access_gate)

    def register_blueprint_class(self, blueprint_id: BlueprintId, blueprint_class: type[Blueprint]) -> None:
        assert issubclass(blueprint_class, Blueprint)
        self._blueprints[blueprint_id] = blueprint_class

    def get_blueprint_class(self, blueprint_id: BlueprintId) -> type[Blueprint]:
        try:
            return self._blueprints[blueprint_id]
        except KeyError:
            raise BlueprintDoesNotExist(blueprint_id.hex())

    def has_contract(self, contract_id: ContractId) -> bool:
        return contract_id in self._contracts

    def get_blueprint_id(self, contract_id: ContractId) -> BlueprintId:
        try:
            return self._contracts[contract_id]
        except KeyError:
            raise NanoContractDoesNotExist(contract_id)

    def get_storage(self, contract_id: ContractId) -> NCStorage:
        """Return the committed storage of a contract."""
        self.get_blueprint_id(contract_id)
        return self._storages[contract_id]

    def get_events(self, contract_id: ContractId) -> list[NCEvent]:
        """Return the committed events of a contract, oldest first. The list must not be modified."""
        return self._events_by_contract.get(contract_id, [])

    def create_contract(
        self,
        contract_id: ContractId,
        blueprint_id: BlueprintId,
        ctx: Context,
        *args: Any,
        **kwargs: Any,
    ) -> Any:
        """Create a new contract and run its `initialize` method.

        The caller of `initialize` becomes the contract authority.
        """
        if contract_id in self._contracts:
            raise ContractAlreadyExists(contract_id.hex())
        self.get_blueprint_class(blueprint_id)
        self._contracts[contract_id] = blueprint_id
        self._storages[contract_id] = self.storage_factory(contract_id)
        try:
            ret = self._execute_public_method(contract_id, INITIALIZE_METHOD_NAME, ctx, args, kwargs)
        except Exception:
            del self._contracts[contract_id]
            del self._storages[contract_id]
            raise
        self.access_gate.register(contract_id, ctx.address)
        self.log.info('contract created', contract_id=contract_id.hex(), blueprint_id=blueprint_id.hex())
        return ret

    def call_public_method(self, contract_id: ContractId, method_name: str, ctx: Context,
                           *args: Any, **kwargs: Any) -> Any:
        if method_name == INITIALIZE_METHOD_NAME:
            raise NCMethodNotFound('cannot call initialize on an existing contract')
        return self._execute_public_method(contract_id, method_name, ctx, args, kwargs)

    def call_view_method(self, contract_id: ContractId, method_name: str, *args: Any, **kwargs: Any) -> Any:
        blueprint_class = self.get_blueprint_class(self.get_blueprint_id(contract_id))
        method = getattr(blueprint_class, method_name, None)
        if method is None or not is_view(method):
            raise NCMethodNotFound(f'{blueprint_class.__name__}.{method_name} is not a view method')
        blueprint = self._create_readonly_blueprint(contract_id)
        return method(blueprint, *args, **kwargs)

    def get_readonly_contract(self, contract_id: ContractId) -> Blueprint:
        """Return a blueprint instance bound to the contract state for reading fields."""
        return self._create_readonly_blueprint(contract_id)

    def emit_event(self, contract_id: ContractId, data: NamedTuple) -> None:
        assert self._call_stack, 'events can only be emitted during a public call'
        frame = self._call_stack[-1]
        assert frame.contract_id == contract_id
        frame.events.append(NCEvent(contract_id=contract_id, timestamp=frame.ctx.timestamp, data=data))

    def _create_readonly_blueprint(self, contract_id: ContractId) -> Blueprint:
        blueprint_class = self.get_blueprint_class(self.get_blueprint_id(contract_id))
        storage = NCReadOnlyStorage(self._get_current_storage(contract_id))
        env = BlueprintEnvironment(self, contract_id, storage, read_only=True,
                                   log=self.log.new(contract_id=contract_id.hex()))
        return blueprint_class(env)

    def _get_current_storage(self, contract_id: ContractId, *, stage: bool = False) -> NCStorage:
        """Return the storage a call on `contract_id` must read from.

        That is the staged storage of the innermost running call on this
        contract, else the transaction staging of the contract, else the
        committed storage. With `stage`, a contract reached for the first
        time during a transaction gets its own staging.
        """
        for frame in reversed(self._call_stack):
            if frame.contract_id == contract_id:
                return frame.changes
        if self._transaction is not None:
            changes = self._transaction.get(contract_id)
            if changes is None and stage:
                changes = NCChangesTracker(contract_id, self.get_storage(contract_id))
                self._transaction[contract_id] = changes
            if changes is not None:
                return changes
        return self.get_storage(contract_id)

    @contextmanager
    def _reentrancy_guard(self, contract_id: ContractId, enabled: bool) -> Iterator[None]:
        if not enabled:
            yield
            return
        if contract_id in self._entered:
            raise Reentrant('reentrant call')
        self._entered.add(contract_id)
        try:
            yield
        finally:
            self._entered.discard(contract_id)

    @contextmanager
    def _transaction_scope(self) -> Iterator[bool]:
        """Open a transaction for an outermost call. Yield whether this call owns it."""
        if self._transaction is not None:
            yield False
            return
        self._transaction = {}
        try:
            yield True
        finally:
            self._transaction = None

    def _execute_public_method(self, contract_id: ContractId, method_name: str, ctx: Context,
                               args: tuple[Any, ...], kwargs: dict[str, Any]) -> Any:
        blueprint_class = self.get_blueprint_class(self.get_blueprint_id(contract_id))
        method = getattr(blueprint_class, method_name, None)
        info = get_public_info(method)
        if info is None:
            raise NCMethodNotFound(f'{blueprint_class.__name__}.{method_name} is not a public method')

        if info.authority and not self.access_gate.is_authority(contract_id, ctx.address):
            raise Unauthorized('Unauthorized')
        if info.pausable and self.access_gate.is_paused(contract_id):
            raise Paused('contract is paused')

        with self._transaction_scope() as is_root, self._reentrancy_guard(contract_id, info.nonreentrant):
            changes = NCChangesTracker(contract_id, self._get_current_storage(contract_id, stage=True))
            frame = _CallFrame(contract_id=contract_id, method_name=method_name, ctx=ctx, changes=changes)
            env = BlueprintEnvironment(self, contract_id, changes,
                                       log=self.log.new(contract_id=contract_id.hex(), method=method_name))
            token_snapshot = self.token_mover.snapshot()

            self._call_stack.append(frame)
            try:
                ret = method(blueprint_class(env), ctx, *args, **kwargs)
            except Exception as e:
                self.token_mover.restore(token_snapshot)
                self.log.info('call failed', contract_id=contract_id.hex(), method=method_name,
                              address=ctx.address.hex(), error=type(e).__name__, reason=str(e))
                raise
            finally:
                self._call_stack.pop()

            self.token_mover.release(token_snapshot)
            changes.commit()
            if is_root:
                self._commit_transaction()
            self._publish_events(frame.events)

        self.log.debug('call executed', contract_id=contract_id.hex(), method=method_name,
                       address=ctx.address.hex(), timestamp=ctx.timestamp)
        return ret

    def _commit_transaction(self) -> None:
        """Write the staged changes of every contract touched by the transaction."""
        assert self._transaction is not None
        for changes in self._transaction.values():
            changes.commit()

    def _publish_events(self, events: list[NCEvent]) -> None:
        if self._call_stack:
            # nested call: the events only survive if the outer call succeeds too
            self._call_stack[-1].events.extend(events)
            return
        self.events.extend(events)
        for event in events:
            self._events_by_contract[event.contract_id].append(event)
