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

from typing import Any, Callable, NamedTuple, Optional, Protocol

import structlog

from stakepool.types import Address, Amount, ContractId, TokenUid

logger = structlog.get_logger()

ReceiveHook = Callable[[TokenUid, Amount], None]


class TokenMover(Protocol):
    """Moves tokens between user addresses and contract custody.

    `pull` and `push` report failure by returning False. `snapshot` marks
    the start of a call; the runner then either `restore`s the mark to undo
    the transfers of a failed call or `release`s it when the call succeeds.
    """

    def pull(self, contract_id: ContractId, token_uid: TokenUid, address: Address, amount: Amount) -> bool:
        ...

    def push(self, contract_id: ContractId, token_uid: TokenUid, address: Address, amount: Amount) -> bool:
        ...

    def balance_of(self, holder: bytes, token_uid: TokenUid) -> Amount:
        ...

    def snapshot(self) -> Any:
        ...

    def restore(self, snapshot: Any) -> None:
        ...

    def release(self, snapshot: Any) -> None:
        ...


class _JournalEntry(NamedTuple):
    src: Optional[bytes]  # None for a mint
    dst: bytes
    token_uid: TokenUid
    amount: int


class MemoryTokenLedger:
    """In-memory token balances for addresses and contracts.

    A receive hook registered for a holder runs right after that holder is
    credited, the same way token callbacks run on-chain, so it may call back
    into the runner.

    While a snapshot is open every balance change is journaled, so undoing a
    call only replays the changes it made.
    """

    def __init__(self) -> None:
        self.log = logger.new()
        self._balances: dict[tuple[bytes, TokenUid], int] = {}
        self._receive_hooks: dict[bytes, ReceiveHook] = {}
        self._journal: list[_JournalEntry] = []
        self._open_snapshots = 0

    def balance_of(self, holder: bytes, token_uid: TokenUid) -> Amount:
        return Amount(self._balances.get((holder, token_uid), 0))

    def total_supply(self, token_uid: TokenUid) -> Amount:
        return Amount(sum(value for (_, uid), value in self._balances.items() if uid == token_uid))

    def mint(self, holder: bytes, token_uid: TokenUid, amount: int) -> None:
        if amount < 0:
            raise ValueError('amount must not be negative')
        self._credit(holder, token_uid, amount)
        self._record(None, holder, token_uid, amount)

    def set_receive_hook(self, holder: bytes, hook: ReceiveHook | None) -> None:
        if hook is None:
            self._receive_hooks.pop(holder, None)
        else:
            self._receive_hooks[holder] = hook

    def transfer(self, src: bytes, dst: bytes, token_uid: TokenUid, amount: int) -> bool:
        if amount < 0:
            raise ValueError('amount must not be negative')
        available = self._balances.get((src, token_uid), 0)
        if available < amount:
            self.log.debug('transfer refused', src=src.hex(), token_uid=token_uid.hex(),
                           amount=amount, available=available)
            return False
        self._balances[(src, token_uid)] = available - amount
        self._credit(dst, token_uid, amount)
        self._record(src, dst, token_uid, amount)
        hook = self._receive_hooks.get(dst)
        if hook is not None:
            hook(token_uid, Amount(amount))
        return True

    def pull(self, contract_id: ContractId, token_uid: TokenUid, address: Address, amount: Amount) -> bool:
        return self.transfer(address, contract_id, token_uid, amount)

    def push(self, contract_id: ContractId, token_uid: TokenUid, address: Address, amount: Amount) -> bool:
        return self.transfer(contract_id, address, token_uid, amount)

    def snapshot(self) -> int:
        """Open a snapshot and return its mark in the journal."""
        self._open_snapshots += 1
        return len(self._journal)

    def restore(self, snapshot: int) -> None:
        """Undo every balance change made since `snapshot` and close it."""
        assert self._open_snapshots > 0, 'no open snapshot'
        while len(self._journal) > snapshot:
            entry = self._journal.pop()
            self._balances[(entry.dst, entry.token_uid)] -= entry.amount
            if entry.src is not None:
                self._credit(entry.src, entry.token_uid, entry.amount)
        self._close_snapshot()

    def release(self, snapshot: int) -> None:
        """Close `snapshot` keeping its changes. They can still be undone by an enclosing snapshot."""
        assert self._open_snapshots > 0, 'no open snapshot'
        assert snapshot <= len(self._journal)
        self._close_snapshot()

    def _close_snapshot(self) -> None:
        self._open_snapshots -= 1
        if self._open_snapshots == 0:
            self._journal.clear()

    def _credit(self, holder: bytes, token_uid: TokenUid, amount: int) -> None:
        key = (holder, token_uid)
        self._balances[key] = self._balances.get(key, 0) + amount

    def _record(self, src: Optional[bytes], dst: bytes, token_uid: TokenUid, amount: int) -> None:
        if self._open_snapshots:
            self._journal.append(_JournalEntry(src, dst, token_uid, amount))
