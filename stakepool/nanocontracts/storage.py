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

from abc import ABC, abstractmethod
from typing import Any, Hashable, Iterator

import structlog

from stakepool.nanocontracts.exception import NCViewMethodError
from stakepool.types import ContractId

logger = structlog.get_logger()

_NOT_PROVIDED = object()


class NCStorage(ABC):
    """Key-value storage of a single contract.

    Scalar fields are stored under their name, dict entries under a
    `(field_name, key)` tuple.
    """

    @abstractmethod
    def get(self, key: Hashable, default: Any = _NOT_PROVIDED) -> Any:
        """Return the value stored for `key`. Raise KeyError if missing and no default is given."""
        raise NotImplementedError

    @abstractmethod
    def put(self, key: Hashable, value: Any) -> None:
        raise NotImplementedError

    @abstractmethod
    def has(self, key: Hashable) -> bool:
        raise NotImplementedError


class NCMemoryStorage(NCStorage):
    """Committed storage of a contract, kept in memory."""

    def __init__(self, contract_id: ContractId) -> None:
        self.contract_id = contract_id
        self._data: dict[Hashable, Any] = {}

    def get(self, key: Hashable, default: Any = _NOT_PROVIDED) -> Any:
        try:
            return self._data[key]
        except KeyError:
            if default is _NOT_PROVIDED:
                raise
            return default

    def put(self, key: Hashable, value: Any) -> None:
        self._data[key] = value

    def has(self, key: Hashable) -> bool:
        return key in self._data

    def __iter__(self) -> Iterator[Hashable]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)


class NCChangesTracker(NCStorage):
    """Stage writes on top of another storage until `commit()` is called.

    Reads fall through to the parent storage for keys that were not written
    in this tracker. Discarding a tracker discards its changes.
    """

    def __init__(self, contract_id: ContractId, storage: NCStorage) -> None:
        self.contract_id = contract_id
        self.storage = storage
        self.data: dict[Hashable, Any] = {}
        self._committed = False
        self.log = logger.new(contract_id=contract_id.hex())

    def get(self, key: Hashable, default: Any = _NOT_PROVIDED) -> Any:
        if key in self.data:
            return self.data[key]
        return self.storage.get(key, default)

    def put(self, key: Hashable, value: Any) -> None:
        assert not self._committed, 'changes tracker already committed'
        self.data[key] = value

    def has(self, key: Hashable) -> bool:
        return key in self.data or self.storage.has(key)

    def is_empty(self) -> bool:
        return not self.data

    def commit(self) -> None:
        """Write every staged change into the parent storage."""
        assert not self._committed, 'changes tracker already committed'
        for key, value in self.data.items():
            self.storage.put(key, value)
        self.log.debug('changes committed', count=len(self.data))
        self._committed = True


class NCReadOnlyStorage(NCStorage):
    """Storage wrapper used by view methods."""

    def __init__(self, storage: NCStorage) -> None:
        self.storage = storage

    def get(self, key: Hashable, default: Any = _NOT_PROVIDED) -> Any:
        return self.storage.get(key, default)

    def put(self, key: Hashable, value: Any) -> None:
        raise NCViewMethodError('cannot change the state in a view method')

    def has(self, key: Hashable) -> bool:
        return self.storage.has(key)


class NCMemoryStorageFactory:
    """Create and keep the in-memory storage of each contract."""

    def __init__(self) -> None:
        self._storages: dict[ContractId, NCMemoryStorage] = {}

    def __call__(self, contract_id: ContractId) -> NCMemoryStorage:
        storage = self._storages.get(contract_id)
        if storage is None:
            storage = NCMemoryStorage(contract_id)
            self._storages[contract_id] = storage
        return storage
