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

import inspect
from typing import TYPE_CHECKING, Any, Hashable, get_origin

from stakepool.nanocontracts.exception import NCUninitializedContractError

if TYPE_CHECKING:
    from structlog.stdlib import BoundLogger

    from stakepool.nanocontracts.blueprint_env import BlueprintEnvironment

_MISSING = object()


class Field:
    """Descriptor for a scalar blueprint field stored under its own name."""

    def __init__(self, name: str, field_type: Any) -> None:
        self.name = name
        self.field_type = field_type

    def __get__(self, instance: 'Blueprint | None', owner: type) -> Any:
        if instance is None:
            return self
        value = instance.syscall.storage.get(self.name, _MISSING)
        if value is _MISSING:
            raise NCUninitializedContractError(f'field `{self.name}` is not initialized')
        return value

    def __set__(self, instance: 'Blueprint', value: Any) -> None:
        instance.syscall.storage.put(self.name, value)


class DictContainer:
    """Mapping view over the `(field_name, key)` entries of a dict field.

    Entries are created on first write and never deleted.
    """
    __slots__ = ('_storage', '_name')

    def __init__(self, storage: Any, name: str) -> None:
        self._storage = storage
        self._name = name

    def _key(self, key: Hashable) -> tuple[str, Hashable]:
        return (self._name, key)

    def __getitem__(self, key: Hashable) -> Any:
        value = self._storage.get(self._key(key), _MISSING)
        if value is _MISSING:
            raise KeyError(key)
        return value

    def __setitem__(self, key: Hashable, value: Any) -> None:
        self._storage.put(self._key(key), value)

    def __contains__(self, key: Hashable) -> bool:
        return self._storage.has(self._key(key))

    def get(self, key: Hashable, default: Any = None) -> Any:
        return self._storage.get(self._key(key), default)


class DictField(Field):
    def __get__(self, instance: 'Blueprint | None', owner: type) -> Any:
        if instance is None:
            return self
        return DictContainer(instance.syscall.storage, self.name)

    def __set__(self, instance: 'Blueprint', value: Any) -> None:
        raise AttributeError(f'dict field `{self.name}` cannot be reassigned')


def make_field(name: str, field_type: Any) -> Field:
    if get_origin(field_type) is dict:
        return DictField(name, field_type)
    return Field(name, field_type)


class _BlueprintBase(type):
    """Metaclass that turns the annotated attributes of a blueprint into storage fields."""

    def __new__(mcls, name: str, bases: tuple[type, ...], attrs: dict[str, Any], **kwargs: Any) -> Any:
        cls = super().__new__(mcls, name, bases, attrs, **kwargs)
        fields: dict[str, Any] = {}
        for base in reversed(cls.__mro__[1:]):
            fields.update(getattr(base, '_fields', {}))
        for field_name, field_type in inspect.get_annotations(cls, eval_str=True).items():
            fields[field_name] = field_type
            setattr(cls, field_name, make_field(field_name, field_type))
        cls._fields = fields
        return cls


class Blueprint(metaclass=_BlueprintBase):
    """Base class for all blueprints.

    Class-level annotations declare the contract state. Scalar fields are
    read and written as plain attributes; `dict[K, V]` fields behave like
    mappings whose missing keys read through `.get(key, default)`.

    Example:

        class MyBlueprint(Blueprint):
            counter: int
            balances: dict[Address, Amount]
    """
    __slots__ = ('_env',)

    def __init__(self, env: 'BlueprintEnvironment') -> None:
        self._env = env

    @property
    def syscall(self) -> 'BlueprintEnvironment':
        """Interface to the runtime: balances, token transfers and events."""
        return self._env

    @property
    def log(self) -> 'BoundLogger':
        return self._env.log
