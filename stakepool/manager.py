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

from typing import TYPE_CHECKING, Optional

import structlog
from twisted.web import server
from typing_extensions import Self

from stakepool.api_util import Resource
from stakepool.conf.get_settings import get_global_settings
from stakepool.conf.settings import StakePoolSettings
from stakepool.nanocontracts.access_gate import SimpleAccessGate
from stakepool.nanocontracts.blueprints import get_blueprint_class_by_name
from stakepool.nanocontracts.context import Context
from stakepool.nanocontracts.resources import PoolHistoryResource, PoolStateResource
from stakepool.nanocontracts.runner import Runner
from stakepool.nanocontracts.token_ledger import MemoryTokenLedger
from stakepool.types import Address, BlueprintId

if TYPE_CHECKING:
    from twisted.internet.interfaces import IReactorTime

logger = structlog.get_logger()


class StakePoolManager:
    """Hold everything a node needs to run staking pools: clock, runner and collaborators."""

    def __init__(
        self,
        reactor: 'IReactorTime',
        runner: Runner,
        token_ledger: MemoryTokenLedger,
        access_gate: SimpleAccessGate,
        *,
        settings: Optional[StakePoolSettings] = None,
    ) -> None:
        self.log = logger.new()
        self.reactor = reactor
        self.runner = runner
        self.token_ledger = token_ledger
        self.access_gate = access_gate
        self.settings = settings or get_global_settings()

    @classmethod
    def create_in_memory(cls, reactor: 'IReactorTime', *, settings: Optional[StakePoolSettings] = None) -> Self:
        """Create a manager with in-memory storage and every known blueprint registered."""
        settings = settings or get_global_settings()
        token_ledger = MemoryTokenLedger()
        access_gate = SimpleAccessGate()
        runner = Runner.in_memory(token_ledger, access_gate)
        for blueprint_id, name in settings.BLUEPRINTS.items():
            runner.register_blueprint_class(BlueprintId(blueprint_id), get_blueprint_class_by_name(name))
        manager = cls(reactor, runner, token_ledger, access_gate, settings=settings)
        manager.log.info('manager created', network=settings.NETWORK_NAME, blueprints=len(settings.BLUEPRINTS))
        return manager

    def get_current_timestamp(self) -> int:
        return int(self.reactor.seconds())

    def create_context(self, address: Address, timestamp: Optional[int] = None) -> Context:
        """Create a context for `address` at `timestamp`, defaulting to the current time."""
        if timestamp is None:
            timestamp = self.get_current_timestamp()
        return Context(address=address, timestamp=timestamp)

    def build_resources(self) -> Resource:
        root = Resource()
        pool = Resource()
        root.putChild(b'pool', pool)
        pool.putChild(b'state', PoolStateResource(self))
        pool.putChild(b'history', PoolHistoryResource(self))
        return root

    def build_site(self) -> server.Site:
        return server.Site(self.build_resources())
