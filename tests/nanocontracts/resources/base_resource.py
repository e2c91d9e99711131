import json
import os
import unittest
from typing import Any, Optional

from twisted.internet.task import Clock
from twisted.web.test.requesthelper import DummyRequest

from stakepool.api_util import Resource
from stakepool.conf.unittests import SETTINGS
from stakepool.manager import StakePoolManager
from stakepool.types import Address, BlueprintId, ContractId, TokenUid
from tests.nanocontracts.blueprints.unittest import GENESIS_TIMESTAMP


class _BaseResourceTest(unittest.TestCase):
    """Deploy a funded pool with one staker behind an in-memory manager."""

    def setUp(self) -> None:
        super().setUp()
        self.clock = Clock()
        self.clock.advance(GENESIS_TIMESTAMP)
        self.manager = StakePoolManager.create_in_memory(self.clock, settings=SETTINGS)
        self.runner = self.manager.runner

        self.blueprint_id = BlueprintId(next(iter(SETTINGS.BLUEPRINTS)))
        self.contract_id = ContractId(os.urandom(32))
        self.staking_token = TokenUid(os.urandom(32))
        self.reward_token = TokenUid(os.urandom(32))
        self.owner = Address(os.urandom(25))
        self.alice = Address(os.urandom(25))
        self.t0 = self.manager.get_current_timestamp()

        self.runner.create_contract(
            self.contract_id,
            self.blueprint_id,
            self.manager.create_context(self.owner),
            self.staking_token,
            self.reward_token,
            SETTINGS.DEFAULT_REWARDS_DURATION,
        )
        self.manager.token_ledger.mint(self.alice, self.staking_token, 1000)
        self.manager.token_ledger.mint(self.contract_id, self.reward_token, 1000)
        self.runner.call_public_method(self.contract_id, 'stake', self.manager.create_context(self.alice), 100)
        self.runner.call_public_method(
            self.contract_id, 'start_new_period', self.manager.create_context(self.owner), 1000
        )

    def get(self, resource: Resource, args: dict[str, Any]) -> tuple[Optional[int], dict[str, Any]]:
        """Render a GET request and return the response code and decoded body."""
        request = DummyRequest([b''])
        request.args = {
            key.encode('utf-8'): [str(value).encode('utf-8')]
            for key, value in args.items()
        }
        body = resource.render_GET(request)
        return request.responseCode, json.loads(body)
