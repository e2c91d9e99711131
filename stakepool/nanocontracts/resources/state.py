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

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Optional

from pydantic import Field, field_validator

from stakepool.api_util import Resource, set_cors
from stakepool.nanocontracts.exception import NanoContractDoesNotExist, NCFail
from stakepool.types import Address, ContractId, Timestamp
from stakepool.utils.api import ErrorResponse, QueryParams, Response

if TYPE_CHECKING:
    from twisted.web.http import Request

    from stakepool.manager import StakePoolManager


class PoolStateResource(Resource):
    """ Implements a web server GET API to get the state of a staking pool.

    The pool statistics are computed at `timestamp`, or at the current time
    of the node when it is not given. With `address`, the position of that
    address is included.
    """
    isLeaf = True

    def __init__(self, manager: 'StakePoolManager') -> None:
        super().__init__()
        self.manager = manager

    def render_GET(self, request: 'Request') -> bytes:
        request.setHeader(b'content-type', b'application/json; charset=utf-8')
        set_cors(request, 'GET')

        params = PoolStateParams.from_request(request)
        if isinstance(params, ErrorResponse):
            request.setResponseCode(400)
            return params.json_dumpb()

        nc_id = ContractId(bytes.fromhex(params.id))
        runner = self.manager.runner
        try:
            blueprint_id = runner.get_blueprint_id(nc_id)
        except NanoContractDoesNotExist:
            request.setResponseCode(404)
            error_response = ErrorResponse(success=False, error=f'Pool {params.id} does not exist.')
            return error_response.json_dumpb()

        blueprint_class = runner.get_blueprint_class(blueprint_id)
        timestamp = Timestamp(params.timestamp if params.timestamp is not None
                              else self.manager.get_current_timestamp())

        try:
            pool_info = runner.call_view_method(nc_id, 'front_end_api', timestamp)
            user_info: Optional[dict[str, Any]] = None
            if params.address is not None:
                address = Address(bytes.fromhex(params.address))
                user_info = runner.call_view_method(nc_id, 'get_user_info', address, timestamp)._asdict()
        except NCFail as e:
            # e.g. a timestamp older than the last checkpoint of the pool
            request.setResponseCode(400)
            error_response = ErrorResponse(success=False, error=f'{type(e).__name__}: {e}')
            return error_response.json_dumpb()

        balances: dict[str, str] = {}
        for token_uid_hex in (pool_info.staking_token, pool_info.reward_token):
            balance = self.manager.token_ledger.balance_of(nc_id, bytes.fromhex(token_uid_hex))
            balances[token_uid_hex] = str(balance)

        response = PoolStateResponse(
            success=True,
            nc_id=params.id,
            blueprint_id=blueprint_id.hex(),
            blueprint_name=blueprint_class.__name__,
            timestamp=timestamp,
            paused=self.manager.access_gate.is_paused(nc_id),
            pool=pool_info._asdict(),
            user=user_info,
            balances=balances,
        )
        return response.json_dumpb()


def _validate_hex(value: Optional[str]) -> Optional[str]:
    if value is None:
        return value
    try:
        bytes.fromhex(value)
    except ValueError:
        raise ValueError(f'invalid hex value: {value}')
    return value


class PoolStateParams(QueryParams):
    id: str
    address: Optional[str] = None
    timestamp: Optional[int] = Field(default=None, ge=0)

    @field_validator('id', 'address')
    @classmethod
    def _validate_hex_fields(cls, value: Optional[str]) -> Optional[str]:
        return _validate_hex(value)


class PoolStateResponse(Response):
    success: bool
    nc_id: str
    blueprint_id: str
    blueprint_name: str
    timestamp: int
    paused: bool
    pool: dict[str, Any]
    user: Optional[dict[str, Any]]
    balances: dict[str, str]
