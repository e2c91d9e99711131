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
from stakepool.nanocontracts.exception import NanoContractDoesNotExist
from stakepool.types import ContractId
from stakepool.utils.api import ErrorResponse, QueryParams, Response

if TYPE_CHECKING:
    from twisted.web.http import Request

    from stakepool.manager import StakePoolManager


class PoolHistoryResource(Resource):
    """ Implements a web server GET API to list the events of a staking pool.

    Events are returned oldest first. `after` is the number of events to
    skip, `count` the page size (capped by API_MAX_EVENTS_PER_PAGE).
    """
    isLeaf = True

    def __init__(self, manager: 'StakePoolManager') -> None:
        super().__init__()
        self.manager = manager

    def render_GET(self, request: 'Request') -> bytes:
        request.setHeader(b'content-type', b'application/json; charset=utf-8')
        set_cors(request, 'GET')

        params = PoolHistoryParams.from_request(request)
        if isinstance(params, ErrorResponse):
            request.setResponseCode(400)
            return params.json_dumpb()

        settings = self.manager.settings
        count = params.count if params.count is not None else settings.API_DEFAULT_EVENTS_PER_PAGE
        if count > settings.API_MAX_EVENTS_PER_PAGE:
            request.setResponseCode(400)
            error_response = ErrorResponse(
                success=False,
                error=f'count must not exceed {settings.API_MAX_EVENTS_PER_PAGE}',
            )
            return error_response.json_dumpb()

        nc_id = ContractId(bytes.fromhex(params.id))
        try:
            self.manager.runner.get_blueprint_id(nc_id)
        except NanoContractDoesNotExist:
            request.setResponseCode(404)
            error_response = ErrorResponse(success=False, error=f'Pool {params.id} does not exist.')
            return error_response.json_dumpb()

        events = self.manager.runner.get_events(nc_id)
        if params.name is not None:
            events = [event for event in events if event.name == params.name]
        page = events[params.after:params.after + count]

        response = PoolHistoryResponse(
            success=True,
            nc_id=params.id,
            events=[event.to_json() for event in page],
            has_more=params.after + count < len(events),
        )
        return response.json_dumpb()


class PoolHistoryParams(QueryParams):
    id: str
    after: int = Field(default=0, ge=0)
    count: Optional[int] = Field(default=None, ge=1)
    name: Optional[str] = None

    @field_validator('id')
    @classmethod
    def _validate_id(cls, value: str) -> str:
        try:
            bytes.fromhex(value)
        except ValueError:
            raise ValueError(f'invalid hex value: {value}')
        return value


class PoolHistoryResponse(Response):
    success: bool
    nc_id: str
    events: list[dict[str, Any]]
    has_more: bool
