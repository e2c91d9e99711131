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

from typing import TYPE_CHECKING, Any, Union

from pydantic import BaseModel, ConfigDict, ValidationError
from typing_extensions import Self

from stakepool.api_util import get_args

if TYPE_CHECKING:
    from twisted.web.http import Request


class Response(BaseModel):
    """Base class of the API responses."""

    def json_dumpb(self) -> bytes:
        return self.model_dump_json().encode('utf-8')


class ErrorResponse(Response):
    success: bool = False
    error: str


class QueryParams(BaseModel):
    """Base class of the query parameters of a GET request.

    Parameters named `name[]` are collected into a list under `name`.
    """
    model_config = ConfigDict(extra='forbid')

    @classmethod
    def from_request(cls, request: 'Request') -> Union[Self, ErrorResponse]:
        data: dict[str, Any] = {}
        for raw_key, raw_values in get_args(request).items():
            key = raw_key.decode('utf-8')
            values = [value.decode('utf-8') for value in raw_values]
            if key.endswith('[]'):
                data[key[:-2]] = values
            else:
                data[key] = values[0]
        try:
            return cls.model_validate(data)
        except ValidationError as error:
            return ErrorResponse(error=str(error))
