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

from typing import TYPE_CHECKING

from twisted.web.resource import Resource as TwistedResource

if TYPE_CHECKING:
    from twisted.web.http import Request


class Resource(TwistedResource):
    openapi: dict = {}


def set_cors(request: 'Request', method: str) -> None:
    request.setHeader(b'Access-Control-Allow-Origin', b'*')
    request.setHeader(b'Access-Control-Allow-Methods', method.encode('ascii'))
    request.setHeader(b'Access-Control-Allow-Headers', b'x-prototype-version,x-requested-with,content-type')


def get_args(request: 'Request') -> dict[bytes, list[bytes]]:
    """Return the query arguments of a request, never None."""
    return request.args or {}
