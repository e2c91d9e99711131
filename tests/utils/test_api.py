import json
import unittest
from typing import Optional

from pydantic import Field
from twisted.web.test.requesthelper import DummyRequest

from stakepool.api_util import get_args, set_cors
from stakepool.utils.api import ErrorResponse, QueryParams, Response


class MyParams(QueryParams):
    id: str
    count: int = Field(default=10, ge=1)
    names: list[str] = []
    after: Optional[int] = None


class MyResponse(Response):
    success: bool
    value: int


class ApiUtilsTestCase(unittest.TestCase):
    def _request(self, args: dict[bytes, list[bytes]]) -> DummyRequest:
        request = DummyRequest([b''])
        request.args = args
        return request

    def test_from_request(self) -> None:
        params = MyParams.from_request(self._request({
            b'id': [b'abc'],
            b'count': [b'3'],
            b'names[]': [b'a', b'b'],
        }))
        assert isinstance(params, MyParams)
        self.assertEqual(params.id, 'abc')
        self.assertEqual(params.count, 3)
        self.assertEqual(params.names, ['a', 'b'])
        self.assertIsNone(params.after)

    def test_from_request_invalid(self) -> None:
        for args in (
            {},
            {b'id': [b'abc'], b'count': [b'0']},
            {b'id': [b'abc'], b'count': [b'x']},
            {b'id': [b'abc'], b'unknown': [b'1']},
        ):
            error = MyParams.from_request(self._request(args))
            self.assertIsInstance(error, ErrorResponse)
            assert isinstance(error, ErrorResponse)
            self.assertFalse(error.success)
            self.assertTrue(error.error)

    def test_get_args(self) -> None:
        request = DummyRequest([b''])
        request.args = None
        self.assertEqual(get_args(request), {})

    def test_set_cors(self) -> None:
        request = DummyRequest([b''])
        set_cors(request, 'GET')
        self.assertEqual(request.responseHeaders.getRawHeaders(b'Access-Control-Allow-Origin'), [b'*'])
        self.assertEqual(request.responseHeaders.getRawHeaders(b'Access-Control-Allow-Methods'), [b'GET'])

    def test_json_dumpb(self) -> None:
        self.assertEqual(json.loads(MyResponse(success=True, value=3).json_dumpb()), {'success': True, 'value': 3})
        self.assertEqual(json.loads(ErrorResponse(error='bad').json_dumpb()), {'success': False, 'error': 'bad'})
