# Licensed under the Apache License, Version 2.0 (the "License"); you may
# not use this file except in compliance with the License. You may obtain
# a copy of the License at
#
#      http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS, WITHOUT
# WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied. See the
# License for the specific language governing permissions and limitations
# under the License.

import asyncio
import json as jsonutils
import logging
import re
import typing as ty
import uuid

import fixtures
import httpx
import respx
import testtools

from stacksession import session


def _url_pattern(url):
    url = httpx.URL(url)
    pattern = {
        'scheme': url.scheme,
        'host': url.host,
        'path__regex': r'^{}/?$'.format(re.escape(url.path.rstrip('/'))),
    }
    if url.port:
        pattern['port'] = url.port
    if url.query:
        pattern['params__contains'] = url.query.decode()
    return pattern


def _responses(responses):
    """Answer with each response in turn, repeating the last one."""
    pending = list(responses)

    def _respond(request):
        resp = dict(pending.pop(0) if len(pending) > 1 else pending[0])
        return httpx.Response(
            resp.pop('status_code', 200),
            headers=resp.pop('headers', None),
            json=resp.pop('json', None),
            text=resp.pop('text', None),
        )

    return _respond


class TestCase(testtools.TestCase):
    TEST_DOMAIN_ID = uuid.uuid4().hex
    TEST_DOMAIN_NAME = uuid.uuid4().hex
    TEST_GROUP_ID = uuid.uuid4().hex
    TEST_ROLE_ID = uuid.uuid4().hex
    TEST_TENANT_ID = uuid.uuid4().hex
    TEST_TENANT_NAME = uuid.uuid4().hex
    TEST_TOKEN = uuid.uuid4().hex
    TEST_TRUST_ID = uuid.uuid4().hex
    TEST_USER = uuid.uuid4().hex
    TEST_USER_ID = uuid.uuid4().hex

    TEST_ROOT_URL = 'http://127.0.0.1:5000/'
    TEST_URL = '{}{}'.format(TEST_ROOT_URL, 'v3')

    def setUp(self):
        super().setUp()
        self.logger = self.useFixture(fixtures.FakeLogger(level=logging.DEBUG))

        self.loop = asyncio.new_event_loop()
        self.addCleanup(self.loop.close)

        self.respx_mock = respx.MockRouter(assert_all_called=False)
        self.client = httpx.AsyncClient(
            transport=httpx.MockTransport(self.respx_mock.async_handler)
        )
        self.addCleanup(self.run_async, self.client.aclose())

    def run_async(self, coro: ty.Awaitable[ty.Any]) -> ty.Any:
        return self.loop.run_until_complete(coro)

    def session(self, **kwargs: ty.Any) -> session.Session:
        kwargs.setdefault('client', self.client)
        return session.Session(**kwargs)

    @property
    def last_request(self):
        return self.respx_mock.calls.last.request

    @property
    def request_history(self):
        return [request for request, _ in self.respx_mock.calls]

    def stub_url(self, method, parts=None, base_url=None, json=None,
                 response_list=None, side_effect=None, exc=None, **kwargs):
        """Register the response to requests on a URL.

        A response is given by ``status_code``, ``json``, ``text`` and
        ``headers``. ``response_list`` holds several of those, answered in
        turn. ``exc`` is an httpx exception class raised instead, and
        ``side_effect`` any respx side effect.
        """
        if not base_url:
            base_url = self.TEST_URL

        if json is not None:
            kwargs['json'] = json

        if parts:
            url = '/'.join([p.strip('/') for p in [base_url] + parts])
        else:
            url = base_url

        url = url.replace("/?", "?")
        route = self.respx_mock.route(method=method.upper(),
                                      **_url_pattern(url))

        if exc is not None:
            side_effect = exc
        elif side_effect is None:
            side_effect = _responses(response_list or [kwargs])

        return route.mock(side_effect=side_effect)

    def assertRequestBodyIs(self, body=None, json=None):
        last_request_body = self.last_request.content.decode()
        if json:
            val = jsonutils.loads(last_request_body)
            self.assertEqual(json, val)
        elif body:
            self.assertEqual(body, last_request_body)

    def assertQueryStringIs(self, qs=''):
        """Verify the QueryString matches what is expected.

        The qs parameter should be of the format \'foo=bar&abc=xyz\'
        """
        self.assertEqual(qs, self.last_request.url.query.decode())

    def assertRequestHeaderEqual(self, name, val):
        """Verify that the last request made contains a header and its value.

        The request must have already been made.
        """
        headers = self.last_request.headers
        self.assertEqual(headers.get(name), val)

    def assertRequestNotInHeader(self, name):
        """Verify that the last request made does not contain a header key.

        The request must have already been made.
        """
        headers = self.last_request.headers
        self.assertNotIn(name, headers)
