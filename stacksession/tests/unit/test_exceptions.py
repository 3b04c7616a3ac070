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

import json

import httpx

from stacksession import discover
from stacksession import exceptions
from stacksession.tests.unit import utils


class ExtractMessageTests(utils.TestCase):

    def test_plain_text(self):
        self.assertEqual('Oops', exceptions.extract_message('Oops'))

    def test_top_level_message(self):
        body = json.dumps({'message': 'Bad thing', 'code': 400})
        self.assertEqual('Bad thing', exceptions.extract_message(body))

    def test_wrapped_message(self):
        body = json.dumps({'badRequest': {'message': 'Invalid flavor',
                                          'code': 400}})
        self.assertEqual('Invalid flavor', exceptions.extract_message(body))

    def test_faultstring(self):
        body = json.dumps({'faultstring': 'No such node'})
        self.assertEqual('No such node', exceptions.extract_message(body))

    def test_nested_error_message(self):
        body = json.dumps({
            'error_message': json.dumps({'faultstring': 'Node locked'}),
        })
        self.assertEqual('Node locked', exceptions.extract_message(body))

    def test_unrecognized_json(self):
        body = json.dumps({'a': 1, 'b': 2})
        self.assertEqual(body, exceptions.extract_message(body))


class FromResponseTests(utils.TestCase):

    URL = 'http://svc.example/things'

    def _response(self, status_code, **kwargs):
        request = httpx.Request('GET', self.URL)
        return httpx.Response(status_code, request=request, **kwargs)

    def test_known_codes(self):
        for status, cls in ((400, exceptions.BadRequest),
                            (401, exceptions.Unauthorized),
                            (403, exceptions.Forbidden),
                            (404, exceptions.NotFound),
                            (409, exceptions.Conflict),
                            (500, exceptions.InternalServerError),
                            (503, exceptions.ServiceUnavailable)):
            e = exceptions.from_response(self._response(status), 'GET',
                                         self.URL)
            self.assertIsInstance(e, cls)
            self.assertEqual(status, e.http_status)

    def test_unknown_codes(self):
        e = exceptions.from_response(self._response(429), 'GET', self.URL)
        self.assertIs(exceptions.HTTPClientError, type(e))

        e = exceptions.from_response(self._response(599), 'GET', self.URL)
        self.assertIs(exceptions.HttpServerError, type(e))

    def test_details(self):
        resp = self._response(
            404,
            json={'itemNotFound': {'message': 'No thing', 'code': 404}},
            headers={'X-OpenStack-Request-ID': 'req-abc'})

        e = exceptions.from_response(resp, 'GET', self.URL)

        self.assertEqual('No thing', e.message)
        self.assertEqual('req-abc', e.request_id)
        self.assertEqual('GET', e.method)
        self.assertEqual(self.URL, e.url)
        self.assertIs(resp, e.response)
        self.assertEqual('No thing (HTTP 404) (Request-ID: req-abc)', str(e))

    def test_empty_body(self):
        e = exceptions.from_response(self._response(500), 'GET', self.URL)

        self.assertEqual('Internal Server Error (HTTP 500)', str(e))


class ExceptionTests(utils.TestCase):

    def test_default_message(self):
        self.assertEqual('Discovery of client versions failed.',
                         str(exceptions.DiscoveryFailure()))
        self.assertEqual('Custom', str(exceptions.CatalogException('Custom')))

    def test_version_not_supported(self):
        advertised = [discover.VersionData(discover.ApiVersion(2, 0))]
        e = exceptions.VersionNotSupported(
            discover.MinimumVersion('3.0'), advertised,
            service_type='block-storage')

        self.assertIn('>= 3.0', str(e))
        self.assertIn('block-storage', str(e))
        self.assertIn('v2.0', str(e))
        self.assertEqual(advertised, e.advertised)

    def test_ambiguous_region(self):
        e = exceptions.AmbiguousRegion('compute', ['RegionOne', 'RegionTwo'])

        self.assertEqual(['RegionOne', 'RegionTwo'], e.regions)
        self.assertIn('RegionOne, RegionTwo', str(e))
        self.assertIsInstance(e, exceptions.CatalogException)

    def test_hierarchy(self):
        self.assertTrue(issubclass(exceptions.EmptyCatalog,
                                   exceptions.ServiceNotFound))
        self.assertTrue(issubclass(exceptions.InvalidResponse,
                                   exceptions.AuthError))
        self.assertTrue(issubclass(exceptions.MissingAuthPlugin,
                                   exceptions.AuthError))
        self.assertTrue(issubclass(exceptions.ConnectFailure,
                                   exceptions.RetriableConnectionFailure))
        self.assertFalse(issubclass(exceptions.UnknownConnectionError,
                                    exceptions.RetriableConnectionFailure))
