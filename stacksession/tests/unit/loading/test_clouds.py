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

import os
from unittest import mock

import fixtures

from stacksession import discover
from stacksession import exceptions
from stacksession.identity import v3
from stacksession import loading
from stacksession.loading import clouds
from stacksession.tests.unit.loading import utils

CLOUDS_YAML = """
clouds:
  mycloud:
    auth:
      auth_url: https://keystone.example.com/v3
      username: demo
      password: secret
      project_name: demo-project
    region_name: RegionTwo
    api_timeout: 30
    block_storage_api_version: "3.0+"
    compute_api_version: "2.53"
  tokencloud:
    auth_type: token
    auth:
      auth_url: https://keystone.example.com/v3
      token: abc
      project_id: p1
  broken: just a string
"""


class CloudsYamlTests(utils.TestCase):

    def setUp(self):
        super().setUp()
        self.tempdir = self.useFixture(fixtures.TempDir()).path
        self.path = os.path.join(self.tempdir, 'clouds.yaml')
        with open(self.path, 'w') as f:
            f.write(CLOUDS_YAML)

        self.client = mock.Mock()

    def test_password_cloud(self):
        s = loading.load_session_from_clouds_yaml('mycloud',
                                                  path=self.path,
                                                  client=self.client)

        self.assertIsInstance(s.auth, v3.Password)
        self.assertEqual('https://keystone.example.com/v3', s.auth.auth_url)
        self.assertEqual('demo-project', s.auth.project_name)
        self.assertEqual(clouds.DEFAULT_DOMAIN, s.auth.project_domain_name)

        pw_method = s.auth.auth_methods[0]
        self.assertEqual('demo', pw_method.username)
        self.assertEqual('secret', pw_method.password)
        self.assertEqual(clouds.DEFAULT_DOMAIN, pw_method.user_domain_name)

        self.assertEqual('RegionTwo', s.region_name)
        self.assertEqual('public', s.interface)
        self.assertEqual(30, s.timeout)
        self.assertEqual(
            {'block-storage': discover.MinimumVersion('3.0'),
             'compute': discover.ExactVersion('2.53')},
            s._api_versions)

    def test_token_cloud(self):
        cloud = clouds.get_cloud('tokencloud', path=self.path)
        a = loading.load_auth_from_cloud(cloud)

        self.assertIsInstance(a, v3.Token)
        self.assertEqual('abc', a.auth_methods[0].token)
        self.assertEqual('p1', a.project_id)

    def test_kwargs_take_precedence(self):
        s = loading.load_session_from_clouds_yaml('mycloud',
                                                  path=self.path,
                                                  region_name='RegionOne',
                                                  client=self.client)
        self.assertEqual('RegionOne', s.region_name)

    def test_cloud_from_environ(self):
        environ = {'OS_CLOUD': 'mycloud',
                   'OS_CLIENT_CONFIG_FILE': self.path}

        cloud = clouds.get_cloud(environ=environ)

        self.assertEqual('RegionTwo', cloud['region_name'])

    def test_no_cloud_name(self):
        self.assertRaises(exceptions.CloudConfigError,
                          clouds.get_cloud, path=self.path, environ={})

    def test_unknown_cloud(self):
        e = self.assertRaises(exceptions.CloudConfigError,
                              clouds.get_cloud, 'other', path=self.path)
        self.assertIn('other', str(e))

    def test_invalid_cloud(self):
        self.assertRaises(exceptions.CloudConfigError,
                          clouds.get_cloud, 'broken', path=self.path)

    def test_missing_file(self):
        self.assertRaises(exceptions.CloudConfigError,
                          clouds.get_cloud, 'mycloud',
                          path=os.path.join(self.tempdir, 'nope.yaml'))

    def test_unparsable_file(self):
        with open(self.path, 'w') as f:
            f.write('clouds: [unbalanced\n')

        self.assertRaises(exceptions.CloudConfigError,
                          clouds.get_cloud, 'mycloud', path=self.path)

    def test_find_config_in_locations(self):
        self.useFixture(fixtures.MockPatch(
            'stacksession.loading.clouds.get_config_locations',
            return_value=[mock.Mock(is_file=lambda: False),
                          clouds.pathlib.Path(self.path)]))

        self.assertEqual(clouds.pathlib.Path(self.path),
                         clouds.find_config(environ={}))

    def test_no_config_found(self):
        self.useFixture(fixtures.MockPatch(
            'stacksession.loading.clouds.get_config_locations',
            return_value=[]))

        self.assertIsNone(clouds.find_config(environ={}))
        self.assertRaises(exceptions.CloudConfigError,
                          clouds.get_cloud, 'mycloud', environ={})
