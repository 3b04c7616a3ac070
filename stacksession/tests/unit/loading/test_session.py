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

from unittest import mock
import uuid

from oslo_config import cfg
from oslo_config import fixture as config

from stacksession import discover
from stacksession import loading
from stacksession.loading import session as loading_session
from stacksession import session
from stacksession.tests.unit.loading import utils


class SessionLoadingTests(utils.TestCase):

    def setUp(self):
        super().setUp()
        self.client = mock.Mock()

    def test_conf_options(self):
        opts = loading.get_session_conf_options()

        self.assertEqual(['region-name', 'interface', 'timeout',
                          'user-agent', 'api-versions', 'allowed-statuses'],
                         [o.name for o in opts])
        for opt in opts:
            self.assertIsInstance(opt, cfg.Opt)

    def test_deprecated_conf_options(self):
        old_opt = cfg.DeprecatedOpt('os_region_name', 'old_group')
        opts = loading.get_session_conf_options(
            deprecated_opts={'region-name': [old_opt]})

        self.assertEqual([old_opt], opts[0].deprecated_opts)

    def test_load_from_conf(self):
        conf_fixture = self.useFixture(config.Config())
        loading.register_session_conf_options(conf_fixture.conf, self.GROUP)

        region = uuid.uuid4().hex
        conf_fixture.config(region_name=region,
                            interface='internal',
                            timeout=5,
                            group=self.GROUP)

        auth = mock.Mock()
        s = loading.load_session_from_conf_options(conf_fixture.conf,
                                                   self.GROUP,
                                                   auth=auth,
                                                   client=self.client)

        self.assertIsInstance(s, session.Session)
        self.assertIs(auth, s.auth)
        self.assertIs(self.client, s.client)
        self.assertEqual(region, s.region_name)
        self.assertEqual('internal', s.interface)
        self.assertEqual(5.0, s.timeout)
        self.assertEqual(session.DEFAULT_USER_AGENT, s.user_agent)

    def test_load_from_conf_defaults(self):
        conf_fixture = self.useFixture(config.Config())
        loading.register_session_conf_options(conf_fixture.conf, self.GROUP)

        s = loading.load_session_from_conf_options(conf_fixture.conf,
                                                   self.GROUP,
                                                   client=self.client)

        self.assertIsNone(s.region_name)
        self.assertEqual('public', s.interface)
        self.assertIsNone(s.timeout)

    def test_load_from_environ(self):
        s = loading.load_session_from_environ({'OS_REGION_NAME': 'RegionTwo',
                                               'OS_TIMEOUT': '2.5',
                                               'OS_USER_AGENT': 'tool/1.0'},
                                              client=self.client)

        self.assertEqual('RegionTwo', s.region_name)
        self.assertEqual('public', s.interface)
        self.assertEqual(2.5, s.timeout)
        self.assertEqual('tool/1.0', s.user_agent)

    def test_load_versions_from_conf(self):
        conf_fixture = self.useFixture(config.Config())
        loading.register_session_conf_options(conf_fixture.conf, self.GROUP)

        conf_fixture.config(api_versions='volumev3=3.0+,compute=2.1-2.90',
                            allowed_statuses='current, supported',
                            group=self.GROUP)

        s = loading.load_session_from_conf_options(conf_fixture.conf,
                                                   self.GROUP,
                                                   client=self.client)

        self.assertEqual(['current', 'supported'], s.allowed_statuses)
        self.assertEqual(
            {'block-storage': discover.MinimumVersion('3.0'),
             'compute': discover.VersionRange('2.1', '2.90')},
            s._api_versions)

    def test_load_versions_from_environ(self):
        s = loading.load_session_from_environ(
            {'OS_API_VERSIONS': 'image=2,identity=any',
             'OS_ALLOWED_STATUSES': 'current'},
            client=self.client)

        self.assertEqual(['current'], s.allowed_statuses)
        self.assertEqual({'image': discover.ExactVersion('2'),
                          'identity': discover.ANY_VERSION},
                         s._api_versions)

    def test_bad_api_versions(self):
        self.assertRaises(ValueError,
                          loading.load_session_from_environ,
                          {'OS_API_VERSIONS': 'compute'},
                          client=self.client)


class ParseCriterionTests(utils.TestCase):

    def test_any(self):
        self.assertIs(discover.ANY_VERSION,
                      loading_session.parse_criterion('any'))

    def test_minimum(self):
        self.assertEqual(discover.MinimumVersion('3.27'),
                         loading_session.parse_criterion('3.27+'))

    def test_range(self):
        self.assertEqual(discover.VersionRange('2.1', '2.90'),
                         loading_session.parse_criterion('2.1 - 2.90'))

    def test_candidates(self):
        self.assertEqual(discover.Candidates(['2.1', '2.0']),
                         loading_session.parse_criterion('2.1|2.0'))

    def test_exact(self):
        self.assertEqual(discover.ExactVersion('3'),
                         loading_session.parse_criterion('3'))

    def test_invalid(self):
        self.assertRaises(TypeError,
                          loading_session.parse_criterion, 'latest')
