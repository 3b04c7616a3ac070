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

from oslo_config import cfg

from stacksession.loading import opts
from stacksession.tests.unit.loading import utils


class OptTests(utils.TestCase):

    def test_dest(self):
        opt = opts.Opt('user-domain-id')
        self.assertEqual('user_domain_id', opt.dest)

        opt = opts.Opt('endpoint', dest='url')
        self.assertEqual('url', opt.dest)

    def test_env_vars(self):
        opt = opts.Opt('auth-url')
        self.assertEqual(['OS_AUTH_URL'], opt.env_vars)

    def test_env_vars_with_deprecations(self):
        opt = opts.Opt('username', deprecated=[opts.Opt('user-name')])
        self.assertEqual(['OS_USERNAME', 'OS_USER_NAME'], opt.env_vars)

    def test_type_must_be_callable(self):
        self.assertRaises(TypeError, opts.Opt, 'a', type='int')

    def test_equality(self):
        self.assertEqual(opts.Opt('a', type=int, help='A'),
                         opts.Opt('a', type=int, help='A'))
        self.assertNotEqual(opts.Opt('a', type=int),
                            opts.Opt('a', type=float))
        self.assertNotEqual(opts.Opt('a'), opts.Opt('a', secret=True))

    def test_to_oslo_opt(self):
        opt = opts.Opt('project-name',
                       help='Project name',
                       secret=True,
                       deprecated=[opts.Opt('tenant-name')])

        oslo_opt = opt._to_oslo_opt()

        self.assertIsInstance(oslo_opt, cfg.Opt)
        self.assertEqual('project-name', oslo_opt.name)
        self.assertEqual('project_name', oslo_opt.dest)
        self.assertEqual('Project name', oslo_opt.help)
        self.assertTrue(oslo_opt.secret)
        self.assertEqual(['tenant-name'],
                         [o.name for o in oslo_opt.deprecated_opts])

    def test_deprecated_are_kept_as_tuple(self):
        old = opts.Opt('tenant-name')
        opt = opts.Opt('project-name', deprecated=[old])
        self.assertEqual((old,), opt.deprecated)
        self.assertEqual(['project-name', 'tenant-name'], opt.names)

    def test_immutable(self):
        opt = opts.Opt('a')
        self.assertRaises(AttributeError, setattr, opt, 'default', 'b')

    def test_parse(self):
        opt = opts.Opt('a', type=int)
        self.assertEqual(3, opt.parse('3'))
        self.assertIsNone(opt.parse(None))

    def test_from_environ(self):
        opt = opts.Opt('username', default='admin',
                       deprecated=[opts.Opt('user-name')])

        self.assertEqual('admin', opt.from_environ({}))
        self.assertEqual('old', opt.from_environ({'OS_USER_NAME': 'old'}))
        self.assertEqual('new', opt.from_environ({'OS_USERNAME': 'new',
                                                  'OS_USER_NAME': 'old'}))

    def test_oslo_opt_extra_deprecations(self):
        extra = cfg.DeprecatedOpt('os_region_name', 'old_group')
        oslo_opt = opts.Opt('region-name')._to_oslo_opt([extra])
        self.assertEqual([extra], oslo_opt.deprecated_opts)


class CommaListTests(utils.TestCase):

    def test_string(self):
        self.assertEqual(['current', 'supported'],
                         opts.comma_list(' current, supported,'))

    def test_sequence(self):
        self.assertEqual(['a', 'b'], opts.comma_list(['a ', 'b']))
