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

import uuid

from stacksession import exceptions
from stacksession import loading
from stacksession.tests.unit.loading import utils


class V3PasswordTests(utils.TestCase):

    def setUp(self):
        super().setUp()

        self.auth_url = uuid.uuid4().hex

    def create(self, **kwargs):
        kwargs.setdefault('auth_url', self.auth_url)
        loader = loading.get_plugin_loader('password')
        return loader.load_from_options(**kwargs)

    def test_basic(self):
        username = uuid.uuid4().hex
        user_domain_id = uuid.uuid4().hex
        password = uuid.uuid4().hex
        project_name = uuid.uuid4().hex
        project_domain_id = uuid.uuid4().hex

        p = self.create(username=username,
                        user_domain_id=user_domain_id,
                        project_name=project_name,
                        project_domain_id=project_domain_id,
                        password=password)

        pw_method = p.auth_methods[0]

        self.assertEqual(username, pw_method.username)
        self.assertEqual(user_domain_id, pw_method.user_domain_id)
        self.assertEqual(password, pw_method.password)

        self.assertEqual(project_name, p.project_name)
        self.assertEqual(project_domain_id, p.project_domain_id)

    def test_without_user_domain(self):
        self.assertRaises(exceptions.OptionError,
                          self.create,
                          username=uuid.uuid4().hex,
                          password=uuid.uuid4().hex)

    def test_user_id_without_domain(self):
        user_id = uuid.uuid4().hex

        p = self.create(user_id=user_id, password=uuid.uuid4().hex)

        self.assertEqual(user_id, p.auth_methods[0].user_id)

    def test_project_domain_defaults_to_user_domain(self):
        user_domain_name = uuid.uuid4().hex

        p = self.create(username=uuid.uuid4().hex,
                        user_domain_name=user_domain_name,
                        password=uuid.uuid4().hex,
                        project_name=uuid.uuid4().hex)

        self.assertEqual(user_domain_name, p.project_domain_name)

    def test_missing_password(self):
        e = self.assertRaises(exceptions.MissingRequiredOptions,
                              self.create,
                              user_id=uuid.uuid4().hex)

        self.assertEqual(['password'], [o.name for o in e.options])

    def test_missing_auth_url(self):
        e = self.assertRaises(exceptions.MissingRequiredOptions,
                              self.create,
                              auth_url=None,
                              user_id=uuid.uuid4().hex,
                              password=uuid.uuid4().hex)

        self.assertEqual(['auth-url'], [o.name for o in e.options])

    def test_system_scope(self):
        p = self.create(user_id=uuid.uuid4().hex,
                        password=uuid.uuid4().hex,
                        system_scope='all')

        self.assertEqual('all', p.system_scope)
        self.assertTrue(p.has_scope_parameters)


class V3TokenTests(utils.TestCase):

    def setUp(self):
        super().setUp()

        self.auth_url = uuid.uuid4().hex

    def create(self, **kwargs):
        kwargs.setdefault('auth_url', self.auth_url)
        loader = loading.get_plugin_loader('token')
        return loader.load_from_options(**kwargs)

    def test_basic(self):
        token = uuid.uuid4().hex
        domain_id = uuid.uuid4().hex

        p = self.create(token=token, domain_id=domain_id)

        self.assertEqual(token, p.auth_methods[0].token)
        self.assertEqual(domain_id, p.domain_id)
        self.assertEqual(self.auth_url, p.auth_url)

    def test_missing_token(self):
        self.assertRaises(exceptions.MissingRequiredOptions, self.create)
