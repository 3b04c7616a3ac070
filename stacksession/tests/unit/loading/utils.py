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

import testtools

from stacksession import loading
from stacksession import plugin


class TestCase(testtools.TestCase):

    GROUP = 'auth'

    def setUp(self):
        super().setUp()

        self.a_int = 88
        self.a_float = 88.8
        self.a_bool = False

        self.TEST_VALS = {
            'a_int': self.a_int,
            'a_float': self.a_float,
            'a_bool': self.a_bool,
        }

    def assertTestVals(self, plugin, vals=None):
        if not vals:
            vals = self.TEST_VALS

        for k, v in vals.items():
            self.assertEqual(v, plugin[k])


def create_plugin(opts=[], token=None, endpoint=None):

    class Plugin(plugin.BaseAuthPlugin):

        def __init__(self, **kwargs):
            super().__init__()
            self._data = kwargs

        def __getitem__(self, key):
            return self._data[key]

        async def get_access(self, session):
            return None

        async def get_token(self, session):
            return token

        async def get_endpoint(self, session, service_type, **kwargs):
            return endpoint

    class Loader(loading.BaseLoader):

        @property
        def plugin_class(self):
            return Plugin

        def get_options(self):
            return opts

    return Plugin, Loader


class BoolType:

    def __eq__(self, other):
        """Define equiality for many bool types."""
        # hack around oslo.config equality comparison
        return type(self) is type(other)

    def __hash__(self):
        return hash(type(self))

    def __call__(self, value):
        return str(value).lower() in ('1', 'true', 't', 'yes', 'y')


INT_DESC = 'test int'
FLOAT_DESC = 'test float'
BOOL_DESC = 'test bool'
STR_DESC = 'test str'
STR_DEFAULT = uuid.uuid4().hex


class MockLoader(loading.BaseLoader):

    @property
    def plugin_class(self):
        return MockPlugin

    def get_options(self):
        return [
            loading.Opt('a-int', default=3, type=int, help=INT_DESC),
            loading.Opt('a-bool', type=BoolType(), help=BOOL_DESC),
            loading.Opt('a-float', type=float, help=FLOAT_DESC),
            loading.Opt('a-str', help=STR_DESC, default=STR_DEFAULT),
        ]


class MockPlugin(plugin.BaseAuthPlugin):

    INT_DESC = INT_DESC
    FLOAT_DESC = FLOAT_DESC
    BOOL_DESC = BOOL_DESC
    STR_DESC = STR_DESC
    STR_DEFAULT = STR_DEFAULT

    def __init__(self, **kwargs):
        super().__init__()
        self._data = kwargs

    def __getitem__(self, key):
        return self._data[key]

    async def get_access(self, session):
        return None

    async def get_token(self, session):
        return 'aToken'

    async def get_endpoint(self, session, service_type, **kwargs):
        return 'http://test'
