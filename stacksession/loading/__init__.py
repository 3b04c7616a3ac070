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

from stacksession.loading import session as _session
from stacksession.loading.base import *  # noqa
from stacksession.loading.clouds import *  # noqa
from stacksession.loading.conf import *  # noqa
from stacksession.loading.env import *  # noqa
from stacksession.loading.identity import *  # noqa
from stacksession.loading.opts import *  # noqa


register_session_conf_options = _session.register_conf_options
load_session_from_conf_options = _session.load_from_conf_options
load_session_from_environ = _session.load_from_environ
get_session_conf_options = _session.get_conf_options


__all__ = (  # noqa: F405
    # loading.base
    'BaseLoader',
    'get_available_plugin_names',
    'get_available_plugin_loaders',
    'get_plugin_loader',
    'get_plugin_options',
    'PLUGIN_NAMESPACE',
    # loading.identity
    'BaseIdentityLoader',
    'BaseV3Loader',
    # loading.clouds
    'find_config',
    'get_cloud',
    'load_auth_from_cloud',
    'load_session_from_clouds_yaml',
    # loading.conf
    'get_common_conf_options',
    'get_plugin_conf_options',
    'load_from_conf_options',
    'register_conf_options',
    # loading.env
    'get_env_value',
    'load_from_environ',
    # loading.opts
    'Opt',
    # loading.session
    'register_session_conf_options',
    'load_session_from_conf_options',
    'load_session_from_environ',
    'get_session_conf_options',
)
