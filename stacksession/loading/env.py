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
import typing as ty

from stacksession import _utils as utils
from stacksession.loading import base
from stacksession.loading import opts

if ty.TYPE_CHECKING:
    from stacksession import plugin

LOG = utils.get_logger(__name__)

__all__ = ('get_env_value', 'load_from_environ')

_AUTH_TYPE_ENV = 'OS_AUTH_TYPE'
_DEFAULT_AUTH_TYPE = 'password'


def get_env_value(
    opt: opts.Opt, environ: ty.Optional[ty.Mapping[str, str]] = None
) -> ty.Any:
    """Return the value of an option from the environment.

    The first of the option's variables that is set and not empty wins,
    otherwise the option's default is returned.
    """
    return opt.from_environ(environ)


def load_from_environ(
    environ: ty.Optional[ty.Mapping[str, str]] = None, **kwargs: ty.Any
) -> ty.Optional['plugin.BaseAuthPlugin']:
    """Load a plugin from ``OS_*`` environment variables.

    The plugin is named by ``OS_AUTH_TYPE``. When that is not set but
    ``OS_AUTH_URL`` is, a password plugin is loaded. Plugin options are read
    from the variables named after them, e.g. ``OS_USER_DOMAIN_NAME``.

    :param environ: The environment to read. (optional, defaults to
                    os.environ)

    :returns: An authentication plugin or None if the environment names none.

    :raises stacksession.exceptions.NoMatchingPlugin: if the named plugin
        cannot be found.
    :raises stacksession.exceptions.MissingRequiredOptions: if a required
        option is not set.
    """
    if environ is None:
        environ = os.environ

    name = environ.get(_AUTH_TYPE_ENV)
    if not name:
        if not environ.get('OS_AUTH_URL'):
            return None
        name = _DEFAULT_AUTH_TYPE

    LOG.debug('Loading auth plugin %s from the environment', name)
    loader = base.get_plugin_loader(name)

    def _getter(opt: opts.Opt) -> ty.Any:
        return get_env_value(opt, environ)

    return ty.cast(
        'plugin.BaseAuthPlugin',
        loader.load_from_options_getter(_getter, **kwargs),
    )
