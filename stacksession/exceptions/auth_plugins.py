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

import typing as ty

from stacksession.exceptions import auth
from stacksession.exceptions import base

if ty.TYPE_CHECKING:
    from stacksession.loading import opts

__all__ = (
    'AuthPluginException',
    'MissingAuthPlugin',
    'NoMatchingPlugin',
    'MissingRequiredOptions',
    'OptionError',
    'CloudConfigError',
)


class AuthPluginException(base.ClientException):
    message = "Unknown error with authentication plugins."


class MissingAuthPlugin(AuthPluginException, auth.AuthError):
    message = "An authenticated request is required but no plugin available."


class NoMatchingPlugin(AuthPluginException):
    """There were no auth plugins that could be created from the parameters
    provided.

    :param str name: The name of the plugin that was attempted to load.

    .. py:attribute:: name

        The name of the plugin that was attempted to load.
    """

    def __init__(self, name: str):
        self.name = name
        super().__init__(f'The plugin {name} could not be found')


class MissingRequiredOptions(AuthPluginException):
    """One or more required options were not provided.

    :param list(stacksession.loading.Opt) options: Missing options.

    .. py:attribute:: options

        List of the missing options.
    """

    def __init__(self, options: ty.Sequence['opts.Opt']):
        self.options = options

        names = ", ".join(o.name for o in options)
        super().__init__(
            f'Auth plugin requires parameters which were not given: {names}'
        )


class OptionError(AuthPluginException):
    """A mistake in the plugin options meant a plugin could not be created."""


class CloudConfigError(AuthPluginException):
    """A ``clouds.yaml`` file is missing, unreadable or lacks the cloud."""
