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

from stacksession import identity
from stacksession.loading import base
from stacksession.loading import opts

__all__ = ('BaseIdentityLoader', 'BaseV3Loader')

T = ty.TypeVar('T', bound=identity.BaseIdentityPlugin)


class BaseIdentityLoader(base.BaseLoader[T]):
    """Base Option handling for identity plugins.

    This class defines options and handling that should be common across all
    plugins that are developed against the OpenStack identity service. It
    provides the options expected by the
    :py:class:`stacksession.identity.BaseIdentityPlugin` class.
    """

    def get_options(self) -> list[opts.Opt]:
        options = super().get_options()

        options.extend(
            [
                opts.Opt(
                    'auth-url',
                    required=True,
                    help='Authentication URL',
                ),
            ]
        )

        return options


class BaseV3Loader(BaseIdentityLoader[T]):
    """Base Option handling for identity plugins.

    This class defines options and handling that should be common to the V3
    identity API. It provides the options expected by the
    :py:class:`stacksession.identity.v3.Auth` class.
    """

    def get_options(self) -> list[opts.Opt]:
        options = super().get_options()

        options.extend(
            [
                opts.Opt('system-scope', help='Scope for system operations'),
                opts.Opt('domain-id', help='Domain ID to scope to'),
                opts.Opt('domain-name', help='Domain name to scope to'),
                opts.Opt(
                    'project-id',
                    help='Project ID to scope to',
                    deprecated=[opts.Opt('tenant-id')],
                ),
                opts.Opt(
                    'project-name',
                    help='Project name to scope to',
                    deprecated=[opts.Opt('tenant-name')],
                ),
                opts.Opt(
                    'project-domain-id',
                    help='Domain ID containing project',
                ),
                opts.Opt(
                    'project-domain-name',
                    help='Domain name containing project',
                ),
            ]
        )

        return options

    def load_from_options(self, **kwargs: ty.Any) -> T:
        if kwargs.get('project_name') and not (
            kwargs.get('project_domain_name')
            or kwargs.get('project_domain_id')
        ):
            # NOTE: the project's domain defaults to the user's one, which
            # is the most common deployment.
            kwargs['project_domain_id'] = kwargs.get('user_domain_id')
            kwargs['project_domain_name'] = kwargs.get('user_domain_name')

        return super().load_from_options(**kwargs)
