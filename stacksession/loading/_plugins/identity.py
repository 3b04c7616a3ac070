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

from stacksession import exceptions
from stacksession import identity
from stacksession.loading import identity as loading_identity
from stacksession.loading import opts


def _add_common_identity_options(options: list[opts.Opt]) -> None:
    options.extend(
        [
            opts.Opt('user-id', help="User's user ID"),
            opts.Opt(
                'username',
                help="User's username",
                deprecated=[opts.Opt('user-name')],
            ),
            opts.Opt('user-domain-id', help="User's domain ID"),
            opts.Opt('user-domain-name', help="User's domain name"),
        ]
    )


def _assert_identity_options(options: dict[str, ty.Any]) -> None:
    if options.get('username') and not (
        options.get('user_domain_name') or options.get('user_domain_id')
    ):
        m = (
            "You have provided a username. In the V3 identity API a "
            "username is only unique within a domain so you must "
            "also provide either a user_domain_id or user_domain_name."
        )
        raise exceptions.OptionError(m)


class Password(loading_identity.BaseV3Loader[identity.V3Password]):
    """Authenticate with a username and password.

    Authenticate to the identity service using the provided username and
    password. This is the standard and most common form of authentication.
    """

    @property
    def plugin_class(self) -> ty.Type[identity.V3Password]:
        return identity.V3Password

    def get_options(self) -> list[opts.Opt]:
        options = super().get_options()
        _add_common_identity_options(options)

        options.extend(
            [
                opts.Opt(
                    'password',
                    secret=True,
                    required=True,
                    help="User's password",
                )
            ]
        )

        return options

    def load_from_options(self, **kwargs: ty.Any) -> identity.V3Password:
        _assert_identity_options(kwargs)

        return super().load_from_options(**kwargs)


class Token(loading_identity.BaseV3Loader[identity.V3Token]):
    """Given an existing token rescope it to another target.

    Use the Identity service's rescope mechanism to get a new token based upon
    an existing token. Because an auth plugin requires a service catalog and
    scope information it is often easier to fetch a new token based on an
    existing one than validate and reuse the one you already have.
    """

    @property
    def plugin_class(self) -> ty.Type[identity.V3Token]:
        return identity.V3Token

    def get_options(self) -> list[opts.Opt]:
        options = super().get_options()

        options.extend(
            [
                opts.Opt(
                    'token',
                    secret=True,
                    required=True,
                    help='Token to authenticate with',
                )
            ]
        )

        return options
