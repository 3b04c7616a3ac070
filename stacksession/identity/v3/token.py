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

from stacksession.identity.v3 import base


__all__ = ('TokenMethod', 'Token')


class TokenMethod(base.AuthMethod):
    """Construct an Auth plugin to fetch a token from a token.

    :param string token: Token for authentication.
    """

    def __init__(self, *, token: str) -> None:
        self.token = token

    def get_auth_data(
        self, headers: dict[str, str]
    ) -> tuple[str, ty.Mapping[str, object]]:
        headers['X-Auth-Token'] = self.token
        return 'token', {'id': self.token}


class Token(base.Auth):
    """A plugin for authenticating with an existing Token.

    The supplied token is exchanged for a new one, usually with a different
    scope, which also provides a service catalog.

    :param string auth_url: Identity service endpoint for authentication.
    :param string token: Token for authentication.
    """

    def __init__(self, auth_url: str, token: str, **kwargs: ty.Any) -> None:
        super().__init__(auth_url, [TokenMethod(token=token)], **kwargs)
