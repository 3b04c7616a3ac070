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

import abc
import typing as ty

from stacksession import _utils as utils
from stacksession import access
from stacksession import exceptions
from stacksession.identity import base

if ty.TYPE_CHECKING:
    from stacksession import session as ss_session

_logger = utils.get_logger(__name__)

__all__ = ('Auth', 'AuthMethod')


class Auth(base.BaseIdentityPlugin):
    """Identity V3 Authentication Plugin.

    :param string auth_url: Identity service endpoint for authentication.
    :param list auth_methods: A collection of methods to authenticate with.
    :param string system_scope: System information to scope to.
    :param string domain_id: Domain ID for domain scoping.
    :param string domain_name: Domain name for domain scoping.
    :param string project_id: Project ID for project scoping.
    :param string project_name: Project name for project scoping.
    :param string project_domain_id: Project's domain ID for project.
    :param string project_domain_name: Project's domain name for project.
    :param bool reauthenticate: Allow fetching a new token if the current one
                                is going to expire. (optional) default True
    :param bool unscoped: Force the return of an unscoped token. This will make
                          the identity server return an unscoped token even if
                          a default_project_id is set for this user.
    :param string region_name: Default region for catalog lookups.
    """

    auth_url: str

    def __init__(
        self,
        auth_url: str,
        auth_methods: list['AuthMethod'],
        *,
        unscoped: bool = False,
        system_scope: ty.Optional[str] = None,
        domain_id: ty.Optional[str] = None,
        domain_name: ty.Optional[str] = None,
        project_id: ty.Optional[str] = None,
        project_name: ty.Optional[str] = None,
        project_domain_id: ty.Optional[str] = None,
        project_domain_name: ty.Optional[str] = None,
        reauthenticate: bool = True,
        region_name: ty.Optional[str] = None,
    ):
        super().__init__(
            auth_url=auth_url,
            reauthenticate=reauthenticate,
            region_name=region_name,
        )
        self.auth_methods = auth_methods
        self.unscoped = unscoped
        self.system_scope = system_scope
        self.domain_id = domain_id
        self.domain_name = domain_name
        self.project_id = project_id
        self.project_name = project_name
        self.project_domain_id = project_domain_id
        self.project_domain_name = project_domain_name

    @property
    def token_url(self) -> str:
        """The full URL where we will send authentication data."""
        url = self.auth_url.rstrip('/')
        if not url.endswith('/v3'):
            url += '/v3'
        return f'{url}/auth/tokens'

    @property
    def has_scope_parameters(self) -> bool:
        """Return true if parameters can be used to create a scoped token."""
        return bool(
            self.domain_id
            or self.domain_name
            or self.project_id
            or self.project_name
            or self.system_scope
        )

    def set_project_scope(
        self,
        project_name: str,
        project_domain_name: ty.Optional[str] = None,
    ) -> None:
        """Scope authentication to the given project.

        The current token is dropped as it carries a different scope.
        """
        self.project_id = None
        self.project_name = project_name
        self.project_domain_name = project_domain_name
        self.invalidate()

    def _scope(self) -> ty.Union[dict[str, ty.Any], str, None]:
        mutual_exclusion = [
            bool(self.domain_id or self.domain_name),
            bool(self.project_id or self.project_name),
            bool(self.system_scope),
            bool(self.unscoped),
        ]

        if sum(mutual_exclusion) > 1:
            raise exceptions.AuthError(
                'Authentication cannot be scoped to multiple targets. Pick '
                'one of: project, domain, system or unscoped'
            )

        if self.domain_id:
            return {'domain': {'id': self.domain_id}}
        if self.domain_name:
            return {'domain': {'name': self.domain_name}}
        if self.project_id:
            return {'project': {'id': self.project_id}}
        if self.project_name:
            project: dict[str, ty.Any] = {'name': self.project_name}
            if self.project_domain_id:
                project['domain'] = {'id': self.project_domain_id}
            elif self.project_domain_name:
                project['domain'] = {'name': self.project_domain_name}
            return {'project': project}
        if self.unscoped:
            return 'unscoped'
        if self.system_scope == 'all':
            return {'system': {'all': True}}
        return None

    async def get_auth_ref(
        self, session: 'ss_session.Session'
    ) -> access.AccessInfo:
        headers = {'Accept': 'application/json'}
        ident: dict[str, ty.Any] = {}

        for method in self.auth_methods:
            name, auth_data = method.get_auth_data(headers)
            ident.setdefault('methods', []).append(name)
            ident[name] = auth_data

        if not ident:
            raise exceptions.AuthError(
                'Authentication method required (e.g. password)'
            )

        body: dict[str, ty.Any] = {'auth': {'identity': ident}}
        scope = self._scope()
        if scope is not None:
            body['auth']['scope'] = scope

        token_url = self.token_url
        _logger.debug('Making authentication request to %s', token_url)

        try:
            resp = await session.request(
                token_url,
                'POST',
                json=body,
                headers=headers,
                authenticated=False,
                log=False,
            )
        except exceptions.HttpError as e:
            raise exceptions.AuthError(
                f'Authentication at {token_url} failed: {e}'
            ) from e
        except exceptions.RequestError as e:
            raise exceptions.AuthError(
                f'Unable to reach the identity service at {token_url}: {e}'
            ) from e

        try:
            resp_data = resp.json()
        except ValueError:
            raise exceptions.InvalidResponse(
                'Token response is not JSON', response=resp
            )

        if not isinstance(resp_data, dict) or 'token' not in resp_data:
            raise exceptions.InvalidResponse(
                'Token response has no token', response=resp
            )

        auth_token = resp.headers.get('X-Subject-Token')
        if not auth_token:
            _logger.error('No X-Subject-Token header received from %s',
                          token_url)
            raise exceptions.InvalidResponse(
                'Missing X-Subject-Token header', response=resp
            )

        try:
            auth_ref = access.create(
                body=resp_data, auth_token=auth_token, auth_url=self.auth_url
            )
        except ValueError as e:
            raise exceptions.InvalidResponse(
                f'Malformed token response: {e}', response=resp
            )

        _logger.debug('Received a token from %s expiring at %s',
                      token_url, auth_ref.expires)
        return auth_ref


class AuthMethod(metaclass=abc.ABCMeta):
    """One part of a V3 Authentication strategy.

    The v3 '/tokens' API allow multiple methods to be presented when
    authentication against the server. Each one of these methods is implemented
    by an AuthMethod.
    """

    @abc.abstractmethod
    def get_auth_data(
        self, headers: dict[str, str]
    ) -> tuple[str, ty.Mapping[str, object]]:
        """Return the authentication section of an auth plugin.

        :param dict headers: The headers that will be sent with the auth
                             request if a plugin needs to add to them.
        :return: The identifier of this plugin and a dict of authentication
                 data for the auth type.
        :rtype: tuple(string, dict)
        """
