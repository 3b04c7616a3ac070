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
import asyncio
import json
import typing as ty

from stacksession import _utils as utils
from stacksession import access
from stacksession import plugin

if ty.TYPE_CHECKING:
    from stacksession import session as ss_session

LOG = utils.get_logger(__name__)


class BaseIdentityPlugin(plugin.BaseAuthPlugin, metaclass=abc.ABCMeta):
    """A plugin that obtains its token from an identity service.

    :param str auth_url: Identity service endpoint for authentication.
    :param bool reauthenticate: Allow fetching a new token if the current one
                                is going to expire. (optional) default True
    :param str region_name: Default region for catalog lookups. (optional)
    """

    # we count a token as valid (not needing refreshing) if it is valid for at
    # least this many seconds before the token expiry time
    MIN_TOKEN_LIFE_SECONDS = 600

    def __init__(
        self,
        auth_url: ty.Optional[str] = None,
        reauthenticate: bool = True,
        region_name: ty.Optional[str] = None,
    ):
        super().__init__(region_name=region_name)

        self.auth_url = auth_url
        self.auth_ref: ty.Optional[access.AccessInfo] = None
        self.reauthenticate = reauthenticate

        self._lock = asyncio.Lock()

    @abc.abstractmethod
    async def get_auth_ref(
        self, session: 'ss_session.Session'
    ) -> access.AccessInfo:
        """Obtain a token from an identity service.

        This method is overridden by the various token version plugins.

        This function should not be called independently and is expected to be
        invoked via get_access or refresh. It always fetches new data.

        :raises stacksession.exceptions.AuthError: the credentials were
            rejected, the service could not be reached or its response was
            not a token.

        :returns: Token access information.
        :rtype: :class:`stacksession.access.AccessInfo`
        """

    def _needs_reauthenticate(self) -> bool:
        """Return if the existing token needs to be re-authenticated.

        The token should be refreshed if it is about to expire.

        :returns: True if the plugin should fetch a new token. False otherwise.
        """
        if not self.auth_ref:
            # authentication was never fetched.
            return True

        if not self.reauthenticate:
            # don't re-authenticate if it has been disallowed.
            return False

        if self.auth_ref.will_expire_soon(self.MIN_TOKEN_LIFE_SECONDS):
            # if it's about to expire we should re-authenticate now.
            LOG.debug('Token expires at %s, re-authenticating',
                      self.auth_ref.expires)
            return True

        # otherwise it's fine and use the existing one.
        return False

    async def get_access(
        self, session: 'ss_session.Session'
    ) -> access.AccessInfo:
        """Fetch or return a current AccessInfo object.

        If a valid AccessInfo is present then it is returned otherwise a new
        one will be fetched.

        :raises stacksession.exceptions.AuthError: if authentication fails.

        :returns: Valid AccessInfo
        :rtype: :class:`stacksession.access.AccessInfo`
        """
        # Concurrent requests noticing an expired token at the same time must
        # not each go to the identity service.
        async with self._lock:
            if self._needs_reauthenticate():
                self.auth_ref = await self.get_auth_ref(session)

        assert self.auth_ref is not None  # nosec B101
        return self.auth_ref

    async def refresh(
        self, session: 'ss_session.Session'
    ) -> access.AccessInfo:
        async with self._lock:
            auth_ref = await self.get_auth_ref(session)
            self.auth_ref = auth_ref

        return auth_ref

    def invalidate(self) -> bool:
        if self.auth_ref:
            self.auth_ref = None
            return True

        return False

    async def get_endpoint(
        self,
        session: 'ss_session.Session',
        service_type: str,
        interface: ty.Any = 'public',
        region_name: ty.Optional[str] = None,
    ) -> ty.Optional[str]:
        # Asking for the auth interface means the identity endpoint the
        # plugin was configured with, which need not be in the catalog.
        if interface is plugin.AUTH_INTERFACE:
            return self.auth_url

        return await super().get_endpoint(
            session,
            service_type,
            interface=interface,
            region_name=region_name,
        )

    def get_auth_state(self) -> ty.Optional[str]:
        """Retrieve the current authentication state for the plugin.

        This should not fetch any new data if it is not present.

        :returns: a string that can be stored or None if there is no auth state
                  present in the plugin. This string can be reloaded with
                  set_auth_state to set the same authentication.
        :rtype: str or None if no auth present.
        """
        if self.auth_ref:
            data = {
                'auth_token': self.auth_ref.auth_token,
                'auth_url': self.auth_ref.auth_url,
                'body': self.auth_ref._data,
            }

            return json.dumps(data)

        return None

    def set_auth_state(self, data: ty.Optional[str]) -> None:
        """Install existing authentication state for a plugin.

        Take the output of get_auth_state and install that authentication state
        into the current authentication plugin.
        """
        if data:
            auth_data = json.loads(data)
            self.auth_ref = access.create(
                body=auth_data['body'],
                auth_token=auth_data['auth_token'],
                auth_url=auth_data.get('auth_url'),
            )
        else:
            self.auth_ref = None
