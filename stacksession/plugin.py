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

if ty.TYPE_CHECKING:
    from stacksession.access import access
    from stacksession import session as ss_session

LOG = utils.get_logger(__name__)

#: The interface value that asks for the identity endpoint itself rather
#: than an entry from the catalog.
AUTH_INTERFACE = object()

IDENTITY_AUTH_HEADER_NAME = 'X-Auth-Token'


class BaseAuthPlugin(metaclass=abc.ABCMeta):
    """The basic structure of an authentication plugin.

    A plugin is a source of credentials. Whatever the credentials are, a
    plugin produces an :class:`~stacksession.access.AccessInfo` carrying the
    token and the catalog, or None when it has neither (e.g. a static token
    used against a fixed endpoint).

    :param str region_name: The region used when neither a request nor the
        session names one. (optional)
    """

    def __init__(self, region_name: ty.Optional[str] = None):
        self.region_name = region_name

    @abc.abstractmethod
    async def get_access(
        self, session: 'ss_session.Session'
    ) -> ty.Optional['access.AccessInfo']:
        """Return current authentication data, authenticating if required.

        :raises stacksession.exceptions.AuthError: if authentication fails.
        """

    async def refresh(
        self, session: 'ss_session.Session'
    ) -> ty.Optional['access.AccessInfo']:
        """Authenticate again regardless of the state of the current token.

        The current authentication data is only replaced once the new one has
        been obtained, so a failure leaves the plugin usable.
        """
        return await self.get_access(session)

    def invalidate(self) -> bool:
        """Invalidate the current authentication data.

        This should result in fetching a new token on next call.

        :returns: True if there was something that the plugin did to
                  invalidate. This means that it makes sense to try again. If
                  nothing happens returns False to indicate give up.
        :rtype: bool
        """
        return False

    async def get_token(
        self, session: 'ss_session.Session'
    ) -> ty.Optional[str]:
        """Return a valid auth token.

        :return: A valid token or None if the plugin does not use tokens.
        """
        access_info = await self.get_access(session)
        return access_info.auth_token if access_info else None

    async def get_headers(
        self, session: 'ss_session.Session'
    ) -> ty.Optional[dict[str, str]]:
        """Fetch authentication headers for message.

        The default implementation sends the token in the ``X-Auth-Token``
        header.

        :returns: Headers that are set to authenticate a message or None for
                  failure. Note that when checking this value that the empty
                  dict is a valid, non-failure response.
        :rtype: dict
        """
        token = await self.get_token(session)

        if not token:
            return None

        return {IDENTITY_AUTH_HEADER_NAME: token}

    async def get_endpoint(
        self,
        session: 'ss_session.Session',
        service_type: str,
        interface: ty.Any = 'public',
        region_name: ty.Optional[str] = None,
    ) -> ty.Optional[str]:
        """Return the endpoint of a service from the catalog.

        :raises stacksession.exceptions.CatalogException: if the catalog has
            no matching endpoint.
        :return: A valid endpoint URL or None if not available.
        """
        access_info = await self.get_access(session)
        if access_info is None:
            LOG.warning(
                'Plugin %s has no service catalog to look up %s in',
                type(self).__name__,
                service_type,
            )
            return None

        return access_info.service_catalog.url_for(
            service_type,
            interface=interface,
            region_name=region_name or self.region_name,
        )
