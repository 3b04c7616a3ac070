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

from stacksession import plugin

if ty.TYPE_CHECKING:
    from stacksession.access import access
    from stacksession import session as ss_session


class Token(plugin.BaseAuthPlugin):
    """A provider that will always use the given token and endpoint.

    This is really only useful for testing and in certain CLI cases where you
    have a known endpoint and admin token that you want to use.
    """

    def __init__(self, endpoint: ty.Optional[str], token: ty.Optional[str]):
        super().__init__()
        self.endpoint = endpoint
        self.token = token

    async def get_access(
        self, session: 'ss_session.Session'
    ) -> ty.Optional['access.AccessInfo']:
        # a static token carries no catalog, there is nothing to fetch
        return None

    async def get_token(
        self, session: 'ss_session.Session'
    ) -> ty.Optional[str]:
        return self.token

    async def get_endpoint(
        self,
        session: 'ss_session.Session',
        service_type: str,
        interface: ty.Any = 'public',
        region_name: ty.Optional[str] = None,
    ) -> ty.Optional[str]:
        """Return the supplied endpoint.

        Using this plugin the same endpoint is returned regardless of the
        parameters passed to the plugin.
        """
        return self.endpoint
