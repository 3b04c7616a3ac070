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


class NoAuth(plugin.BaseAuthPlugin):
    """A provider that will always use no auth.

    This is useful to talk to services deployed without authentication, for
    instance a standalone bare metal service.

    :param str endpoint: The endpoint every service is reached at.
    """

    def __init__(self, endpoint: ty.Optional[str] = None):
        super().__init__()
        self.endpoint = endpoint

    async def get_access(
        self, session: 'ss_session.Session'
    ) -> ty.Optional['access.AccessInfo']:
        return None

    async def get_headers(
        self, session: 'ss_session.Session'
    ) -> ty.Optional[dict[str, str]]:
        return {}

    async def get_endpoint(
        self,
        session: 'ss_session.Session',
        service_type: str,
        interface: ty.Any = 'public',
        region_name: ty.Optional[str] = None,
    ) -> ty.Optional[str]:
        return self.endpoint
