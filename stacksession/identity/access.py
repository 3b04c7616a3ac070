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

from stacksession.identity import base

if ty.TYPE_CHECKING:
    from stacksession.access import access as access_mod
    from stacksession import session as ss_session


class AccessInfoPlugin(base.BaseIdentityPlugin):
    """A plugin that turns an existing AccessInfo object into a usable plugin.

    There are cases where reusing an auth_ref or AccessInfo object is useful,
    for example a service that was handed a validated token together with its
    catalog. The token is never exchanged and is not renewed when it expires.

    :param auth_ref: the existing AccessInfo object.
    :type auth_ref: stacksession.access.AccessInfo
    :param auth_url: the url where this AccessInfo was retrieved from.
                     Required if using the AUTH_INTERFACE with get_endpoint.
                     (optional)
    :param str region_name: Default region for catalog lookups. (optional)
    """

    def __init__(
        self,
        auth_ref: 'access_mod.AccessInfo',
        auth_url: ty.Optional[str] = None,
        region_name: ty.Optional[str] = None,
    ):
        super().__init__(
            auth_url=auth_url or auth_ref.auth_url,
            reauthenticate=False,
            region_name=region_name,
        )
        self.auth_ref = auth_ref

    async def get_auth_ref(
        self, session: 'ss_session.Session'
    ) -> 'access_mod.AccessInfo':
        assert self.auth_ref is not None  # nosec B101
        return self.auth_ref

    def invalidate(self) -> bool:
        # NOTE: There is nothing we can do to re-auth an AccessInfoPlugin. Use
        # this as a signal that the caller should not retry.
        return False
