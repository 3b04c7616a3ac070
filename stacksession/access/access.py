# Copyright 2012 Nebula, Inc.
#
# All Rights Reserved.
#
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

import datetime
import typing as ty

from stacksession import _utils as utils
from stacksession.access import service_catalog

# gap, in seconds, to determine whether the given token is about to expire
STALE_TOKEN_DURATION = 30

__all__ = ('AccessInfo', 'create')


def create(
    body: ty.Mapping[str, ty.Any],
    auth_token: ty.Optional[str] = None,
    auth_url: ty.Optional[str] = None,
) -> 'AccessInfo':
    """Create an :class:`AccessInfo` from an identity v3 token body.

    :raises ValueError: if the body is not a token response.
    """
    if not isinstance(body.get('token'), dict):
        raise ValueError('Unrecognized auth response')

    auth_ref = AccessInfo(body, auth_token=auth_token, auth_url=auth_url)
    # fails early on an unparsable expiry
    auth_ref.expires
    return auth_ref


class AccessInfo:
    """Encapsulates a raw authentication token from the identity service.

    Provides helper methods for extracting useful values from that token.
    Instances are never modified; a re-authentication produces a new one.
    """

    def __init__(
        self,
        body: ty.Mapping[str, ty.Any],
        auth_token: ty.Optional[str] = None,
        auth_url: ty.Optional[str] = None,
    ):
        self._data = body
        self._auth_token = auth_token
        self._auth_url = auth_url
        self._service_catalog = service_catalog.ServiceCatalog.from_token(
            body
        )

    @property
    def _token(self) -> ty.Mapping[str, ty.Any]:
        return ty.cast(ty.Mapping[str, ty.Any], self._data['token'])

    @property
    def service_catalog(self) -> service_catalog.ServiceCatalog:
        return self._service_catalog

    def will_expire_soon(
        self, stale_duration: int = STALE_TOKEN_DURATION
    ) -> bool:
        """Determine if expiration is about to occur.

        :returns: true if expiration is within the given duration
        :rtype: boolean
        """
        if self.expires is None:
            return False

        norm_expires = utils.normalize_time(self.expires)
        soon = utils.from_utcnow(seconds=stale_duration)
        return norm_expires < soon

    def has_service_catalog(self) -> bool:
        """Return true if the auth token has a service catalog.

        :returns: boolean
        """
        return 'catalog' in self._token

    @property
    def auth_token(self) -> ty.Optional[str]:
        """Return the token_id associated with the auth request.

        To be used in headers for authenticating API requests.

        :returns: str
        """
        return self._auth_token

    @property
    def auth_url(self) -> ty.Optional[str]:
        """The identity endpoint that issued this token."""
        return self._auth_url

    @property
    def expires(self) -> ty.Optional[datetime.datetime]:
        """Return the token expiration (as datetime object).

        :returns: datetime
        """
        expires_at = self._token.get('expires_at')
        if not expires_at:
            return None
        return utils.parse_isotime(expires_at)

    @property
    def issued(self) -> ty.Optional[datetime.datetime]:
        """Return the token issue time (as datetime object).

        :returns: datetime
        """
        issued_at = self._token.get('issued_at')
        if not issued_at:
            return None
        return utils.parse_isotime(issued_at)

    @property
    def methods(self) -> list[str]:
        return list(self._token.get('methods', []))

    @property
    def user_id(self) -> ty.Optional[str]:
        return self._token.get('user', {}).get('id')

    @property
    def username(self) -> ty.Optional[str]:
        return self._token.get('user', {}).get('name')

    @property
    def project_id(self) -> ty.Optional[str]:
        return self._token.get('project', {}).get('id')

    @property
    def project_name(self) -> ty.Optional[str]:
        return self._token.get('project', {}).get('name')

    @property
    def project_scoped(self) -> bool:
        return 'project' in self._token

    def __repr__(self) -> str:
        token = self._auth_token
        hashed = utils.hash_secret(token) if token else None
        return (
            f'<AccessInfo auth_token={hashed} expires={self.expires} '
            f'auth_url={self._auth_url}>'
        )
