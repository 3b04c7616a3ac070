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
import uuid

from stacksession import _utils as utils

__all__ = ('V3Token',)


def _format_time(value: datetime.datetime) -> str:
    value = utils.normalize_time(value)
    return value.strftime('%Y-%m-%dT%H:%M:%S.%fZ')


class _Service(dict[str, ty.Any]):
    """One of the services within a V3 catalog."""

    def add_endpoint(
        self,
        interface: str,
        url: str,
        region: ty.Optional[str] = None,
        id: ty.Optional[str] = None,
    ) -> dict[str, ty.Any]:
        data = {
            'id': id or uuid.uuid4().hex,
            'interface': interface,
            'url': url,
            'region': region,
            'region_id': region,
        }
        self.setdefault('endpoints', []).append(data)
        return data

    def add_standard_endpoints(
        self,
        public: ty.Optional[str] = None,
        admin: ty.Optional[str] = None,
        internal: ty.Optional[str] = None,
        region: ty.Optional[str] = None,
    ) -> list[dict[str, ty.Any]]:
        ret = []

        if public:
            ret.append(self.add_endpoint('public', public, region=region))
        if admin:
            ret.append(self.add_endpoint('admin', admin, region=region))
        if internal:
            ret.append(self.add_endpoint('internal', internal, region=region))

        return ret


class V3Token(dict[str, ty.Any]):
    """A V3 Keystone token that can be used for testing.

    This object is designed to allow clients to generate a correct V3 token for
    use in there test code. It should prevent clients from having to know the
    correct token format and allow them to test the portions of token handling
    that matter to them and not copy and paste sample.
    """

    def __init__(
        self,
        expires: ty.Optional[datetime.datetime] = None,
        issued: ty.Optional[datetime.datetime] = None,
        user_id: ty.Optional[str] = None,
        user_name: ty.Optional[str] = None,
        user_domain_id: ty.Optional[str] = None,
        user_domain_name: ty.Optional[str] = None,
        methods: ty.Optional[list[str]] = None,
        project_id: ty.Optional[str] = None,
        project_name: ty.Optional[str] = None,
        project_domain_id: ty.Optional[str] = None,
        project_domain_name: ty.Optional[str] = None,
    ):
        super().__init__()

        self.user_id = user_id or uuid.uuid4().hex
        self.user_name = user_name or uuid.uuid4().hex
        self.user_domain_id = user_domain_id or uuid.uuid4().hex
        self.user_domain_name = user_domain_name or uuid.uuid4().hex
        self.methods = methods or ['password']

        self.expires = expires or utils.from_utcnow(hours=1)
        self.issued = issued or utils.before_utcnow(minutes=2)

        if project_id or project_name:
            self.set_project_scope(
                id=project_id,
                name=project_name,
                domain_id=project_domain_id,
                domain_name=project_domain_name,
            )

    @property
    def root(self) -> dict[str, ty.Any]:
        return self.setdefault('token', {})

    @property
    def expires_str(self) -> str:
        return ty.cast(str, self.root.get('expires_at'))

    @property
    def expires(self) -> datetime.datetime:
        return utils.parse_isotime(self.expires_str)

    @expires.setter
    def expires(self, value: datetime.datetime) -> None:
        self.root['expires_at'] = _format_time(value)

    @property
    def issued(self) -> datetime.datetime:
        return utils.parse_isotime(self.root['issued_at'])

    @issued.setter
    def issued(self, value: datetime.datetime) -> None:
        self.root['issued_at'] = _format_time(value)

    @property
    def _user(self) -> dict[str, ty.Any]:
        return self.root.setdefault('user', {})

    @property
    def user_id(self) -> ty.Optional[str]:
        return self._user.get('id')

    @user_id.setter
    def user_id(self, value: str) -> None:
        self._user['id'] = value

    @property
    def user_name(self) -> ty.Optional[str]:
        return self._user.get('name')

    @user_name.setter
    def user_name(self, value: str) -> None:
        self._user['name'] = value

    @property
    def user_domain_id(self) -> ty.Optional[str]:
        return self._user.get('domain', {}).get('id')

    @user_domain_id.setter
    def user_domain_id(self, value: str) -> None:
        self._user.setdefault('domain', {})['id'] = value

    @property
    def user_domain_name(self) -> ty.Optional[str]:
        return self._user.get('domain', {}).get('name')

    @user_domain_name.setter
    def user_domain_name(self, value: str) -> None:
        self._user.setdefault('domain', {})['name'] = value

    @property
    def methods(self) -> list[str]:
        return ty.cast(list[str], self.root.get('methods', []))

    @methods.setter
    def methods(self, value: list[str]) -> None:
        self.root['methods'] = value

    @property
    def project_id(self) -> ty.Optional[str]:
        return self.root.get('project', {}).get('id')

    @property
    def project_name(self) -> ty.Optional[str]:
        return self.root.get('project', {}).get('name')

    @property
    def service_catalog(self) -> list[dict[str, ty.Any]]:
        return ty.cast(
            list[dict[str, ty.Any]], self.root.setdefault('catalog', [])
        )

    def set_project_scope(
        self,
        id: ty.Optional[str] = None,
        name: ty.Optional[str] = None,
        domain_id: ty.Optional[str] = None,
        domain_name: ty.Optional[str] = None,
    ) -> None:
        self.root['project'] = {
            'id': id or uuid.uuid4().hex,
            'name': name or uuid.uuid4().hex,
            'domain': {
                'id': domain_id or uuid.uuid4().hex,
                'name': domain_name or uuid.uuid4().hex,
            },
        }

    def add_service(
        self,
        type: str,
        name: ty.Optional[str] = None,
        id: ty.Optional[str] = None,
    ) -> _Service:
        service = _Service(type=type, id=id or uuid.uuid4().hex)
        if name:
            service['name'] = name
        self.service_catalog.append(service)
        return service
