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

from stacksession import discover

__all__ = (
    'DiscoveryList',
    'MicroversionDiscovery',
    'VersionDiscovery',
)


class VersionDiscovery(dict[str, ty.Any]):
    """A Version element for non-keystone services without microversions.

    Provides some default values and helper methods for creating a microversion
    endpoint version structure. Clients should use this instead of creating
    their own structures.

    :param string href: The url that this entry should point to.
    :param string id: The version id that should be reported.
    :param string status: The status of the version. (optional)
    """

    def __init__(
        self, href: str, id: str, status: str = discover.Status.CURRENT
    ):
        super().__init__()

        self.id = id
        self.status = status
        self['links'] = [{'href': href, 'rel': 'self'}]

    @property
    def id(self) -> str:
        return ty.cast(str, self['id'])

    @id.setter
    def id(self, value: str) -> None:
        self['id'] = value

    @property
    def status(self) -> str:
        return ty.cast(str, self['status'])

    @status.setter
    def status(self, value: str) -> None:
        self['status'] = value

    @property
    def links(self) -> list[dict[str, str]]:
        return ty.cast(list[dict[str, str]], self['links'])


class MicroversionDiscovery(VersionDiscovery):
    """A Version element that has microversions.

    :param string href: The url that this entry should point to.
    :param string id: The version id that should be reported.
    :param string min_version: The minimum supported microversion.
    :param string max_version: The maximum supported microversion.
    :param string status: The status of the version. (optional)
    """

    def __init__(
        self,
        href: str,
        id: str,
        min_version: str = '',
        max_version: str = '',
        status: str = discover.Status.CURRENT,
    ):
        super().__init__(href, id, status=status)

        self.min_version = min_version
        self.max_version = max_version

    @property
    def min_version(self) -> str:
        return ty.cast(str, self['min_version'])

    @min_version.setter
    def min_version(self, value: str) -> None:
        self['min_version'] = value

    @property
    def max_version(self) -> str:
        return ty.cast(str, self['max_version'])

    @max_version.setter
    def max_version(self, value: str) -> None:
        self['max_version'] = value


class DiscoveryList(dict[str, ty.Any]):
    """A List of version elements.

    Creates a correctly structured list of versions that the ``/`` of a
    service would return.

    :param bool values: Nest the versions under ``values`` as the identity
                        service does. (optional, default False)
    """

    def __init__(self, values: bool = False):
        super().__init__()
        self._values = values
        if values:
            self['versions'] = {'values': []}
        else:
            self['versions'] = []

    @property
    def versions(self) -> list[dict[str, ty.Any]]:
        if self._values:
            return ty.cast(list[dict[str, ty.Any]], self['versions']['values'])
        return ty.cast(list[dict[str, ty.Any]], self['versions'])

    def add_version(self, version: VersionDiscovery) -> VersionDiscovery:
        """Add a new version structure to the list.

        :param dict version: A new version structure to add to the list.
        """
        self.versions.append(version)
        return version

    def add_microversion(
        self,
        href: str,
        id: str,
        min_version: str = '',
        max_version: str = '',
        status: str = discover.Status.CURRENT,
    ) -> MicroversionDiscovery:
        """Add a microversion version to the list."""
        return ty.cast(
            MicroversionDiscovery,
            self.add_version(
                MicroversionDiscovery(
                    href,
                    id,
                    min_version=min_version,
                    max_version=max_version,
                    status=status,
                )
            ),
        )
