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

"""Static knowledge about the service families.

Each descriptor knows the official name of a service type and how an API
version is selected on the wire: a microversion header, a media type in the
``Accept`` header, or nothing at all.
"""

import re
import typing as ty

import os_service_types

from stacksession import _utils as utils
from stacksession import discover

_LOGGER = utils.get_logger(__name__)
_SERVICE_TYPES = os_service_types.ServiceTypes()

MICROVERSION_HEADER = 'OpenStack-API-Version'

__all__ = (
    'MICROVERSION_HEADER',
    'ServiceTypeDescriptor',
    'get_descriptor',
    'get_official_type',
    'implied_version',
    'register_descriptor',
)


def _get_header(headers: ty.Mapping[str, str], name: str) -> ty.Optional[str]:
    lowered = name.lower()
    for key, value in headers.items():
        if key.lower() == lowered:
            return value
    return None


def _set_header(
    headers: ty.MutableMapping[str, str], name: str, value: str
) -> None:
    lowered = name.lower()
    for key in [k for k in headers if k.lower() == lowered]:
        del headers[key]
    headers[name] = value


class ServiceTypeDescriptor:
    """Version handling of one service family.

    :param str service_type: The official service type.
    :param str microversion_name: The service name used in the
        ``OpenStack-API-Version`` header, e.g. ``volume`` for block-storage.
    :param str legacy_header: A service specific header that carries the
        same version, still required by older deployments.
    :param str media_type: A media type template for the ``Accept`` header,
        with ``{version}`` standing for ``MAJOR.MINOR``.
    :param default_version: The criterion used when the caller configured
        none. None means no negotiation.
    """

    def __init__(
        self,
        service_type: str,
        microversion_name: ty.Optional[str] = None,
        legacy_header: ty.Optional[str] = None,
        media_type: ty.Optional[str] = None,
        default_version: ty.Optional[discover.Criterion] = None,
    ):
        if media_type and microversion_name:
            raise ValueError(
                'A service selects versions either by header or media type'
            )

        self.service_type = service_type
        self.microversion_name = microversion_name
        self.legacy_header = legacy_header
        self.media_type = media_type
        self.default_version = default_version

        self._media_type_re = None
        if media_type:
            before, _, after = media_type.partition('{version}')
            self._media_type_re = re.compile(
                re.escape(before) + r'(v?\d+(?:\.\d+)?)' + re.escape(after)
            )

    @property
    def has_version_headers(self) -> bool:
        return bool(self.microversion_name or self.media_type)

    def set_version_headers(
        self,
        headers: ty.MutableMapping[str, str],
        version: discover.ApiVersion,
    ) -> None:
        """Insert the headers selecting ``version`` into ``headers``."""
        if self.microversion_name:
            _set_header(
                headers,
                MICROVERSION_HEADER,
                f'{self.microversion_name} {version}',
            )
            if self.legacy_header:
                _set_header(headers, self.legacy_header, str(version))
        elif self.media_type:
            _set_header(
                headers,
                'Accept',
                self.media_type.format(version=version),
            )

    def parse_version_headers(
        self, headers: ty.Mapping[str, str]
    ) -> ty.Optional[discover.ApiVersion]:
        """Read back the version selected by ``headers``, if any."""
        if self.microversion_name:
            value = _get_header(headers, MICROVERSION_HEADER)
            if value:
                # the header may list versions of several services
                for part in value.split(','):
                    name, _, version = part.strip().partition(' ')
                    if name == self.microversion_name and version:
                        return discover.ApiVersion.parse(version.strip())
            if self.legacy_header:
                value = _get_header(headers, self.legacy_header)
                if value:
                    return discover.ApiVersion.parse(value)
        elif self._media_type_re is not None:
            value = _get_header(headers, 'Accept')
            if value:
                match = self._media_type_re.search(value)
                if match:
                    return discover.ApiVersion.parse(match.group(1))
        return None

    def default_criterion(
        self, requested_type: ty.Optional[str] = None
    ) -> discover.Criterion:
        """The criterion to use when the caller configured none.

        A versioned service type such as ``volumev3`` implies its major
        version.
        """
        if self.default_version is not None:
            return self.default_version

        implied = implied_version(requested_type or self.service_type)
        if implied is not None:
            return discover.VersionRange(implied, implied)

        return discover.ANY_VERSION

    def __repr__(self) -> str:
        return f'<ServiceTypeDescriptor {self.service_type}>'


def get_official_type(service_type: str) -> str:
    """Return the official name of a service type or alias."""
    if _SERVICE_TYPES.is_known(service_type):
        official = _SERVICE_TYPES.get_service_type(service_type)
        if official:
            return ty.cast(str, official)
    return service_type


def implied_version(service_type: str) -> ty.Optional[discover.ApiVersion]:
    """The major version implied by an old style type such as ``volumev2``.

    Only officially known types are considered.
    """
    if (
        len(service_type) > 2
        and service_type[-1].isdigit()
        and service_type[-2] == 'v'
        and _SERVICE_TYPES.is_known(service_type)
    ):
        return discover.ApiVersion(int(service_type[-1]))
    return None


_DESCRIPTORS: dict[str, ServiceTypeDescriptor] = {}


def register_descriptor(descriptor: ServiceTypeDescriptor) -> None:
    """Add or replace the descriptor of a service type."""
    _DESCRIPTORS[descriptor.service_type] = descriptor


def get_descriptor(service_type: str) -> ServiceTypeDescriptor:
    """Return the descriptor of a service type or any of its aliases.

    Unknown service types get a descriptor without version headers.
    """
    official = get_official_type(service_type)
    try:
        return _DESCRIPTORS[official]
    except KeyError:
        _LOGGER.debug(
            'No version information for service type %s', service_type
        )
        return ServiceTypeDescriptor(official)


for _descriptor in (
    ServiceTypeDescriptor(
        'identity',
        media_type='application/vnd.openstack.identity-v{version}+json',
    ),
    ServiceTypeDescriptor(
        'compute',
        microversion_name='compute',
        legacy_header='X-OpenStack-Nova-API-Version',
    ),
    ServiceTypeDescriptor('block-storage', microversion_name='volume'),
    ServiceTypeDescriptor(
        'shared-file-system',
        microversion_name='sharev2',
        legacy_header='X-OpenStack-Manila-API-Version',
    ),
    ServiceTypeDescriptor(
        'baremetal',
        microversion_name='baremetal',
        legacy_header='X-OpenStack-Ironic-API-Version',
    ),
    ServiceTypeDescriptor('placement', microversion_name='placement'),
    ServiceTypeDescriptor('image'),
    ServiceTypeDescriptor('network'),
    ServiceTypeDescriptor('object-store'),
):
    register_descriptor(_descriptor)
