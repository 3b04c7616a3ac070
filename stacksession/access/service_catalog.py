# Copyright 2011 OpenStack Foundation
# Copyright 2011, Piston Cloud Computing, Inc.
# Copyright 2011 Nebula, Inc.
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

import copy
import types
import typing as ty

import os_service_types

from stacksession import _utils as utils
from stacksession import exceptions

_LOGGER = utils.get_logger(__name__)
_SERVICE_TYPES = os_service_types.ServiceTypes()

__all__ = ('CatalogEntry', 'ServiceCatalog', 'resolve')


class CatalogEntry(ty.NamedTuple):
    """One service of the catalog as seen through a single interface.

    ``endpoints`` maps a region identifier to the endpoint URL of the service
    in that region. Regions keep the order in which the catalog lists them.
    """

    service_type: str
    name: ty.Optional[str]
    endpoints: ty.Mapping[ty.Optional[str], str]
    service_id: ty.Optional[str] = None

    @property
    def regions(self) -> list[ty.Optional[str]]:
        return list(self.endpoints)


def _service_type_choices(service_type: str) -> list[str]:
    choices = [service_type]
    if _SERVICE_TYPES.is_known(service_type):
        for alias in _SERVICE_TYPES.get_all_types(service_type):
            if alias not in choices:
                choices.append(alias)
    return choices


def resolve(
    catalog: ty.Sequence[CatalogEntry],
    service_type: str,
    region_name: ty.Optional[str] = None,
) -> str:
    """Find the endpoint URL of a service in a catalog.

    The exact service type is looked up first. When the catalog does not list
    it, the official name and known aliases of the type are tried in order so
    that asking for ``block-storage`` finds a ``volumev3`` entry.

    :param catalog: The catalog entries for the interface in use.
    :param str service_type: The type of service to look up.
    :param str region_name: The region the endpoint must be in. When omitted
        the service must be available in exactly one region.

    :raises stacksession.exceptions.EmptyCatalog: if the catalog is empty.
    :raises stacksession.exceptions.ServiceNotFound: if no entry has the
        requested type.
    :raises stacksession.exceptions.AmbiguousRegion: if no region was given
        and the service has endpoints in several regions.
    :raises stacksession.exceptions.EndpointNotFound: if the service has no
        endpoint in the requested region.

    :returns: The endpoint URL.
    :rtype: str
    """
    if not catalog:
        raise exceptions.EmptyCatalog(service_type=service_type)

    entries: list[CatalogEntry] = []
    for candidate in _service_type_choices(service_type):
        entries = [e for e in catalog if e.service_type == candidate]
        if entries:
            if candidate != service_type:
                _LOGGER.debug(
                    'Using catalog entry %s for service type %s',
                    candidate,
                    service_type,
                )
            break
    else:
        raise exceptions.ServiceNotFound(
            f'{service_type} service not found in the service catalog',
            service_type=service_type,
        )

    regions: dict[ty.Optional[str], str] = {}
    for entry in entries:
        for region, url in entry.endpoints.items():
            regions.setdefault(region, url)

    if region_name is None:
        if len(regions) == 1:
            return next(iter(regions.values()))
        if not regions:
            raise exceptions.EndpointNotFound(
                f'No endpoints for {service_type} service'
            )
        raise exceptions.AmbiguousRegion(
            service_type, [str(r) for r in regions]
        )

    try:
        return regions[region_name]
    except KeyError:
        raise exceptions.EndpointNotFound(
            f'{service_type} service has no endpoint in '
            f'{region_name} region'
        )


class ServiceCatalog:
    """Helper methods for dealing with an identity v3 service catalog."""

    def __init__(self, catalog: ty.Sequence[ty.Mapping[str, ty.Any]]):
        self._catalog = catalog

    @classmethod
    def from_token(cls, token: ty.Mapping[str, ty.Any]) -> 'ServiceCatalog':
        if not isinstance(token.get('token'), dict):
            raise ValueError('Invalid token format for fetching catalog')

        catalog = token['token'].get('catalog', [])
        if not isinstance(catalog, list):
            raise ValueError('Invalid service catalog format')

        for service in catalog:
            if not isinstance(service, dict):
                raise ValueError('Invalid service in catalog')
            endpoints = service.get('endpoints', [])
            if not isinstance(endpoints, list) or not all(
                isinstance(e, dict) for e in endpoints
            ):
                raise ValueError(
                    f'Invalid endpoints for service {service.get("type")}'
                )

        return cls(copy.deepcopy(catalog))

    @property
    def catalog(self) -> ty.Sequence[ty.Mapping[str, ty.Any]]:
        """Return the raw service catalog content, mostly useful for debugging.

        Applications should avoid this and use accessor methods instead.
        """
        return self._catalog

    @staticmethod
    def normalize_interface(interface: str) -> str:
        """Accept the v2 ``publicURL`` spelling of an interface."""
        return interface.removesuffix('URL')

    def _get_endpoint_region(
        self, endpoint: ty.Mapping[str, ty.Any]
    ) -> ty.Optional[str]:
        return endpoint.get('region_id') or endpoint.get('region')

    def entries(self, interface: str = 'public') -> list[CatalogEntry]:
        """Return the catalog as seen through one interface.

        Services without a ``type`` are skipped. Every service is returned,
        even one without endpoints for the interface, so that a missing
        endpoint can be told apart from a missing service.

        :param str interface: ``public``, ``internal`` or ``admin``.
        :rtype: list(CatalogEntry)
        """
        interface = self.normalize_interface(interface)
        result = []

        for service in self._catalog:
            if 'type' not in service:
                _LOGGER.debug('Skipping catalog entry without a type')
                continue

            endpoints: dict[ty.Optional[str], str] = {}
            for endpoint in service.get('endpoints', []):
                if endpoint.get('interface') != interface:
                    continue
                if 'url' not in endpoint:
                    continue
                region = self._get_endpoint_region(endpoint)
                endpoints.setdefault(region, endpoint['url'])

            result.append(
                CatalogEntry(
                    service_type=service['type'],
                    name=service.get('name'),
                    endpoints=types.MappingProxyType(endpoints),
                    service_id=service.get('id'),
                )
            )

        return result

    def url_for(
        self,
        service_type: str,
        interface: str = 'public',
        region_name: ty.Optional[str] = None,
    ) -> str:
        """Fetch an endpoint from the service catalog.

        See :func:`resolve` for the matching rules and errors.
        """
        return resolve(self.entries(interface), service_type, region_name)
