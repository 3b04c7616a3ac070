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

from stacksession.exceptions import base

__all__ = (
    'CatalogException',
    'ServiceNotFound',
    'EmptyCatalog',
    'EndpointNotFound',
    'AmbiguousRegion',
)


class CatalogException(base.ClientException):
    message = "Unknown error with service catalog."


class ServiceNotFound(CatalogException):
    """No catalog entry of the requested service type."""

    message = "Service was not found in the service catalog."

    def __init__(
        self,
        message: ty.Optional[str] = None,
        service_type: ty.Optional[str] = None,
    ):
        super().__init__(message)
        self.service_type = service_type


class EmptyCatalog(ServiceNotFound):
    message = "The service catalog is empty."


class EndpointNotFound(CatalogException):
    message = "Could not find requested endpoint in Service Catalog."


class AmbiguousRegion(CatalogException):
    """A region was not given and the service exists in several regions.

    .. py:attribute:: regions

        The regions the service is available in, in catalog order.
    """

    def __init__(self, service_type: str, regions: ty.Sequence[str]):
        self.service_type = service_type
        self.regions = list(regions)
        super().__init__(
            f'Service {service_type} is available in regions '
            f'{", ".join(self.regions)}; a region name is required'
        )
