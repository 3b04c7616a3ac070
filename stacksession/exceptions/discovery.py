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

if ty.TYPE_CHECKING:
    from stacksession import discover

__all__ = ('DiscoveryFailure', 'VersionNotSupported')


class DiscoveryFailure(base.ClientException):
    message = "Discovery of client versions failed."


class VersionNotSupported(DiscoveryFailure):
    """No advertised version satisfies the requested criterion.

    .. py:attribute:: criterion

        The acceptance criterion that could not be satisfied.

    .. py:attribute:: advertised

        The versions the deployment advertised, lowest first.
    """

    def __init__(
        self,
        criterion: 'discover.Criterion',
        advertised: ty.Sequence['discover.VersionData'],
        service_type: ty.Optional[str] = None,
    ):
        self.criterion = criterion
        self.advertised = list(advertised)
        self.service_type = service_type

        available = ', '.join(str(v) for v in self.advertised) or 'none'
        service = f' of service {service_type}' if service_type else ''
        super().__init__(
            f'Requested version {criterion} is not supported{service}; '
            f'available: {available}'
        )
