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

from stacksession.exceptions import base

__all__ = (
    'RequestError',
    'ConnectTimeout',
    'ConnectFailure',
    'UnknownConnectionError',
    'RetriableConnectionFailure',
)


class RetriableConnectionFailure(Exception):
    """A mixin class that implies you can retry the most recent request."""


class RequestError(base.ClientException):
    """The request could not be delivered to the service."""

    message = "Cannot connect to API service."


class ConnectTimeout(RequestError, RetriableConnectionFailure):
    message = "Timed out connecting to service."


class ConnectFailure(RequestError, RetriableConnectionFailure):
    message = "Connection failure that may be retried."


class UnknownConnectionError(RequestError):
    """An error was encountered but we don't know what it is."""

    def __init__(self, msg: str, original: Exception):
        super().__init__(msg)
        self.original = original
