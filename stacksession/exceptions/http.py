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

"""HTTP Exceptions used by stacksession."""

import json
import typing as ty

from stacksession.exceptions import base

if ty.TYPE_CHECKING:
    import httpx

__all__ = (
    'HttpError',
    'HTTPClientError',
    'BadRequest',
    'Unauthorized',
    'Forbidden',
    'NotFound',
    'MethodNotAllowed',
    'Conflict',
    'RequestEntityTooLarge',
    'UnprocessableEntity',
    'HttpServerError',
    'InternalServerError',
    'HttpNotImplemented',
    'BadGateway',
    'ServiceUnavailable',
    'GatewayTimeout',
    'from_response',
    'extract_message',
)


class HttpError(base.ClientException):
    """The base exception class for all HTTP exceptions."""

    http_status = 500
    message = "HTTP Error"

    def __init__(
        self,
        message: ty.Optional[str] = None,
        body: ty.Optional[str] = None,
        response: ty.Optional['httpx.Response'] = None,
        request_id: ty.Optional[str] = None,
        url: ty.Optional[str] = None,
        method: ty.Optional[str] = None,
        http_status: ty.Optional[int] = None,
    ):
        self.http_status = http_status or self.http_status
        self.message = message or self.message
        self.body = body
        self.response = response
        self.request_id = request_id
        self.url = url
        self.method = method
        formatted_string = f"{self.message} (HTTP {self.http_status})"
        if request_id:
            formatted_string += f" (Request-ID: {request_id})"
        super().__init__(formatted_string)

    @property
    def status_code(self) -> int:
        return self.http_status


class HTTPClientError(HttpError):
    """Client-side HTTP error.

    Exception for cases in which the client seems to have erred.
    """

    message = "HTTP Client Error"


class HttpServerError(HttpError):
    """Server-side HTTP error.

    Exception for cases in which the server is aware that it has
    erred or is incapable of performing the request.
    """

    message = "HTTP Server Error"


class BadRequest(HTTPClientError):
    http_status = 400
    message = "Bad Request"


class Unauthorized(HTTPClientError):
    http_status = 401
    message = "Unauthorized"


class Forbidden(HTTPClientError):
    http_status = 403
    message = "Forbidden"


class NotFound(HTTPClientError):
    http_status = 404
    message = "Not Found"


class MethodNotAllowed(HTTPClientError):
    http_status = 405
    message = "Method Not Allowed"


class Conflict(HTTPClientError):
    http_status = 409
    message = "Conflict"


class RequestEntityTooLarge(HTTPClientError):
    http_status = 413
    message = "Request Entity Too Large"


class UnprocessableEntity(HTTPClientError):
    http_status = 422
    message = "Unprocessable Entity"


class InternalServerError(HttpServerError):
    http_status = 500
    message = "Internal Server Error"


class HttpNotImplemented(HttpServerError):
    http_status = 501
    message = "Not Implemented"


class BadGateway(HttpServerError):
    http_status = 502
    message = "Bad Gateway"


class ServiceUnavailable(HttpServerError):
    http_status = 503
    message = "Service Unavailable"


class GatewayTimeout(HttpServerError):
    http_status = 504
    message = "Gateway Timeout"


_code_map = {
    c.http_status: c
    for c in (
        BadRequest,
        Unauthorized,
        Forbidden,
        NotFound,
        MethodNotAllowed,
        Conflict,
        RequestEntityTooLarge,
        UnprocessableEntity,
        InternalServerError,
        HttpNotImplemented,
        BadGateway,
        ServiceUnavailable,
        GatewayTimeout,
    )
}

_MESSAGE_KEYS = ('message', 'faultstring', 'title')


def _message_from(value: ty.Any, recursive: bool = True) -> ty.Optional[str]:
    if not isinstance(value, dict):
        return None

    for key in _MESSAGE_KEYS:
        if value.get(key):
            return str(value[key])

    if not recursive:
        return None

    # Ironic wraps its error as a JSON document inside a JSON string.
    error_message = value.get('error_message')
    if isinstance(error_message, str):
        try:
            error_message = json.loads(error_message)
        except ValueError:
            return None
    return _message_from(error_message, recursive=False)


def extract_message(text: str) -> str:
    """Pull a human readable message out of an error response body.

    Services report errors as ``{"message": ...}``, as a single key wrapping
    such a document (``{"itemNotFound": {"message": ...}}``), or as Ironic's
    ``error_message``. Anything else is returned unchanged.
    """
    try:
        body = json.loads(text)
    except ValueError:
        return text

    message = _message_from(body)
    if message is None and isinstance(body, dict) and len(body) == 1:
        message = _message_from(next(iter(body.values())))

    return message if message is not None else text


def from_response(
    response: 'httpx.Response', method: str, url: str
) -> HttpError:
    """Return an instance of :class:`HttpError` or subclass based on response.

    :param response: instance of `httpx.Response` class
    :param method: HTTP method used for request
    :param url: URL used for request
    """
    req_id = response.headers.get('x-openstack-request-id')

    body = response.text
    message = extract_message(body) if body else None

    kwargs = {
        'http_status': response.status_code,
        'response': response,
        'method': method,
        'url': url,
        'request_id': req_id,
        'message': message,
        'body': body,
    }

    try:
        cls = _code_map[response.status_code]
    except KeyError:
        if 500 <= response.status_code < 600:
            cls = HttpServerError
        elif 400 <= response.status_code < 500:
            cls = HTTPClientError
        else:
            cls = HttpError

    return cls(**kwargs)
