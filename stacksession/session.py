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

import asyncio
import json
import logging
import platform
import typing as ty
import urllib.parse

import httpx

import stacksession
from stacksession import _utils as utils
from stacksession import discover
from stacksession import exceptions
from stacksession import service_types

if ty.TYPE_CHECKING:
    from stacksession import plugin

LOG = utils.get_logger(__name__)

DEFAULT_USER_AGENT = (
    f'stacksession/{stacksession.__version__} '
    f'httpx/{httpx.__version__} '
    f'{platform.python_implementation()}/{platform.python_version()}'
)

_SECURE_HEADERS = frozenset(
    ('authorization', 'x-auth-token', 'x-subject-token', 'x-service-token')
)

_LOGGABLE_CONTENT_TYPES = ('application/json', 'text/')

QueryPairs = ty.Sequence[tuple[str, ty.Any]]

__all__ = ('EndpointEntry', 'Session', 'DEFAULT_USER_AGENT')


class EndpointEntry(ty.NamedTuple):
    """Where and how to talk to one service in one region.

    Entries are only published once endpoint and version are both known.
    """

    #: The ``(service_type, region_name)`` pair this entry was resolved for.
    key: tuple[str, ty.Optional[str]]
    endpoint: str
    #: The negotiated version, None when no negotiation was performed.
    version: ty.Optional[discover.ApiVersion]
    #: The headers selecting ``version``.
    headers: ty.Mapping[str, str]
    #: The cache generation the entry was resolved under.
    generation: int


def _process_header(header: tuple[str, str]) -> tuple[str, str]:
    """Redact the secure headers to be logged."""
    name, value = header
    if name.lower() in _SECURE_HEADERS:
        return (name, utils.hash_secret(value))
    return header


def _with_version_headers(
    headers: ty.Optional[ty.Mapping[str, str]],
    version_headers: ty.Mapping[str, str],
) -> dict[str, str]:
    """Merge the version headers of a service into request headers.

    Version headers replace any header of the same name, whatever its case.
    """
    names = {name.lower() for name in version_headers}
    merged = {
        name: value
        for name, value in (headers or {}).items()
        if name.lower() not in names
    }
    merged.update(version_headers)
    return merged


def _join_url(endpoint: str, path: str) -> str:
    if not path:
        return endpoint
    return f"{endpoint.rstrip('/')}/{path.lstrip('/')}"


class Session:
    """Maintains client communication state and common functionality.

    The session owns the authentication plugin and caches, per service type
    and region, the endpoint found in the catalog together with the API
    version negotiated with the service. All methods doing network I/O are
    coroutines.

    :param auth: An authentication plugin to authenticate the session with.
                 (optional, defaults to None)
    :type auth: stacksession.plugin.BaseAuthPlugin
    :param client: An httpx client to send requests with. One is created and
                   owned by the session if not given. (optional)
    :type client: httpx.AsyncClient
    :param str region_name: The region used when a call names none.
                            (optional)
    :param str interface: The catalog interface to use. (optional, defaults
                          to public)
    :param dict api_versions: A mapping of service type to the versions the
                              caller can work with, anything accepted by
                              :func:`stacksession.discover.as_criterion`.
                              (optional)
    :param allowed_statuses: Only negotiate versions advertised with one of
                             these statuses. (optional, defaults to any)
    :param float timeout: A timeout to pass to httpx. If not given a client is
                          created without timeout. (optional)
    :param str user_agent: A User-Agent header string to use for the request.
                           (optional, defaults to DEFAULT_USER_AGENT)
    """

    def __init__(
        self,
        auth: ty.Optional['plugin.BaseAuthPlugin'] = None,
        client: ty.Optional[httpx.AsyncClient] = None,
        region_name: ty.Optional[str] = None,
        interface: str = 'public',
        api_versions: ty.Optional[ty.Mapping[str, ty.Any]] = None,
        allowed_statuses: ty.Optional[ty.Collection[str]] = None,
        timeout: ty.Optional[float] = None,
        user_agent: ty.Optional[str] = None,
    ):
        self.auth = auth
        self.region_name = region_name
        self.interface = interface
        self.allowed_statuses = allowed_statuses
        self.timeout = timeout
        self.user_agent = user_agent or DEFAULT_USER_AGENT

        self._owns_client = client is None
        if client is None:
            client = httpx.AsyncClient(timeout=timeout, follow_redirects=True)
        self._client = client

        self._api_versions: dict[str, discover.Criterion] = {}
        for service_type, version in (api_versions or {}).items():
            self._api_versions[service_types.get_official_type(
                service_type)] = discover.as_criterion(version)

        self._endpoints: dict[
            tuple[str, ty.Optional[str]], EndpointEntry
        ] = {}
        self._discovery_cache: dict[str, discover.Discover] = {}
        self._locks: dict[tuple[str, ty.Optional[str]], asyncio.Lock] = {}
        self._generation = 0

    async def __aenter__(self) -> 'Session':
        return self

    async def __aexit__(self, *args: ty.Any) -> None:
        await self.close()

    async def close(self) -> None:
        """Close the HTTP client if the session created it."""
        if self._owns_client:
            await self._client.aclose()

    @property
    def client(self) -> httpx.AsyncClient:
        return self._client

    def _http_log_request(
        self,
        url: str,
        method: str,
        headers: ty.Mapping[str, str],
        json_body: ty.Any = None,
    ) -> None:
        if not LOG.isEnabledFor(logging.DEBUG):
            return

        string_parts = ['REQ: curl -g -i', '-X', method, url]

        for header in headers.items():
            string_parts.append('-H "{}: {}"'.format(*_process_header(header)))

        if json_body is not None:
            string_parts.append(f"-d '{json.dumps(json_body)}'")

        LOG.debug(' '.join(string_parts))

    def _http_log_response(self, response: httpx.Response) -> None:
        if not LOG.isEnabledFor(logging.DEBUG):
            return

        string_parts = [
            'RESP:',
            f'[{response.status_code}]',
        ]
        for header in response.headers.items():
            string_parts.append('{}: {}'.format(*_process_header(header)))
        LOG.debug(' '.join(string_parts))

        content_type = response.headers.get('Content-Type', '')
        if content_type.startswith(_LOGGABLE_CONTENT_TYPES):
            LOG.debug('RESP BODY: %s', response.text)
        else:
            LOG.debug('RESP BODY: Omitted, Content-Type is set to %s.',
                      content_type or 'nothing')

    def _require_auth(self) -> 'plugin.BaseAuthPlugin':
        if self.auth is None:
            raise exceptions.MissingAuthPlugin(
                'An auth plugin is required for this operation'
            )
        return self.auth

    async def get_auth_headers(self) -> ty.Optional[dict[str, str]]:
        """Return auth headers as provided by the auth plugin.

        :raises stacksession.exceptions.AuthError: if authentication fails.
        :raises stacksession.exceptions.MissingAuthPlugin: if the session has
            no auth plugin.
        """
        return await self._require_auth().get_headers(self)

    async def request(
        self,
        url: str,
        method: str,
        *,
        headers: ty.Optional[ty.Mapping[str, str]] = None,
        params: ty.Union[str, QueryPairs, ty.Mapping[str, ty.Any], None] = None,
        json: ty.Any = None,
        authenticated: ty.Optional[bool] = None,
        raise_exc: bool = True,
        log: bool = True,
    ) -> httpx.Response:
        """Send an HTTP request to a full URL.

        :param str url: The URL to send the request to.
        :param str method: The HTTP method to use.
        :param dict headers: Headers to include in the request. (optional)
        :param params: Query parameters, pre-encoded or as pairs. (optional)
        :param json: Data to serialize and send as the body. (optional)
        :param bool authenticated: Send the token of the auth plugin.
                                   (optional, defaults to True if a plugin is
                                   available)
        :param bool raise_exc: Raise an HttpError for an error status code.
                               (optional, default True)
        :param bool log: Log the request and response at debug level. Token
                         requests turn this off as the body holds
                         credentials. (optional, default True)

        :raises stacksession.exceptions.RequestError: if the request could not
            be delivered.
        :raises stacksession.exceptions.HttpError: if the service responded
            with an error status and raise_exc is set.
        :returns: The response to the request.
        """
        request_headers = dict(headers or {})

        if authenticated is None:
            authenticated = self.auth is not None

        if authenticated:
            auth_headers = await self.get_auth_headers()
            if auth_headers is None:
                msg = 'No valid authentication is available'
                raise exceptions.AuthError(msg)
            request_headers.update(auth_headers)

        request_headers.setdefault('User-Agent', self.user_agent)

        if log:
            self._http_log_request(url, method, request_headers, json)

        kwargs: dict[str, ty.Any] = {}
        if self.timeout is not None:
            kwargs['timeout'] = self.timeout

        try:
            resp = await self._client.request(
                method,
                url,
                headers=request_headers,
                params=params,
                json=json,
                **kwargs,
            )
        except httpx.TimeoutException as e:
            msg = f'Request to {url} timed out'
            raise exceptions.ConnectTimeout(msg) from e
        except httpx.ConnectError as e:
            msg = f'Unable to establish connection to {url}: {e}'
            raise exceptions.ConnectFailure(msg) from e
        except httpx.TransportError as e:
            msg = f'Unexpected exception for {url}: {e}'
            raise exceptions.UnknownConnectionError(msg, e) from e

        if log:
            self._http_log_response(resp)

        if raise_exc and resp.status_code >= 400:
            LOG.debug('Request returned failure status: %s', resp.status_code)
            raise exceptions.from_response(resp, method, url)

        return resp

    def _region_for(self, region_name: ty.Optional[str]) -> ty.Optional[str]:
        if region_name:
            return region_name
        if self.region_name:
            return self.region_name
        if self.auth is not None:
            return self.auth.region_name
        return None

    def _criterion_for(
        self,
        service_type: str,
        descriptor: service_types.ServiceTypeDescriptor,
    ) -> discover.Criterion:
        try:
            return self._api_versions[descriptor.service_type]
        except KeyError:
            return descriptor.default_criterion(service_type)

    async def _discover_versions(
        self, endpoint: str
    ) -> list[discover.VersionData]:
        last_exc: ty.Optional[Exception] = None

        for url in discover.get_discovery_url_choices(endpoint):
            try:
                disc = await discover.get_discovery(
                    self, url, cache=self._discovery_cache
                )
            except (exceptions.DiscoveryFailure, exceptions.HttpError) as e:
                LOG.debug('No discovery document at %s: %s', url, e)
                last_exc = e
                continue

            versions = disc.version_data(
                allowed_statuses=self.allowed_statuses
            )
            if versions:
                return versions

            LOG.info('Discovery document at %s lists no usable version', url)

        msg = f'Could not find version information for {endpoint}'
        raise exceptions.DiscoveryFailure(msg) from last_exc

    async def _resolve(
        self, key: tuple[str, ty.Optional[str]], generation: int
    ) -> EndpointEntry:
        service_type, region_name = key
        auth = self._require_auth()

        endpoint = await auth.get_endpoint(
            self,
            service_type,
            interface=self.interface,
            region_name=region_name,
        )
        if not endpoint:
            raise exceptions.EndpointNotFound(
                f'Could not find an endpoint for service {service_type}'
            )

        descriptor = service_types.get_descriptor(service_type)
        criterion = self._criterion_for(service_type, descriptor)

        if criterion.requires_discovery:
            advertised = await self._discover_versions(endpoint)
            result = discover.negotiate(criterion, advertised, descriptor)
        else:
            result = discover.NOT_NEGOTIATED

        LOG.debug('Resolved %s in region %s to %s, version %s',
                  service_type, region_name, endpoint, result.version)

        return EndpointEntry(
            key=key,
            endpoint=endpoint,
            version=result.version,
            headers=dict(result.headers),
            generation=generation,
        )

    async def get_endpoint_entry(
        self, service_type: str, region_name: ty.Optional[str] = None
    ) -> EndpointEntry:
        """Resolve the endpoint and API version of a service.

        Concurrent callers asking for the same service and region share one
        resolution. A failed or cancelled resolution publishes nothing, so
        the next caller starts over.

        :param str service_type: The service type or one of its aliases.
        :param str region_name: The region, defaulting to the one of the
                                session or of the auth plugin. (optional)

        :raises stacksession.exceptions.CatalogException: if the catalog has
            no matching endpoint.
        :raises stacksession.exceptions.DiscoveryFailure: if the versions of
            the service cannot be determined.
        :raises stacksession.exceptions.VersionNotSupported: if the service
            supports none of the configured versions.
        """
        key = (service_type, self._region_for(region_name))

        entry = self._endpoints.get(key)
        if entry is not None:
            return entry

        lock = self._locks.setdefault(key, asyncio.Lock())
        async with lock:
            # someone else may have resolved it while we were waiting
            entry = self._endpoints.get(key)
            if entry is not None:
                return entry

            generation = self._generation
            entry = await self._resolve(key, generation)

            # a refresh happened meanwhile, the result belongs to the old
            # credentials
            if generation == self._generation:
                self._endpoints[key] = entry

        return entry

    async def get_endpoint(
        self, service_type: str, region_name: ty.Optional[str] = None
    ) -> str:
        """Return the endpoint of a service."""
        entry = await self.get_endpoint_entry(service_type, region_name)
        return entry.endpoint

    async def get_api_version(
        self, service_type: str, region_name: ty.Optional[str] = None
    ) -> ty.Optional[discover.ApiVersion]:
        """Return the version negotiated with a service.

        :returns: The version or None if no negotiation was performed.
        """
        entry = await self.get_endpoint_entry(service_type, region_name)
        return entry.version

    def set_api_version(self, service_type: str, version: ty.Any) -> None:
        """Configure the versions the caller can work with for a service.

        Entries already resolved for the service are dropped.

        :param str service_type: The service type or one of its aliases.
        :param version: Anything accepted by
                        :func:`stacksession.discover.as_criterion`.
        """
        official = service_types.get_official_type(service_type)
        self._api_versions[official] = discover.as_criterion(version)

        # resolutions in flight negotiated under the old criterion
        self._generation += 1
        for key in list(self._endpoints):
            if service_types.get_official_type(key[0]) == official:
                del self._endpoints[key]

    def set_api_version_headers(
        self,
        headers: ty.MutableMapping[str, str],
        service_type: str,
        version: ty.Union[discover.ApiVersion, str, int, ty.Sequence[int]],
    ) -> None:
        """Insert the headers selecting an API version of a service.

        Nothing is inserted for services that do not select versions by
        header.
        """
        descriptor = service_types.get_descriptor(service_type)
        descriptor.set_version_headers(
            headers, discover.ApiVersion.parse(version)
        )

    def _invalidate_caches(self) -> None:
        self._generation += 1
        self._endpoints.clear()
        self._discovery_cache.clear()

    async def refresh(self) -> None:
        """Authenticate again and forget every resolved endpoint.

        When authentication fails the current token, catalog and resolved
        endpoints are kept.

        :raises stacksession.exceptions.AuthError: if authentication fails.
        """
        await self._require_auth().refresh(self)
        self._invalidate_caches()
        LOG.debug('Session refreshed, generation %d', self._generation)

    async def set_auth_type(self, auth: 'plugin.BaseAuthPlugin') -> None:
        """Replace the auth plugin of the session.

        The new plugin authenticates before it is installed, so a failure
        leaves the session as it was.

        :raises stacksession.exceptions.AuthError: if authentication fails.
        """
        await auth.refresh(self)
        self.auth = auth
        self._invalidate_caches()

    async def with_auth_type(self, auth: 'plugin.BaseAuthPlugin') -> 'Session':
        """Return an authenticated session sharing this one's configuration.

        The HTTP client is shared and stays owned by this session.

        :raises stacksession.exceptions.AuthError: if authentication fails.
        """
        new = type(self)(
            auth=auth,
            client=self._client,
            region_name=self.region_name,
            interface=self.interface,
            allowed_statuses=self.allowed_statuses,
            timeout=self.timeout,
            user_agent=self.user_agent,
        )
        new._api_versions = dict(self._api_versions)
        await new.refresh()
        return new

    async def get(
        self,
        service_type: str,
        path: str,
        *,
        region_name: ty.Optional[str] = None,
        query: ty.Optional[str] = None,
        headers: ty.Optional[ty.Mapping[str, str]] = None,
        raise_exc: bool = True,
    ) -> httpx.Response:
        """Send a GET request to a service.

        :param str service_type: The service type or one of its aliases.
        :param str path: The path relative to the service endpoint.
        :param str region_name: The region of the service. (optional)
        :param str query: A pre-encoded query string, used as is. (optional)
        :param dict headers: Additional headers. The version headers of the
                            service replace headers of the same name.
                            (optional)
        :param bool raise_exc: Raise an HttpError for an error status code.
                               (optional, default True)
        """
        entry = await self.get_endpoint_entry(service_type, region_name)

        url = _join_url(entry.endpoint, path)
        if query:
            separator = '&' if '?' in url else '?'
            url = f"{url}{separator}{query.lstrip('?')}"

        request_headers = _with_version_headers(headers, entry.headers)

        return await self.request(
            url, 'GET', headers=request_headers, raise_exc=raise_exc
        )

    async def get_json(
        self,
        service_type: str,
        path: str,
        *,
        region_name: ty.Optional[str] = None,
        query: ty.Optional[str] = None,
        headers: ty.Optional[ty.Mapping[str, str]] = None,
    ) -> ty.Any:
        """Send a GET request to a service and decode the JSON response.

        :raises stacksession.exceptions.UnexpectedResponse: if the body is not
            JSON.
        """
        request_headers = {'Accept': 'application/json'}
        request_headers.update(headers or {})

        resp = await self.get(
            service_type,
            path,
            region_name=region_name,
            query=query,
            headers=request_headers,
        )
        return self._decode_json(resp)

    async def get_query(
        self,
        service_type: str,
        path: str,
        query: QueryPairs,
        *,
        region_name: ty.Optional[str] = None,
        headers: ty.Optional[ty.Mapping[str, str]] = None,
        raise_exc: bool = True,
    ) -> httpx.Response:
        """Send a GET request with query parameters given as pairs.

        The pairs are encoded in the order given and keys may repeat, e.g.
        ``[('status', 'ACTIVE'), ('status', 'ERROR')]``.
        """
        return await self.get(
            service_type,
            path,
            region_name=region_name,
            query=urllib.parse.urlencode(list(query)),
            headers=headers,
            raise_exc=raise_exc,
        )

    async def get_json_query(
        self,
        service_type: str,
        path: str,
        query: QueryPairs,
        *,
        region_name: ty.Optional[str] = None,
        headers: ty.Optional[ty.Mapping[str, str]] = None,
    ) -> ty.Any:
        """Like :meth:`get_query`, decoding the JSON response."""
        return await self.get_json(
            service_type,
            path,
            region_name=region_name,
            query=urllib.parse.urlencode(list(query)),
            headers=headers,
        )

    @staticmethod
    def _decode_json(resp: httpx.Response) -> ty.Any:
        try:
            return resp.json()
        except ValueError:
            msg = f'Response from {resp.request.url} is not JSON'
            raise exceptions.UnexpectedResponse(msg, response=resp)
