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

"""Version discovery and negotiation.

A deployment advertises the API versions it supports in a discovery
document. A caller states which versions it can work with as a
:class:`Criterion`. :func:`negotiate` reconciles the two and returns the
version to use together with the headers that select it.
"""

import abc
import collections.abc
import functools
import re
import typing as ty
import urllib.parse

from stacksession import _utils as utils
from stacksession import exceptions

if ty.TYPE_CHECKING:
    from stacksession import service_types
    from stacksession import session as ss_session

_LOGGER = utils.get_logger(__name__)

_VERSION_RE = re.compile(r'^v?(\d+)(?:\.(\d+))?$')
_VERSION_SEGMENT_RE = re.compile(r'^v\d+(?:\.\d+)?$')

_RAW_VERSION_T = ty.Union['ApiVersion', str, int, ty.Sequence[int]]

__all__ = (
    'ApiVersion',
    'Status',
    'VersionData',
    'Criterion',
    'AnyVersion',
    'ExactVersion',
    'MinimumVersion',
    'VersionRange',
    'Candidates',
    'ANY_VERSION',
    'as_criterion',
    'NegotiatedVersion',
    'NOT_NEGOTIATED',
    'negotiate',
    'Discover',
    'get_version_data',
    'get_discovery',
    'get_discovery_url_choices',
)


@functools.total_ordering
class ApiVersion:
    """An API version made of a major and an optional minor number.

    A version without a minor number accepts any minor version of its major
    version. It sorts before every minor version of the same major so that
    ordering stays total.

    The following all produce ``ApiVersion(3, 27)``::

      'v3.27', '3.27', (3, 27), [3, 27], ApiVersion(3, 27)

    The following all produce ``ApiVersion(3)``::

      3, '3', 'v3', (3,)
    """

    __slots__ = ('major', 'minor')

    major: int
    minor: ty.Optional[int]

    def __init__(self, major: int, minor: ty.Optional[int] = None):
        if major < 0 or (minor is not None and minor < 0):
            raise ValueError(f'Invalid version {major}.{minor}')
        object.__setattr__(self, 'major', major)
        object.__setattr__(self, 'minor', minor)

    def __setattr__(self, name: str, value: ty.Any) -> None:
        raise AttributeError('ApiVersion is immutable')

    @classmethod
    def parse(cls, value: _RAW_VERSION_T) -> 'ApiVersion':
        """Turn a version representation into an :class:`ApiVersion`.

        :raises TypeError: If the input version cannot be interpreted.
        """
        if isinstance(value, ApiVersion):
            return value

        # bool is an int but never a version
        if isinstance(value, bool):
            raise TypeError(f'Invalid version specified: {value}')

        if isinstance(value, int):
            return cls(value)

        if isinstance(value, str):
            match = _VERSION_RE.match(value.strip())
            if not match:
                raise TypeError(f'Invalid version specified: {value}')
            major, minor = match.groups()
            return cls(int(major), int(minor) if minor is not None else None)

        if isinstance(value, collections.abc.Sequence):
            parts = list(value)
            try:
                if len(parts) == 1:
                    return cls(int(parts[0]))
                if len(parts) == 2:
                    return cls(int(parts[0]), int(parts[1]))
            except (TypeError, ValueError):
                pass

        raise TypeError(f'Invalid version specified: {value}')

    @property
    def _key(self) -> tuple[int, int]:
        return (self.major, -1 if self.minor is None else self.minor)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ApiVersion):
            return NotImplemented
        return self._key == other._key

    def __lt__(self, other: 'ApiVersion') -> bool:
        if not isinstance(other, ApiVersion):
            return NotImplemented
        return self._key < other._key

    def __hash__(self) -> int:
        return hash(self._key)

    def matches(self, other: 'ApiVersion') -> bool:
        """Whether ``other`` is acceptable where this version is requested."""
        if self.major != other.major:
            return False
        return self.minor is None or self.minor == other.minor

    def format(self, prefix: str = '') -> str:
        if self.minor is None:
            return f'{prefix}{self.major}'
        return f'{prefix}{self.major}.{self.minor}'

    def __str__(self) -> str:
        return self.format()

    def __repr__(self) -> str:
        return f'ApiVersion({self.major}, {self.minor})'


class Status:
    CURRENT = 'CURRENT'
    SUPPORTED = 'SUPPORTED'
    DEPRECATED = 'DEPRECATED'
    EXPERIMENTAL = 'EXPERIMENTAL'
    UNKNOWN = 'UNKNOWN'
    KNOWN = (CURRENT, SUPPORTED, DEPRECATED, EXPERIMENTAL)

    @classmethod
    def normalize(cls, raw_status: ty.Optional[str]) -> str:
        """Turn a status into a canonical status value.

        If the status from the version discovery document does not match one
        of the known values, it will be set to 'UNKNOWN'.

        :param str raw_status: Status value from a discovery document.

        :returns: A canonicalized version of the status. Valid values
                  are CURRENT, SUPPORTED, DEPRECATED, EXPERIMENTAL and UNKNOWN
        :rtype: str
        """
        status = (raw_status or '').upper()
        if status == 'STABLE':
            status = cls.CURRENT
        if status not in cls.KNOWN:
            status = cls.UNKNOWN
        return status


class VersionData:
    """One version advertised by a discovery document.

    An entry advertises its own ``id``. When it also declares a microversion
    range (``min_version`` and ``version`` or ``max_version``) it advertises
    every version inside that range.
    """

    def __init__(
        self,
        version: ApiVersion,
        status: str = Status.CURRENT,
        raw_status: ty.Optional[str] = None,
        url: ty.Optional[str] = None,
        min_microversion: ty.Optional[ApiVersion] = None,
        max_microversion: ty.Optional[ApiVersion] = None,
    ):
        self.version = version
        self.status = status
        self.raw_status = raw_status
        self.url = url
        self.min_microversion = min_microversion
        self.max_microversion = max_microversion

    @classmethod
    def from_dict(
        cls, data: ty.Mapping[str, ty.Any], base_url: ty.Optional[str] = None
    ) -> 'VersionData':
        """Build from a discovery document entry.

        :raises TypeError: if the entry has no ``id``.
        :raises ValueError: if the ``id`` is not a valid version.
        """
        try:
            version = ApiVersion.parse(data['id'])
        except KeyError:
            raise TypeError('Version data is missing an id')

        # Some documents carry *version keys with "" values; treat those the
        # same as absent keys.
        min_microversion = data.get('min_version') or None
        max_microversion = (
            data.get('max_version') or data.get('version') or None
        )
        if min_microversion:
            min_microversion = ApiVersion.parse(min_microversion)
        if max_microversion:
            max_microversion = ApiVersion.parse(max_microversion)

        url = None
        for link in data.get('links', []) or []:
            try:
                if link['rel'].lower() == 'self':
                    url = link['href']
                    break
            except (KeyError, TypeError, AttributeError):
                continue
        if url and base_url:
            url = urllib.parse.urljoin(base_url.rstrip('/') + '/', url)

        return cls(
            version=version,
            status=Status.normalize(data.get('status')),
            raw_status=data.get('status'),
            url=url,
            min_microversion=min_microversion,
            max_microversion=max_microversion,
        )

    @property
    def lowest(self) -> ApiVersion:
        if self.min_microversion and self.max_microversion:
            return self.min_microversion
        return self.version

    @property
    def highest(self) -> ApiVersion:
        if self.min_microversion and self.max_microversion:
            return self.max_microversion
        return self.version

    def supports(self, version: ApiVersion) -> bool:
        """Whether this entry advertises exactly ``version``."""
        return self.lowest <= version <= self.highest

    def highest_of_major(self, major: int) -> ty.Optional[ApiVersion]:
        if self.highest.major == major:
            return self.highest
        if self.lowest.major == major:
            return self.lowest
        return None

    def __str__(self) -> str:
        if self.lowest == self.highest:
            return self.version.format('v')
        return f'{self.version.format("v")} ({self.lowest}-{self.highest})'

    def __repr__(self) -> str:
        return (
            f'VersionData(version={self.version!r}, status={self.status}, '
            f'lowest={self.lowest!r}, highest={self.highest!r})'
        )


def _highest(
    versions: ty.Iterable[ty.Optional[ApiVersion]],
) -> ty.Optional[ApiVersion]:
    found = [v for v in versions if v is not None]
    return max(found) if found else None


def _within_upper(version: ApiVersion, upper: ApiVersion) -> bool:
    # An upper bound without minor covers every minor of its major.
    if upper.minor is None:
        return version.major <= upper.major
    return version <= upper


class Criterion(metaclass=abc.ABCMeta):
    """The versions a caller is able to work with."""

    #: Whether satisfying the criterion needs the discovery document.
    requires_discovery = True

    @abc.abstractmethod
    def select(
        self, advertised: ty.Sequence[VersionData]
    ) -> ty.Optional[ApiVersion]:
        """Pick the best advertised version or None when nothing matches."""


class AnyVersion(Criterion):
    """No preference: the service's default behaviour is used."""

    requires_discovery = False

    def select(
        self, advertised: ty.Sequence[VersionData]
    ) -> ty.Optional[ApiVersion]:
        return _highest(d.highest for d in advertised)

    def __eq__(self, other: object) -> bool:
        return isinstance(other, AnyVersion)

    def __hash__(self) -> int:
        return hash(AnyVersion)

    def __str__(self) -> str:
        return 'any'

    def __repr__(self) -> str:
        return 'AnyVersion()'


ANY_VERSION = AnyVersion()


class ExactVersion(Criterion):
    """Exactly the given version.

    A version without minor accepts the highest advertised minor version of
    its major version.
    """

    def __init__(self, version: _RAW_VERSION_T):
        self.version = ApiVersion.parse(version)

    def select(
        self, advertised: ty.Sequence[VersionData]
    ) -> ty.Optional[ApiVersion]:
        if self.version.minor is None:
            return _highest(
                d.highest_of_major(self.version.major) for d in advertised
            )
        if any(d.supports(self.version) for d in advertised):
            return self.version
        return None

    def __eq__(self, other: object) -> bool:
        return (
            isinstance(other, ExactVersion) and self.version == other.version
        )

    def __hash__(self) -> int:
        return hash((ExactVersion, self.version))

    def __str__(self) -> str:
        return self.version.format('v')

    def __repr__(self) -> str:
        return f'ExactVersion({self.version!r})'


class MinimumVersion(Criterion):
    """The highest advertised version not lower than the given one."""

    def __init__(self, version: _RAW_VERSION_T):
        self.version = ApiVersion.parse(version)

    def select(
        self, advertised: ty.Sequence[VersionData]
    ) -> ty.Optional[ApiVersion]:
        return _highest(
            d.highest for d in advertised if d.highest >= self.version
        )

    def __eq__(self, other: object) -> bool:
        return (
            isinstance(other, MinimumVersion)
            and self.version == other.version
        )

    def __hash__(self) -> int:
        return hash((MinimumVersion, self.version))

    def __str__(self) -> str:
        return f'>= {self.version}'

    def __repr__(self) -> str:
        return f'MinimumVersion({self.version!r})'


class VersionRange(Criterion):
    """The highest advertised version within ``[minimum, maximum]``.

    A maximum without minor covers every minor version of its major version.
    """

    def __init__(self, minimum: _RAW_VERSION_T, maximum: _RAW_VERSION_T):
        self.minimum = ApiVersion.parse(minimum)
        self.maximum = ApiVersion.parse(maximum)
        if not _within_upper(self.minimum, self.maximum):
            raise ValueError('minimum cannot be greater than maximum')

    def _top(self, data: VersionData) -> ty.Optional[ApiVersion]:
        if _within_upper(data.highest, self.maximum):
            top = data.highest
        elif self.maximum.minor is not None and data.supports(self.maximum):
            top = self.maximum
        else:
            return None

        if top < self.minimum:
            return None
        return top

    def select(
        self, advertised: ty.Sequence[VersionData]
    ) -> ty.Optional[ApiVersion]:
        return _highest(self._top(d) for d in advertised)

    def __eq__(self, other: object) -> bool:
        return (
            isinstance(other, VersionRange)
            and self.minimum == other.minimum
            and self.maximum == other.maximum
        )

    def __hash__(self) -> int:
        return hash((VersionRange, self.minimum, self.maximum))

    def __str__(self) -> str:
        return f'[{self.minimum}, {self.maximum}]'

    def __repr__(self) -> str:
        return f'VersionRange({self.minimum!r}, {self.maximum!r})'


class Candidates(Criterion):
    """Several acceptable versions in order of preference.

    The first candidate the deployment advertises wins. An empty list of
    candidates means no negotiation at all.
    """

    def __init__(self, candidates: ty.Iterable[_RAW_VERSION_T]):
        self.candidates = tuple(ApiVersion.parse(c) for c in candidates)

    @property
    def requires_discovery(self) -> bool:  # type: ignore[override]
        return bool(self.candidates)

    def select(
        self, advertised: ty.Sequence[VersionData]
    ) -> ty.Optional[ApiVersion]:
        for candidate in self.candidates:
            found = ExactVersion(candidate).select(advertised)
            if found is not None:
                return found
        return None

    def __eq__(self, other: object) -> bool:
        return (
            isinstance(other, Candidates)
            and self.candidates == other.candidates
        )

    def __hash__(self) -> int:
        return hash((Candidates, self.candidates))

    def __str__(self) -> str:
        return 'one of ({})'.format(
            ', '.join(str(c) for c in self.candidates)
        )

    def __repr__(self) -> str:
        return f'Candidates({list(self.candidates)!r})'


def as_criterion(
    value: ty.Union[Criterion, _RAW_VERSION_T, ty.Iterable[_RAW_VERSION_T], None],
) -> Criterion:
    """Coerce a loose version requirement into a :class:`Criterion`.

    ``None`` means any version, a single version means that exact version
    and a list means candidates in order of preference. A tuple is read as a
    single version, as in ``(3, 27)``.
    """
    if value is None:
        return ANY_VERSION
    if isinstance(value, Criterion):
        return value
    if isinstance(value, (ApiVersion, str, int, tuple)):
        return ExactVersion(value)
    if isinstance(value, collections.abc.Iterable):
        return Candidates(value)
    raise TypeError(f'Invalid version requirement: {value!r}')


class NegotiatedVersion(ty.NamedTuple):
    """The outcome of a negotiation.

    ``version`` is None when no negotiation was performed, in which case no
    version headers are sent and the service uses its default version.
    """

    version: ty.Optional[ApiVersion]
    headers: ty.Mapping[str, str]

    @property
    def negotiated(self) -> bool:
        return self.version is not None


NOT_NEGOTIATED = NegotiatedVersion(None, {})


def negotiate(
    criterion: Criterion,
    advertised: ty.Sequence[VersionData],
    descriptor: ty.Optional['service_types.ServiceTypeDescriptor'] = None,
) -> NegotiatedVersion:
    """Reconcile a criterion with the versions a deployment advertises.

    Among several matching versions the highest one wins; the status of the
    advertised versions plays no part unless the caller filtered them first.

    :param criterion: What the caller can work with.
    :param advertised: The advertised versions, in any order.
    :param descriptor: Provides the headers that select a version. Without it
        the result carries no headers.

    :raises stacksession.exceptions.VersionNotSupported: if nothing matches.
    """
    if isinstance(criterion, Candidates) and not criterion.candidates:
        return NOT_NEGOTIATED

    version = criterion.select(advertised)

    if version is None:
        if isinstance(criterion, AnyVersion):
            return NOT_NEGOTIATED
        service_type = descriptor.service_type if descriptor else None
        raise exceptions.VersionNotSupported(
            criterion,
            sorted(advertised, key=lambda d: d.highest),
            service_type=service_type,
        )

    headers: dict[str, str] = {}
    if descriptor is not None:
        descriptor.set_version_headers(headers, version)

    return NegotiatedVersion(version, headers)


def _data_from_body(
    body: ty.Any, response_headers: ty.Mapping[str, str]
) -> ty.Optional[list[dict[str, ty.Any]]]:
    if isinstance(body, list):
        if all(isinstance(v, dict) and 'id' in v for v in body):
            return body
        # e.g. an object storage account listing rather than versions
        raise exceptions.DiscoveryFailure(
            'Invalid Response - List returned without version data'
        )

    if not isinstance(body, dict):
        return None

    # In the event of querying a root URL we will get back a list of
    # available versions.
    try:
        return ty.cast(list[dict[str, ty.Any]], body['versions']['values'])
    except (KeyError, TypeError):
        pass

    # Most servers don't have a 'values' element so accept a simple
    # versions list if available.
    if isinstance(body.get('versions'), list):
        return ty.cast(list[dict[str, ty.Any]], body['versions'])

    # Otherwise if we query an endpoint like /v2.0 then we will get back
    # just the one available version.
    if isinstance(body.get('version'), dict):
        return [ty.cast(dict[str, ty.Any], body['version'])]

    # Some services report their microversion range in headers only.
    if 'id' in body:
        body['status'] = Status.CURRENT
        for header, value in response_headers.items():
            header = header.lower()
            if not header.startswith('x-openstack'):
                continue
            if header.endswith('api-minimum-version'):
                body.setdefault('min_version', value)
            if header.endswith('api-maximum-version'):
                body.setdefault('version', value)
        return [body]

    return None


async def get_version_data(
    session: 'ss_session.Session',
    url: str,
    authenticated: ty.Optional[bool] = None,
) -> list[dict[str, ty.Any]]:
    """Retrieve raw version data from a url.

    The return is a list of dicts of the form::

      [
          {
              'status': 'CURRENT',
              'id': 'v3.27',
              'links': [
                  {'href': 'http://volume.example.com/v3', 'rel': 'self'},
              ],
          },
          ...,
      ]

    :param session: A Session object that can be used for communication.
    :param string url: Endpoint or discovery URL from which to retrieve data.
    :param bool authenticated: Include a token in the discovery call.
                               (optional) Defaults to None, which sends a
                               token if the session has an auth plugin.

    :raises stacksession.exceptions.DiscoveryFailure: if the response is not
        a discovery document.
    :raises stacksession.exceptions.HttpError: An error from an invalid HTTP
        response.
    :return: A list of dicts containing version information.
    :rtype: list(dict)
    """
    headers = {'Accept': 'application/json'}
    resp = await session.request(
        url, 'GET', headers=headers, authenticated=authenticated
    )

    try:
        body_resp = resp.json()
    except ValueError:
        pass
    else:
        data = _data_from_body(body_resp, resp.headers)
        if data is not None:
            return data

    text = resp.text
    err_text = text[:50] + '...' if len(text) > 50 else text
    raise exceptions.DiscoveryFailure(
        f'Invalid Response - Bad version data returned: {err_text}'
    )


class Discover:
    """The parsed discovery document of one URL."""

    def __init__(self, url: str, data: ty.Sequence[ty.Mapping[str, ty.Any]]):
        self._url = url
        self._data = data

    @classmethod
    async def fetch(
        cls,
        session: 'ss_session.Session',
        url: str,
        authenticated: ty.Optional[bool] = None,
    ) -> 'Discover':
        data = await get_version_data(
            session, url, authenticated=authenticated
        )
        return cls(url, data)

    @property
    def url(self) -> str:
        return self._url

    def raw_version_data(self) -> ty.Sequence[ty.Mapping[str, ty.Any]]:
        return self._data

    def version_data(
        self, allowed_statuses: ty.Optional[ty.Collection[str]] = None
    ) -> list[VersionData]:
        """Get normalized version data, lowest version first.

        :param allowed_statuses: Only keep versions with one of these
            canonical statuses. All versions are kept by default.
        :rtype: list(VersionData)
        """
        allowed = None
        if allowed_statuses is not None:
            allowed = {Status.normalize(s) for s in allowed_statuses}

        versions = []
        for v in self._data:
            try:
                data = VersionData.from_dict(v, base_url=self._url)
            except (TypeError, ValueError) as e:
                _LOGGER.info('Skipping invalid version data: %s', e)
                continue

            if allowed is not None and data.status not in allowed:
                continue

            versions.append(data)

        versions.sort(key=lambda d: (d.version, d.highest))
        return versions


def get_discovery_url_choices(url: str) -> list[str]:
    """URLs to try for discovery of a catalog endpoint, most specific first.

    Catalog endpoints are often versioned and may carry a project id, e.g.
    ``https://volume.example.com/v3/<project>``. The discovery document
    listing every version lives at the unversioned root of such a URL.
    """
    choices = [url]

    parsed = urllib.parse.urlparse(url)
    segments = parsed.path.rstrip('/').split('/')
    for index in range(len(segments) - 1, -1, -1):
        if _VERSION_SEGMENT_RE.match(segments[index]):
            root_path = '/'.join(segments[:index]) + '/'
            root = urllib.parse.urlunparse(
                (parsed.scheme, parsed.netloc, root_path, '', '', '')
            )
            if root.rstrip('/') != url.rstrip('/'):
                choices.append(root)
            break

    return choices


def _normalize_cache_url(url: str) -> str:
    # https://example.com and https://example.com/ are the same document
    parsed = urllib.parse.urlparse(url)
    if parsed.path in ('', '/'):
        return parsed._replace(path='').geturl()
    return url


async def get_discovery(
    session: 'ss_session.Session',
    url: str,
    cache: ty.Optional[dict[str, Discover]] = None,
    authenticated: ty.Optional[bool] = None,
) -> Discover:
    """Return the discovery object for a URL.

    Check the cache to see if we have already performed discovery on the URL
    and if so return it, otherwise fetch the document and cache it.

    :param session: A session object to discover with.
    :param str url: The url to lookup.
    :param dict cache: A dict used for caching results.

    :raises stacksession.exceptions.DiscoveryFailure:
        if for some reason the lookup fails.
    :raises stacksession.exceptions.HttpError:
        An error from an invalid HTTP response.
    """
    key = _normalize_cache_url(url)

    if cache is not None:
        disc = cache.get(key)
        if disc is not None:
            return disc

    disc = await Discover.fetch(session, url, authenticated=authenticated)

    if cache is not None:
        cache[key] = disc

    return disc
