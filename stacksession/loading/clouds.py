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

"""Loading sessions from a ``clouds.yaml`` file.

Only the parts of the file format that describe authentication, the region
and API versions are read::

    clouds:
      mycloud:
        auth_type: password
        auth:
          auth_url: https://keystone.example.com/v3
          username: demo
          password: secret
          project_name: demo
        region_name: RegionOne
        interface: public
        block_storage_api_version: "3.0+"
"""

import os
import pathlib
import typing as ty

import yaml

from stacksession import _utils as utils
from stacksession import discover
from stacksession import exceptions
from stacksession.loading import base
from stacksession.loading import opts
from stacksession.loading import session as loading_session

if ty.TYPE_CHECKING:
    from stacksession import plugin
    from stacksession import session

LOG = utils.get_logger(__name__)

__all__ = (
    'find_config',
    'get_cloud',
    'load_auth_from_cloud',
    'load_session_from_clouds_yaml',
)

CONFIG_FILE_ENV = 'OS_CLIENT_CONFIG_FILE'
CLOUD_ENV = 'OS_CLOUD'
DEFAULT_DOMAIN = 'Default'

_API_VERSION_SUFFIX = '_api_version'


def get_config_locations() -> list[pathlib.Path]:
    """Where ``clouds.yaml`` is looked for, in order."""
    return [
        pathlib.Path.cwd() / 'clouds.yaml',
        pathlib.Path.home() / '.config' / 'openstack' / 'clouds.yaml',
        pathlib.Path('/etc/openstack/clouds.yaml'),
    ]


def find_config(
    environ: ty.Optional[ty.Mapping[str, str]] = None,
) -> ty.Optional[pathlib.Path]:
    """Return the ``clouds.yaml`` to use, if any.

    ``OS_CLIENT_CONFIG_FILE`` takes precedence over the usual locations.
    """
    if environ is None:
        environ = os.environ

    explicit = environ.get(CONFIG_FILE_ENV)
    if explicit:
        return pathlib.Path(explicit)

    for path in get_config_locations():
        if path.is_file():
            return path

    return None


def _load_yaml(path: pathlib.Path) -> ty.Any:
    try:
        with open(path) as f:
            return yaml.safe_load(f) or {}
    except OSError as e:
        raise exceptions.CloudConfigError(f'Cannot read {path}: {e}')
    except yaml.YAMLError as e:
        raise exceptions.CloudConfigError(f'Cannot parse {path}: {e}')


def get_cloud(
    cloud_name: ty.Optional[str] = None,
    path: ty.Union[str, pathlib.Path, None] = None,
    environ: ty.Optional[ty.Mapping[str, str]] = None,
) -> dict[str, ty.Any]:
    """Return the configuration of one cloud.

    :param str cloud_name: The cloud to read, defaults to ``OS_CLOUD``.
    :param path: The file to read, found with :func:`find_config` if not
                 given.

    :raises stacksession.exceptions.CloudConfigError: if there is no file,
        it cannot be parsed or does not have the cloud.
    """
    if environ is None:
        environ = os.environ

    cloud_name = cloud_name or environ.get(CLOUD_ENV)
    if not cloud_name:
        raise exceptions.CloudConfigError(
            f'No cloud name given and {CLOUD_ENV} is not set'
        )

    config_path = pathlib.Path(path) if path else find_config(environ)
    if config_path is None:
        raise exceptions.CloudConfigError(
            'clouds.yaml was not found in any location'
        )

    clouds = _load_yaml(config_path).get('clouds')
    if not isinstance(clouds, dict):
        raise exceptions.CloudConfigError(f'{config_path} lists no clouds')

    try:
        cloud = clouds[cloud_name]
    except KeyError:
        raise exceptions.CloudConfigError(
            f'No such cloud in {config_path}: {cloud_name}'
        )

    if not isinstance(cloud, dict) or not isinstance(
        cloud.get('auth', {}), dict
    ):
        raise exceptions.CloudConfigError(
            f'Invalid configuration of cloud {cloud_name}'
        )

    LOG.debug('Using cloud %s from %s', cloud_name, config_path)
    return cloud


def load_auth_from_cloud(
    cloud: ty.Mapping[str, ty.Any], **kwargs: ty.Any
) -> 'plugin.BaseAuthPlugin':
    """Load the auth plugin of a cloud configuration.

    ``auth_type`` defaults to ``password``. A user given by name without a
    domain is looked up in the ``Default`` domain.
    """
    auth = dict(cloud.get('auth') or {})
    if auth.get('username') and not (
        auth.get('user_domain_name') or auth.get('user_domain_id')
    ):
        auth['user_domain_name'] = DEFAULT_DOMAIN

    loader = base.get_plugin_loader(cloud.get('auth_type') or 'password')

    def _getter(opt: opts.Opt) -> ty.Any:
        for name in opt.names:
            value = auth.get(name.replace('-', '_'))
            if value is not None:
                return value
        return opt.default

    return ty.cast(
        'plugin.BaseAuthPlugin',
        loader.load_from_options_getter(_getter, **kwargs),
    )


def _api_versions(
    cloud: ty.Mapping[str, ty.Any],
) -> dict[str, discover.Criterion]:
    versions = {}
    for key, value in cloud.items():
        if not key.endswith(_API_VERSION_SUFFIX) or value is None:
            continue
        service_type = key[: -len(_API_VERSION_SUFFIX)].replace('_', '-')
        versions[service_type] = loading_session.parse_criterion(str(value))
    return versions


def load_session_from_clouds_yaml(
    cloud_name: ty.Optional[str] = None,
    path: ty.Union[str, pathlib.Path, None] = None,
    environ: ty.Optional[ty.Mapping[str, str]] = None,
    **kwargs: ty.Any,
) -> 'session.Session':
    """Create an authenticating session for a cloud of ``clouds.yaml``.

    ``region_name``, ``interface``, ``api_timeout`` and
    ``<service_type>_api_version`` keys of the cloud configure the session.

    :param kwargs: Session arguments that take precedence over the file,
                   e.g. ``client``.
    """
    cloud = get_cloud(cloud_name, path=path, environ=environ)

    kwargs.setdefault('auth', load_auth_from_cloud(cloud))
    kwargs.setdefault('region_name', cloud.get('region_name'))
    kwargs.setdefault('interface', cloud.get('interface') or 'public')
    kwargs.setdefault('timeout', cloud.get('api_timeout'))
    kwargs.setdefault('api_versions', _api_versions(cloud))

    return loading_session.Session().load_from_options(**kwargs)
