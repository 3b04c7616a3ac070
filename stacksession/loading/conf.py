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

"""Loading auth plugins and sessions from oslo.config.

A config group names the plugin with ``auth_type``. ``auth_section`` may
point at another group holding ``auth_type`` and the plugin's options::

    [api]
    auth_section = cloud_auth

    [cloud_auth]
    auth_type = password
    auth_url = https://keystone.example.com/v3
    ...
"""

import typing as ty

from oslo_config import cfg

from stacksession import _utils as utils
from stacksession.loading import base
from stacksession.loading import opts

if ty.TYPE_CHECKING:
    from stacksession import plugin

LOG = utils.get_logger(__name__)

__all__ = (
    'get_common_conf_options',
    'get_plugin_conf_options',
    'register_conf_options',
    'load_from_conf_options',
)

_AUTH_TYPE = opts.Opt(
    'auth_type',
    deprecated=[opts.Opt('auth_plugin')],
    help='Authentication type to load',
)
_AUTH_SECTION = opts.Opt(
    'auth_section',
    help='Config Section from which to load plugin specific options',
)

DeprecatedOpts = ty.Mapping[str, list[cfg.DeprecatedOpt]]


def to_oslo_opts(
    options: ty.Iterable[opts.Opt],
    deprecated_opts: ty.Optional[DeprecatedOpts] = None,
) -> list[cfg.Opt]:
    """Convert options, adding deprecated aliases keyed by option name."""
    deprecated_opts = deprecated_opts or {}
    return [o._to_oslo_opt(deprecated_opts.get(o.name)) for o in options]


def register_opts(
    conf: cfg.ConfigOpts,
    group: str,
    options: ty.Iterable[opts.Opt],
    deprecated_opts: ty.Optional[DeprecatedOpts] = None,
) -> list[cfg.Opt]:
    oslo_opts = to_oslo_opts(options, deprecated_opts)
    conf.register_opts(oslo_opts, group=group)
    return oslo_opts


def opts_getter(
    conf: cfg.ConfigOpts, group: str
) -> ty.Callable[[opts.Opt], ty.Any]:
    """A getter for :meth:`BaseLoader.load_from_options_getter`."""

    def _getter(opt: opts.Opt) -> ty.Any:
        return conf[group][opt.dest]

    return _getter


def _auth_group(conf: cfg.ConfigOpts, group: str) -> str:
    return ty.cast(str, conf[group].auth_section or group)


def get_common_conf_options() -> list[cfg.Opt]:
    """The ``auth_type`` and ``auth_section`` options, unregistered."""
    return to_oslo_opts([_AUTH_TYPE, _AUTH_SECTION])


def get_plugin_conf_options(
    plugin: ty.Union[base.BaseLoader[ty.Any], str],
) -> list[cfg.Opt]:
    """The oslo.config options of a plugin, by loader or by name."""
    if isinstance(plugin, str):
        return to_oslo_opts(base.get_plugin_options(plugin))
    return to_oslo_opts(plugin.get_options())


def register_conf_options(conf: cfg.ConfigOpts, group: str) -> None:
    """Register ``auth_section`` and ``auth_type``.

    ``auth_type`` goes into the group ``auth_section`` points at, if set.
    The options of the plugin itself are registered when it is loaded.

    :param conf: config object to register with.
    :type conf: oslo_config.cfg.ConfigOpts
    :param string group: The ini group to register options in.
    """
    conf.register_opt(_AUTH_SECTION._to_oslo_opt(), group=group)
    conf.register_opt(
        _AUTH_TYPE._to_oslo_opt(), group=_auth_group(conf, group)
    )


def load_from_conf_options(
    conf: cfg.ConfigOpts, group: str, **kwargs: ty.Any
) -> ty.Optional['plugin.BaseAuthPlugin']:
    """Load the plugin a config group names.

    :func:`register_conf_options` must have been called for the group.

    :param conf: A conf object.
    :type conf: oslo_config.cfg.ConfigOpts
    :param str group: The group name that options should be read from.
    :param kwargs: Plugin arguments that take precedence over the config.

    :returns: An authentication plugin or None if no ``auth_type`` is set.

    :raises stacksession.exceptions.NoMatchingPlugin: if the plugin cannot be
        found.
    :raises stacksession.exceptions.MissingRequiredOptions: if a required
        option is not set.
    """
    group = _auth_group(conf, group)

    name = conf[group].auth_type
    if not name:
        return None

    LOG.debug('Loading auth plugin %s from config group %s', name, group)
    loader = base.get_plugin_loader(name)
    register_opts(conf, group, loader.get_options())

    return ty.cast(
        'plugin.BaseAuthPlugin',
        loader.load_from_options_getter(opts_getter(conf, group), **kwargs),
    )
