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

import collections.abc
import typing as ty

from oslo_config import cfg

from stacksession import discover
from stacksession.loading import base
from stacksession.loading import conf as loading_conf
from stacksession.loading import env
from stacksession.loading import opts
from stacksession import session


__all__ = (
    'register_conf_options',
    'load_from_conf_options',
    'load_from_environ',
    'get_conf_options',
    'parse_criterion',
    'api_versions',
)


def parse_criterion(value: str) -> discover.Criterion:
    """Read a version requirement written in a config file.

    ``any`` accepts any version, ``3.0+`` means at least 3.0, ``3.0-3.27``
    a range, ``2.1|2.0`` candidates in order of preference, and anything
    else one exact version.

    :raises TypeError: if a version is not valid.
    """
    value = value.strip()
    if value.lower() == 'any':
        return discover.ANY_VERSION
    if value.endswith('+'):
        return discover.MinimumVersion(value[:-1])
    if '|' in value:
        return discover.Candidates(v.strip() for v in value.split('|'))
    if '-' in value:
        minimum, maximum = value.split('-', 1)
        return discover.VersionRange(minimum.strip(), maximum.strip())
    return discover.ExactVersion(value)


def api_versions(
    value: ty.Union[str, ty.Mapping[str, ty.Any]],
) -> dict[str, discover.Criterion]:
    """Option type for ``service-type=requirement,...`` values.

    e.g. ``block-storage=3.0+,compute=2.1-2.90,image=2``.
    """
    if isinstance(value, collections.abc.Mapping):
        items = list(value.items())
    else:
        items = []
        for item in opts.comma_list(value):
            service_type, sep, version = item.partition('=')
            if not sep:
                raise ValueError(f'Expected service-type=version: {item}')
            items.append((service_type.strip(), version))

    return {
        service_type: (
            parse_criterion(version)
            if isinstance(version, str)
            else discover.as_criterion(version)
        )
        for service_type, version in items
    }


class Session(base._BaseLoader[session.Session]):
    @property
    def plugin_class(self) -> ty.Type[session.Session]:
        return session.Session

    def get_options(self) -> list[opts.Opt]:
        return [
            opts.Opt('region-name', help='The default region of services.'),
            opts.Opt(
                'interface',
                default='public',
                help='The catalog interface of service endpoints.',
            ),
            opts.Opt(
                'timeout',
                type=float,
                help='Timeout value for http requests',
            ),
            opts.Opt('user-agent', help='The User-Agent header of requests.'),
            opts.Opt(
                'api-versions',
                type=api_versions,
                help='Versions to negotiate per service type, e.g. '
                'block-storage=3.0+,compute=2.1-2.90',
            ),
            opts.Opt(
                'allowed-statuses',
                type=opts.comma_list,
                help='Only negotiate versions with one of these statuses, '
                'e.g. current,supported',
            ),
        ]

    def get_conf_options(
        self,
        deprecated_opts: ty.Optional[loading_conf.DeprecatedOpts] = None,
    ) -> list[cfg.Opt]:
        """Get oslo_config options that are needed for a :py:class:`.Session`.

        :param dict deprecated_opts: Deprecated options that should be included
             in the definition of new options. This should be a dict from the
             name of the new option to a list of oslo.DeprecatedOpts that
             correspond to the new option. (optional)

             For example, to support the ``os_region_name`` option pointing to
             the new ``region-name`` option name::

                 old_opt = oslo_cfg.DeprecatedOpt('os_region_name', 'old_group')
                 deprecated_opts = {'region-name': [old_opt]}

        :returns: A list of oslo_config options.
        """
        return loading_conf.to_oslo_opts(self.get_options(), deprecated_opts)

    def register_conf_options(
        self,
        conf: cfg.ConfigOpts,
        group: str,
        deprecated_opts: ty.Optional[loading_conf.DeprecatedOpts] = None,
    ) -> list[cfg.Opt]:
        """Register the oslo_config options that are needed for a session.

        :returns: The list of options that was registered.
        """
        return loading_conf.register_opts(
            conf, group, self.get_options(), deprecated_opts
        )

    def load_from_conf_options(
        self, conf: cfg.ConfigOpts, group: str, **kwargs: ty.Any
    ) -> session.Session:
        """Create a session object from an oslo_config object.

        The options must have been previously registered with
        register_conf_options.

        :param dict kwargs: Additional parameters to pass to session
                            construction, e.g. ``auth``.
        """
        return self.load_from_options_getter(
            loading_conf.opts_getter(conf, group), **kwargs
        )

    def load_from_environ(
        self,
        environ: ty.Optional[ty.Mapping[str, str]] = None,
        **kwargs: ty.Any,
    ) -> session.Session:
        """Create a session object from ``OS_*`` environment variables.

        e.g. ``OS_REGION_NAME``, ``OS_TIMEOUT`` or ``OS_API_VERSIONS``.
        """

        def _getter(opt: opts.Opt) -> ty.Any:
            return env.get_env_value(opt, environ)

        return self.load_from_options_getter(_getter, **kwargs)


def register_conf_options(
    conf: cfg.ConfigOpts,
    group: str,
    deprecated_opts: ty.Optional[loading_conf.DeprecatedOpts] = None,
) -> list[cfg.Opt]:
    return Session().register_conf_options(
        conf, group, deprecated_opts=deprecated_opts
    )


def load_from_conf_options(
    conf: cfg.ConfigOpts, group: str, **kwargs: ty.Any
) -> session.Session:
    return Session().load_from_conf_options(conf, group, **kwargs)


def load_from_environ(
    environ: ty.Optional[ty.Mapping[str, str]] = None, **kwargs: ty.Any
) -> session.Session:
    return Session().load_from_environ(environ, **kwargs)


def get_conf_options(
    deprecated_opts: ty.Optional[loading_conf.DeprecatedOpts] = None,
) -> list[cfg.Opt]:
    return Session().get_conf_options(deprecated_opts=deprecated_opts)
