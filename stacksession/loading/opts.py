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

import dataclasses
import os
import typing as ty

from oslo_config import cfg

__all__ = ('Opt', 'comma_list')


def comma_list(value: ty.Union[str, ty.Iterable[str]]) -> list[str]:
    """Option type for ``a,b,c`` values.

    Values that are already sequences, as oslo.config hands back for list
    options, are taken as they are.
    """
    if isinstance(value, str):
        items: ty.Iterable[str] = value.split(',')
    else:
        items = value
    return [item.strip() for item in items if item.strip()]


@dataclasses.dataclass(frozen=True, repr=False)
class Opt:
    """A parameter that can be loaded from the environment or a config file.

    Both authentication plugins and sessions describe their constructor
    parameters with these. An option named ``user-domain-id`` is passed as
    ``user_domain_id``, read from the ``OS_USER_DOMAIN_ID`` environment
    variable and registered with oslo.config as ``user-domain-id``.

    :param str name: The name of the option, words separated by ``-``.
    :param callable type: Turns a raw value, usually a string, into what the
        constructor expects.
    :param str help: The help text of the option.
    :param bool secret: The value must not be logged.
    :param str dest: The constructor argument, defaults to ``name`` with
        ``_`` for ``-``.
    :param deprecated: Older options this one replaces. They are still read.
    :type deprecated: list(Opt)
    :param default: The value used when none is configured.
    :param bool required: Loading fails when no value is configured.
    """

    name: str
    type: ty.Callable[[ty.Any], ty.Any] = str
    help: ty.Optional[str] = None
    secret: bool = False
    dest: ty.Optional[str] = None
    deprecated: ty.Sequence['Opt'] = ()
    default: ty.Any = None
    required: bool = False

    def __post_init__(self) -> None:
        if not callable(self.type):
            raise TypeError('type must be callable')

        if self.dest is None:
            object.__setattr__(self, 'dest', self.name.replace('-', '_'))
        object.__setattr__(self, 'deprecated', tuple(self.deprecated))

    def __repr__(self) -> str:
        return f'<Opt: {self.name}>'

    @property
    def names(self) -> list[str]:
        """This option's name followed by the deprecated ones."""
        return [self.name] + [o.name for o in self.deprecated]

    @property
    def env_vars(self) -> list[str]:
        """The environment variables the option is read from, in order."""
        return [
            'OS_{}'.format(name.replace('-', '_').upper())
            for name in self.names
        ]

    def parse(self, value: ty.Any) -> ty.Any:
        if value is None:
            return None
        return self.type(value)

    def from_environ(
        self, environ: ty.Optional[ty.Mapping[str, str]] = None
    ) -> ty.Any:
        """The raw value of the first of the variables that is not empty."""
        if environ is None:
            environ = os.environ

        for envvar in self.env_vars:
            value = environ.get(envvar)
            if value:
                return value

        return self.default

    def _to_oslo_opt(
        self, deprecated_opts: ty.Optional[list[cfg.DeprecatedOpt]] = None
    ) -> cfg.Opt:
        old = [cfg.DeprecatedOpt(name) for name in self.names[1:]]

        return cfg.Opt(
            name=self.name,
            type=self.type,
            help=self.help,
            secret=self.secret,
            required=self.required,
            dest=self.dest,
            deprecated_opts=old + list(deprecated_opts or []),
            default=self.default,
        )
