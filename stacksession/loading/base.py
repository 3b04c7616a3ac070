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

import abc
import typing as ty

import stevedore

from stacksession import exceptions

if ty.TYPE_CHECKING:
    from stacksession.loading import opts

PLUGIN_NAMESPACE = 'stacksession.plugin'

T = ty.TypeVar('T')

__all__ = (
    'get_available_plugin_names',
    'get_available_plugin_loaders',
    'get_plugin_loader',
    'get_plugin_options',
    'BaseLoader',
    'PLUGIN_NAMESPACE',
)


def get_available_plugin_names() -> frozenset[str]:
    """Get the names of all the plugins that are available on the system.

    This is particularly useful for help and error text to prompt a user for
    example what plugins they may specify.

    :returns: A list of names.
    :rtype: frozenset
    """
    mgr = stevedore.ExtensionManager(namespace=PLUGIN_NAMESPACE)
    return frozenset(mgr.names())


def get_available_plugin_loaders() -> dict[str, 'BaseLoader[ty.Any]']:
    """Retrieve all the plugin classes available on the system.

    :returns: A dict with plugin entrypoint name as the key and the plugin
              loader as the value.
    :rtype: dict
    """
    mgr = stevedore.ExtensionManager(
        namespace=PLUGIN_NAMESPACE,
        invoke_on_load=True,
        propagate_map_exceptions=True,
    )

    return dict(mgr.map(lambda ext: (ext.entry_point.name, ext.obj)))


def get_plugin_loader(name: str) -> 'BaseLoader[ty.Any]':
    """Retrieve a plugin class by its entrypoint name.

    :param str name: The name of the object to get.

    :returns: An auth plugin class.
    :rtype: :py:class:`stacksession.loading.BaseLoader`

    :raises stacksession.exceptions.NoMatchingPlugin: if a plugin cannot be
                                                      created.
    """
    try:
        mgr = stevedore.DriverManager(
            namespace=PLUGIN_NAMESPACE, invoke_on_load=True, name=name
        )
    except RuntimeError:
        raise exceptions.NoMatchingPlugin(name)

    return ty.cast('BaseLoader[ty.Any]', mgr.driver)


def get_plugin_options(name: str) -> list['opts.Opt']:
    """Get the options for a specific plugin.

    This will be the list of options that is registered and loaded by the
    specified plugin.

    :returns: A list of :py:class:`stacksession.loading.Opt` options.

    :raises stacksession.exceptions.NoMatchingPlugin: if a plugin cannot be
                                                      created.
    """
    return get_plugin_loader(name).get_options()


class _BaseLoader(ty.Generic[T], metaclass=abc.ABCMeta):
    @property
    @abc.abstractmethod
    def plugin_class(self) -> ty.Type[T]:
        raise NotImplementedError()

    @abc.abstractmethod
    def get_options(self) -> list['opts.Opt']:
        """Return the list of parameters associated with the auth plugin.

        This list may be used to generate CLI or config arguments.

        :returns: A list of Param objects describing available plugin
                  parameters.
        :rtype: list
        """
        return []

    def create_plugin(self, **kwargs: ty.Any) -> T:
        """Create a plugin from the options available for the loader.

        Given the options that were specified by the loader create an
        appropriate plugin. You can override this function in your loader.
        """
        return self.plugin_class(**kwargs)

    def load_from_options(self, **kwargs: ty.Any) -> T:
        """Create a plugin from the arguments retrieved from get_options.

        A client can override this function to do argument validation or to
        handle differences between the registered options and what is required
        to create the plugin.
        """
        missing_required = [
            o
            for o in self.get_options()
            if o.required and kwargs.get(o.dest) is None
        ]

        if missing_required:
            raise exceptions.MissingRequiredOptions(missing_required)

        return self.create_plugin(**kwargs)

    def load_from_options_getter(
        self,
        getter: ty.Callable[['opts.Opt'], ty.Any],
        **kwargs: ty.Any,
    ) -> T:
        """Load a plugin from getter function that returns appropriate values.

        To handle cases other than the provided CONF and environment loading
        you can specify a custom loader function that will be queried for the
        option value.
        The getter is a function that takes a
        :py:class:`stacksession.loading.Opt` and returns a value to load with.

        :param getter: A function that returns a value for the given opt.
        :type getter: callable

        :returns: An authentication Plugin.
        :rtype: :py:class:`stacksession.plugin.BaseAuthPlugin`
        """
        for opt in (o for o in self.get_options() if o.dest not in kwargs):
            kwargs[opt.dest] = opt.parse(getter(opt))

        return self.load_from_options(**kwargs)


class BaseLoader(_BaseLoader[T]):
    """Base class for the loaders of authentication plugins.

    Loaders are registered under the ``stacksession.plugin`` entry point
    namespace.
    """

    @property
    def available(self) -> bool:
        """Return if the plugin is available for loading.

        If a plugin is missing dependencies or for some other reason should
        not be available to the current system it should override this
        property and return False to exclude itself from the plugin list.

        :rtype: bool
        """
        return True

    def get_options(self) -> list['opts.Opt']:
        return []


