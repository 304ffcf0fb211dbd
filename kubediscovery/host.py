from kubediscovery.context import Context, set_context
from kubediscovery.gate import Registrar
from kubediscovery.plugins import load_plugins, Plugin


class RegistrationError(Exception):
    """A plugin tried to register something that clashes with an
    existing registration.
    """


class DiscoveryModule(object):
    """The host's discovery subsystem: knows the discovery types by
    name, and the providers that supply the addresses of other nodes.
    """

    def __init__(self):
        self.discovery_types = {}
        self.hosts_providers = []

    def add_discovery_type(self, name, handler):
        """Return True if the type was added, False if it already was.
        """
        existing = self.discovery_types.get(name)
        if existing is handler:
            return False
        if existing is not None:
            raise RegistrationError(
                'discovery type %s already registered to %r' % (name, existing))
        self.discovery_types[name] = handler
        return True

    def add_hosts_provider(self, provider):
        if provider in self.hosts_providers:
            return False
        self.hosts_providers.append(provider)
        return True

    def snapshot(self):
        return dict(self.discovery_types), list(self.hosts_providers)

    def restore(self, snapshot):
        self.discovery_types, self.hosts_providers = snapshot


class HostRegistrar(Registrar):
    """Passes registrations from plugins on to the host."""

    def __init__(self, host):
        self.host = host

    def register_module(self, module):
        if module in self.host.modules:
            return
        self.host.context.log('installing module %r' % (module,))
        self.host.modules.append(module)

    def register_service(self, service):
        if service in self.host.services:
            return
        self.host.context.log('adding service %r' % (service,))
        self.host.services.append(service)

    def register_discovery(self, type_name, handler, provider):
        discovery = self.host.discovery
        if discovery.add_discovery_type(type_name, handler):
            self.host.context.log(
                'adding discovery type %s (%s)' % (type_name, handler.__name__))
        if discovery.add_hosts_provider(provider):
            self.host.context.log('adding hosts provider %r' % (provider,))


class Host(object):
    """Just enough of a node to load the plugins and let them register
    their discovery support.
    """

    def __init__(self, settings, plugins=None, context=None):
        self.settings = settings
        self.context = context or Context()
        if plugins is None:
            plugins = load_plugins(Plugin, settings)
        self.plugins = plugins
        self.modules = []
        self.services = []
        self.discovery = DiscoveryModule()
        self.started = False

    def run_plugins(self, method_name, *args, **kwargs):
        for plugin in self.plugins:
            method = getattr(plugin, method_name, None)
            if not method:
                continue
            result = method(*args, **kwargs)
            if not result is None:
                return result
        else:
            return False

    def get_plugin(self, name):
        for plugin in self.plugins:
            if plugin.name == name:
                return plugin

    def start(self):
        """Let the plugins register, then start the services.

        If a plugin fails, everything registered during this call is
        undone, and the host is left as it was.
        """
        if self.started:
            return
        modules, services = list(self.modules), list(self.services)
        discovery = self.discovery.snapshot()

        set_context(self.context)
        try:
            self.context.job('starting node')
            self.run_plugins('on_start', HostRegistrar(self))
        except Exception:
            self.modules, self.services = modules, services
            self.discovery.restore(discovery)
            raise
        finally:
            set_context(None)

        for service in self.services:
            service.start()
        self.started = True

    def stop(self):
        if not self.started:
            return
        for service in reversed(self.services):
            service.stop()
        self.started = False
