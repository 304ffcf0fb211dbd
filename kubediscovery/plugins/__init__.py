class Plugin(object):
    """Extension loaded into the host at startup.

    Plugins are constructed with the node settings (a
    :class:`~kubediscovery.settings.ConfigurationBag`). The host then
    calls the following methods, if a plugin has them:

    on_start(registrar)
        The node is starting. The plugin may install modules, services
        and discovery types through the given
        :class:`~kubediscovery.gate.Registrar`.

    describe()
        Return a short status line for the plugin, used by the CLI.
    """

    name = None
    description = None
    priority = 100

    def __init__(self, settings):
        self.settings = settings


def load_plugins(klass, *args, **kwargs):
    """Instantiate every subclass of ``klass`` defined in the modules of
    this package with ``args`` and ``kwargs``. Highest ``priority``
    comes first.
    """
    import inspect
    import pkgutil
    from importlib import import_module

    result = []
    for _, name, _ in pkgutil.iter_modules(__path__):
        if name.startswith('_'):
            continue
        module = import_module('%s.%s' % (__name__, name))
        for _, attr in inspect.getmembers(module, inspect.isclass):
            # Skip what the module merely imported
            if issubclass(attr, klass) and attr.__module__ == module.__name__:
                result.append(attr(*args, **kwargs))

    result.sort(key=lambda p: p.priority, reverse=True)
    return result
