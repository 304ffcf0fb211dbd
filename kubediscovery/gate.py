"""Decides whether Kubernetes discovery should be switched on for a node.

Discovery needs ``discovery.type: kubernetes``, a namespace, and exactly
one way to find the other members: either the name of a service, or a
pod label together with the transport port of the pods. Anything else
leaves discovery off; that is a normal outcome, not an error, so
:func:`evaluate` never raises.
"""

from collections import namedtuple
from collections.abc import Mapping

from kubediscovery.context import NullContext
from kubediscovery.settings import DiscoverySettings, Fields, has_text


KUBERNETES = 'kubernetes'


class ServiceNameMode(namedtuple('ServiceNameMode', 'service_name')):
    """Members are the endpoints of a named service."""


class PodLabelMode(namedtuple('PodLabelMode', 'pod_label pod_port')):
    """Members are the pods matching a label selector, on a given port."""


class Disabled(namedtuple('Disabled', '')):
    enabled = False
    mode = None

    def __bool__(self):
        return False

    def __repr__(self):
        return 'Disabled()'


class Enabled(namedtuple('Enabled', 'mode')):
    enabled = True

    def __bool__(self):
        return True


DISABLED = Disabled()


def _check_property(name, value, sink):
    if not has_text(value):
        sink.warn('{} is not set.', name)
        return False
    return True


def evaluate(config, sink=None):
    """Return :data:`DISABLED` or an :class:`Enabled` verdict carrying
    the requested addressing mode.

    ``config`` may be a :class:`~kubediscovery.settings.ConfigurationBag`
    (or any mapping of setting names), or already parsed
    :class:`~kubediscovery.settings.DiscoverySettings`. Diagnostics go to
    ``sink``, a :class:`~kubediscovery.context.Context`.
    """
    if sink is None:
        sink = NullContext()
    if isinstance(config, Mapping):
        settings = DiscoverySettings.from_bag(config)
    else:
        settings = config

    discovery_type = settings.discovery_type
    if discovery_type is None or discovery_type.lower() != KUBERNETES:
        sink.debug('{} not set to {}', Fields.DISCOVERY_TYPE, KUBERNETES)
        return DISABLED

    if not _check_property(Fields.NAMESPACE, settings.namespace, sink):
        sink.warn(
            'Kubernetes discovery requires [{}]. Check elasticsearch.yml file.',
            Fields.NAMESPACE)
        return DISABLED

    has_service_name = _check_property(
        Fields.SERVICE_NAME, settings.service_name, sink)
    # Both label and port are needed; a label without a port counts as
    # no pod label at all.
    has_pod_label = (
        _check_property(Fields.POD_LABEL, settings.pod_label, sink) and
        _check_property(Fields.POD_PORT, settings.pod_port, sink))

    if has_service_name and has_pod_label:
        sink.warn(
            'conflicting Kubernetes discovery settings [{}] and [{} : {}]. '
            'Check elasticsearch.yml file, only one of them may be set.',
            Fields.SERVICE_NAME, Fields.POD_LABEL, Fields.POD_PORT)
        return DISABLED
    if not (has_service_name or has_pod_label):
        sink.warn(
            'one or more Kubernetes discovery settings are missing. '
            'Check elasticsearch.yml file. Should have [{}] and only one '
            'of [{}] or [{} : {}].',
            Fields.NAMESPACE, Fields.SERVICE_NAME, Fields.POD_LABEL,
            Fields.POD_PORT)
        return DISABLED

    sink.trace('all required properties for Kubernetes discovery are set!')
    if has_service_name:
        return Enabled(ServiceNameMode(settings.service_name))
    return Enabled(PodLabelMode(settings.pod_label, settings.pod_port))


class Registrar(object):
    """What the host offers to wire discovery in.

    ``register_module(module)``
        Install a module supplying the discovery implementation.

    ``register_service(service)``
        Add a component the node starts and stops along with itself,
        such as the client for the directory service.

    ``register_discovery(type_name, handler, provider)``
        Associate the discovery type name with its handler, and add the
        provider that looks up the addresses of the other members.
    """

    def register_module(self, module):
        raise NotImplementedError()

    def register_service(self, service):
        raise NotImplementedError()

    def register_discovery(self, type_name, handler, provider):
        raise NotImplementedError()


def activate(verdict, registrar, module_factory, discovery_factory,
             service_factory=None):
    """Drive ``registrar`` according to ``verdict``; does nothing when
    discovery is disabled.

    ``module_factory(mode)`` returns the module to register,
    ``service_factory(mode)`` the services (if given),
    ``discovery_factory(mode)`` a ``(type_name, handler, provider)``
    triple.

    Return True if anything was registered.
    """
    if not verdict:
        return False
    registrar.register_module(module_factory(verdict.mode))
    if service_factory:
        for service in service_factory(verdict.mode):
            registrar.register_service(service)
    registrar.register_discovery(*discovery_factory(verdict.mode))
    return True
