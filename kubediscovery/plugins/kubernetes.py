"""Discovery of cluster members through the Kubernetes API.

Enabled with::

    discovery.type: kubernetes
    cloud.kubernetes.namespace: default
    cloud.kubernetes.service: elasticsearch-cluster

or, to address the pods directly rather than through a service::

    cloud.kubernetes.pod_label: component=elasticsearch
    cloud.kubernetes.pod_port: 9300

The actual lookups are done by the discovery implementation the host
loads for the ``kubernetes`` type; this plugin only decides whether to
wire it in, and with which parameters.
"""

from kubediscovery.context import ctx
from kubediscovery.gate import (
    KUBERNETES, ServiceNameMode, activate, evaluate)
from kubediscovery.settings import DiscoverySettings
from kubediscovery.plugins import Plugin


class KubernetesHostsProvider(object):
    """Supplies the parameters the discovery implementation uses to look
    up the addresses of the other nodes.
    """

    def __init__(self, settings, mode):
        self.namespace = settings.namespace
        self.refresh_interval = settings.refresh_interval
        self.mode = mode

    def selector(self):
        if isinstance(self.mode, ServiceNameMode):
            return {'namespace': self.namespace,
                    'service': self.mode.service_name}
        return {'namespace': self.namespace,
                'label': self.mode.pod_label,
                'port': self.mode.pod_port}

    def __eq__(self, other):
        return isinstance(other, KubernetesHostsProvider) and \
            (self.namespace, self.refresh_interval, self.mode) == \
            (other.namespace, other.refresh_interval, other.mode)

    def __ne__(self, other):
        return not self == other

    def __hash__(self):
        return hash((self.namespace, self.refresh_interval, self.mode))

    def __repr__(self):
        return '<KubernetesHostsProvider %s>' % ', '.join(
            '%s=%s' % item for item in sorted(self.selector().items()))


class KubernetesAPIService(object):
    """The node service holding the connection settings for the
    Kubernetes API, for as long as the node runs.
    """

    def __init__(self, settings):
        self.namespace = settings.namespace
        self.refresh_interval = settings.refresh_interval
        self.started = False

    def start(self):
        self.started = True

    def stop(self):
        self.started = False

    def __eq__(self, other):
        return isinstance(other, KubernetesAPIService) and \
            (self.namespace, self.refresh_interval) == \
            (other.namespace, other.refresh_interval)

    def __ne__(self, other):
        return not self == other

    def __hash__(self):
        return hash((self.namespace, self.refresh_interval))

    def __repr__(self):
        return '<KubernetesAPIService namespace=%s>' % self.namespace


class KubernetesDiscovery(object):
    """Handler class registered for the ``kubernetes`` discovery type."""

    type_name = KUBERNETES


class KubernetesModule(object):
    """Module that makes the Kubernetes discovery implementation
    available to the node.
    """

    def __init__(self, mode):
        self.mode = mode

    def __eq__(self, other):
        return isinstance(other, KubernetesModule) and self.mode == other.mode

    def __ne__(self, other):
        return not self == other

    def __hash__(self):
        return hash(self.mode)

    def __repr__(self):
        return '<KubernetesModule %r>' % (self.mode,)


class KubernetesDiscoveryPlugin(Plugin):

    name = 'cloud-kubernetes'
    description = 'Cloud Kubernetes Discovery Plugin'

    def __init__(self, settings):
        Plugin.__init__(self, settings)
        self.discovery_settings = DiscoverySettings.from_bag(settings)
        self._verdict = None

    @property
    def verdict(self):
        """Evaluated once; diagnostics go to the current context."""
        if self._verdict is None:
            try:
                sink = ctx._get_current_object()
            except RuntimeError:
                # Not running inside a host
                sink = None
            self._verdict = evaluate(self.discovery_settings, sink)
        return self._verdict

    def on_start(self, registrar):
        activate(self.verdict, registrar, KubernetesModule, self._discovery,
                 service_factory=self._services)

    def _services(self, mode):
        return [KubernetesAPIService(self.discovery_settings)]

    def _discovery(self, mode):
        return (KUBERNETES, KubernetesDiscovery,
                KubernetesHostsProvider(self.discovery_settings, mode))

    def describe(self):
        if not self.verdict:
            return 'disabled'
        return 'enabled (%s)' % type(self.verdict.mode).__name__
