"""Node settings, as the host reads them from ``elasticsearch.yml``
style files::

    discovery.type: kubernetes
    cloud:
        kubernetes:
            namespace: default
            service: es-svc

Nested sections are flattened to dotted keys, and all values are kept
as the strings written in the file; the host decides what they mean.
"""

from collections.abc import Mapping
import yaml


class SettingsError(ValueError):
    """The settings could not be read."""


class Fields(object):
    """The keys we know about."""
    DISCOVERY_TYPE = 'discovery.type'
    NAMESPACE = 'cloud.kubernetes.namespace'
    SERVICE_NAME = 'cloud.kubernetes.service'
    POD_LABEL = 'cloud.kubernetes.pod_label'
    POD_PORT = 'cloud.kubernetes.pod_port'
    REFRESH = 'cloud.kubernetes.refresh_interval'


DEFAULT_REFRESH = '5s'


# str.isspace() counts these, but for node settings they are text.
_NOT_BLANK = frozenset(u'\xa0\u2007\u202f\x85')


def has_text(value):
    """True if ``value`` has a character that is not whitespace, where
    whitespace means what it does for the node (non-breaking spaces are
    text).
    """
    if value is None:
        return False
    return any(not c.isspace() or c in _NOT_BLANK for c in value)


def flatten(data, prefix=''):
    """Yield ``(dotted_key, value)`` for a nested dict."""
    for key, value in data.items():
        key = '%s%s' % (prefix, key)
        if isinstance(value, Mapping):
            for item in flatten(value, prefix='%s.' % key):
                yield item
        elif value is None:
            # Not set.
            continue
        elif isinstance(value, bool):
            yield key, 'true' if value else 'false'
        elif isinstance(value, (list, tuple)):
            yield key, ','.join(str(v) for v in value)
        else:
            yield key, str(value)


class ConfigurationBag(Mapping):
    """Read-only mapping of setting names to string values."""

    def __init__(self, data=None):
        self._data = {}
        for key, value in flatten(data or {}):
            if key in self._data:
                # "a.b: x" next to "a: {b: y}"
                raise SettingsError('setting %s is given twice' % key)
            self._data[key] = value

    @classmethod
    def load(cls, filename):
        try:
            with open(filename, 'r') as f:
                # Scalars stay strings as written: "yes" is not True.
                structure = yaml.load(f, Loader=yaml.BaseLoader)
        except (IOError, OSError) as e:
            raise SettingsError('cannot read %s: %s' % (filename, e))
        except yaml.YAMLError as e:
            raise SettingsError('invalid YAML in %s: %s' % (filename, e))

        if structure is None:
            structure = {}
        if not isinstance(structure, Mapping):
            raise SettingsError(
                '%s: expected a mapping at the top level' % filename)
        return cls(structure)

    def with_overrides(self, overrides):
        """Return a new bag with ``overrides`` applied on top."""
        data = dict(self._data)
        data.update(dict(flatten(overrides)))
        return ConfigurationBag(data)

    def __getitem__(self, key):
        return self._data[key]

    def __iter__(self):
        return iter(self._data)

    def __len__(self):
        return len(self._data)

    def __repr__(self):
        return '<ConfigurationBag %r>' % self._data


def parse_override(s):
    """Parse ``key=value`` as given on the command line."""
    key, sep, value = s.partition('=')
    key = key.strip()
    if not sep or not key:
        raise SettingsError('expected key=value, got %r' % s)
    return key, value


class DiscoverySettings(object):
    """The discovery related settings, pulled out of a bag.

    Every field is either a string or ``None`` if the key was not given.
    """

    __slots__ = ('discovery_type', 'namespace', 'service_name', 'pod_label',
                 'pod_port', 'refresh_interval')

    def __init__(self, discovery_type=None, namespace=None, service_name=None,
                 pod_label=None, pod_port=None, refresh_interval=None):
        self.discovery_type = discovery_type
        self.namespace = namespace
        self.service_name = service_name
        self.pod_label = pod_label
        self.pod_port = pod_port
        self.refresh_interval = refresh_interval

    @classmethod
    def from_bag(cls, bag):
        def get(key):
            value = bag.get(key)
            # Plain dicts may hold anything; a bag only ever holds strings.
            if value is not None and not isinstance(value, str):
                value = str(value)
            return value

        return cls(
            discovery_type=get(Fields.DISCOVERY_TYPE),
            namespace=get(Fields.NAMESPACE),
            service_name=get(Fields.SERVICE_NAME),
            pod_label=get(Fields.POD_LABEL),
            pod_port=get(Fields.POD_PORT),
            refresh_interval=get(Fields.REFRESH) or DEFAULT_REFRESH)

    def __eq__(self, other):
        if not isinstance(other, DiscoverySettings):
            return NotImplemented
        return all(getattr(self, k) == getattr(other, k)
                   for k in self.__slots__)

    def __ne__(self, other):
        result = self.__eq__(other)
        return result if result is NotImplemented else not result

    def __repr__(self):
        return '<DiscoverySettings %s>' % ', '.join(
            '%s=%r' % (k, getattr(self, k)) for k in self.__slots__)
