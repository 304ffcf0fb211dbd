import pytest
from kubediscovery.context import set_context, Context
from kubediscovery.settings import ConfigurationBag, Fields


class TestContext(Context):
    __test__ = False

    def __init__(self, *a, **kw):
        Context.__init__(self, *a, **kw)
        self.items = []
    def custom(self, **kwargs):
        self.items.append(kwargs)
        print(kwargs)
    def filter(self, key, value=None):
        items = [i for i in self.items if key in i]
        if value:
            items = [i for i in items if i[key] == value]
        return items


@pytest.fixture
def context(request):
    """A context recording all events, set as the current one.
    """
    context = TestContext()
    set_context(context)

    def close():
        set_context(None)
    request.addfinalizer(close)
    return context


def make_bag(**kwargs):
    """Build a bag from the short names used in the tests."""
    keys = {
        'type': Fields.DISCOVERY_TYPE,
        'namespace': Fields.NAMESPACE,
        'service_name': Fields.SERVICE_NAME,
        'pod_label': Fields.POD_LABEL,
        'pod_port': Fields.POD_PORT,
        'refresh': Fields.REFRESH,
    }
    return ConfigurationBag({keys[k]: v for k, v in kwargs.items()})


@pytest.fixture
def settings_file(tmpdir):
    """Write a YAML settings file, return its path."""
    def write(content):
        f = tmpdir.join('elasticsearch.yml')
        f.write(content)
        return f.strpath
    return write
