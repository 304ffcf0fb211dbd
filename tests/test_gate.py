import mock
import pytest
from kubediscovery.gate import (
    evaluate, activate, Registrar, DISABLED, Enabled, ServiceNameMode,
    PodLabelMode)
from kubediscovery.settings import DiscoverySettings, Fields
from tests.conftest import make_bag


class TestScenarios(object):

    def test_service_name(self):
        bag = make_bag(type='kubernetes', namespace='default',
                       service_name='es-svc')
        assert evaluate(bag) == Enabled(ServiceNameMode('es-svc'))

    def test_pod_label(self):
        bag = make_bag(type='kubernetes', namespace='default',
                       pod_label='app=es', pod_port='9300')
        assert evaluate(bag) == Enabled(PodLabelMode('app=es', '9300'))

    def test_other_type(self):
        assert evaluate(make_bag(type='zen')) is DISABLED

    def test_missing_namespace(self):
        bag = make_bag(type='kubernetes', service_name='es-svc')
        assert evaluate(bag) is DISABLED

    def test_both_modes(self):
        bag = make_bag(type='kubernetes', namespace='default',
                       service_name='es-svc', pod_label='app=es',
                       pod_port='9300')
        assert evaluate(bag) is DISABLED


class TestDiscoveryType(object):

    @pytest.mark.parametrize('value', ['kubernetes', 'Kubernetes', 'KUBERNETES'])
    def test_case_insensitive(self, value):
        bag = make_bag(type=value, namespace='default', service_name='es')
        assert evaluate(bag)

    @pytest.mark.parametrize('value', [None, '', 'zen', 'ec2', ' kubernetes'])
    def test_wrong_type(self, value):
        kwargs = dict(namespace='default', service_name='es')
        if value is not None:
            kwargs['type'] = value
        assert evaluate(make_bag(**kwargs)) is DISABLED

    def test_empty_bag(self):
        assert evaluate({}) is DISABLED


class TestNamespace(object):

    @pytest.mark.parametrize('value', ['', '   ', '\t'])
    def test_blank(self, value):
        bag = make_bag(type='kubernetes', namespace=value, service_name='es')
        assert evaluate(bag) is DISABLED


class TestAddressingMode(object):

    def test_neither(self):
        bag = make_bag(type='kubernetes', namespace='default')
        assert evaluate(bag) is DISABLED

    def test_label_without_port(self):
        # Does not count as pod label mode at all
        bag = make_bag(type='kubernetes', namespace='default',
                       pod_label='app=es')
        assert evaluate(bag) is DISABLED

    def test_port_without_label(self):
        bag = make_bag(type='kubernetes', namespace='default',
                       pod_port='9300')
        assert evaluate(bag) is DISABLED

    def test_blank_port(self):
        bag = make_bag(type='kubernetes', namespace='default',
                       pod_label='app=es', pod_port=' ')
        assert evaluate(bag) is DISABLED

    def test_service_name_with_partial_pod_label(self):
        # The incomplete pod label is ignored, service name wins.
        bag = make_bag(type='kubernetes', namespace='default',
                       service_name='es-svc', pod_label='app=es')
        assert evaluate(bag) == Enabled(ServiceNameMode('es-svc'))

    def test_blank_service_name(self):
        bag = make_bag(type='kubernetes', namespace='default',
                       service_name='', pod_label='app=es', pod_port='9300')
        assert evaluate(bag) == Enabled(PodLabelMode('app=es', '9300'))

    def test_values_verbatim(self):
        bag = make_bag(type='kubernetes', namespace='default',
                       service_name=' es-svc ')
        assert evaluate(bag).mode.service_name == ' es-svc '


class TestVerdict(object):

    def test_idempotent(self):
        bag = make_bag(type='kubernetes', namespace='default',
                       pod_label='app=es', pod_port='9300')
        assert evaluate(bag) == evaluate(bag)

    def test_truthiness(self):
        assert not DISABLED
        assert not DISABLED.enabled
        assert DISABLED.mode is None
        verdict = Enabled(ServiceNameMode('es'))
        assert verdict
        assert verdict.enabled

    def test_typed_settings(self):
        settings = DiscoverySettings(
            discovery_type='kubernetes', namespace='default',
            service_name='es-svc')
        assert evaluate(settings) == Enabled(ServiceNameMode('es-svc'))

    def test_plain_dict_with_numbers(self):
        verdict = evaluate({Fields.DISCOVERY_TYPE: 'kubernetes',
                            Fields.NAMESPACE: 'default',
                            Fields.POD_LABEL: 'app=es',
                            Fields.POD_PORT: 9300})
        assert verdict == Enabled(PodLabelMode('app=es', '9300'))

    def test_unrelated_keys_ignored(self):
        bag = make_bag(type='kubernetes', namespace='default',
                       service_name='es', refresh='10s')
        assert evaluate(bag) == Enabled(ServiceNameMode('es'))


class TestDiagnostics(object):

    def test_type_mismatch_is_debug(self, context):
        evaluate(make_bag(type='zen'), context)
        assert len(context.filter('debug')) == 1
        assert not context.filter('warn')

    def test_missing_namespace_is_warning(self, context):
        evaluate(make_bag(type='kubernetes', service_name='es'), context)
        assert context.filter('warn', '%s is not set.' % Fields.NAMESPACE)
        summary = context.filter('warn')[-1]['warn']
        assert Fields.NAMESPACE in summary

    def test_missing_mode_names_keys(self, context):
        evaluate(make_bag(type='kubernetes', namespace='default'), context)
        assert context.filter('warn', '%s is not set.' % Fields.SERVICE_NAME)
        assert context.filter('warn', '%s is not set.' % Fields.POD_LABEL)
        summary = context.filter('warn')[-1]['warn']
        for key in (Fields.NAMESPACE, Fields.SERVICE_NAME, Fields.POD_LABEL,
                    Fields.POD_PORT):
            assert key in summary

    def test_conflict_names_keys(self, context):
        evaluate(make_bag(type='kubernetes', namespace='default',
                          service_name='es', pod_label='app=es',
                          pod_port='9300'), context)
        warnings = context.filter('warn')
        assert len(warnings) == 1
        assert 'conflicting' in warnings[0]['warn']
        assert Fields.SERVICE_NAME in warnings[0]['warn']

    def test_success_is_trace(self, context):
        evaluate(make_bag(type='kubernetes', namespace='default',
                          service_name='es'), context)
        assert len(context.filter('trace')) == 1
        # The unset pod label is still reported
        assert context.filter('warn', '%s is not set.' % Fields.POD_LABEL)

    def test_no_sink(self):
        # Diagnostics are simply dropped
        assert evaluate(make_bag(type='kubernetes')) is DISABLED


class TestActivate(object):

    def test_disabled_registers_nothing(self):
        registrar = mock.Mock(spec=Registrar)
        module_factory = mock.Mock()
        assert activate(DISABLED, registrar, module_factory, mock.Mock()) \
            is False
        assert not registrar.register_module.called
        assert not registrar.register_discovery.called
        assert not module_factory.called

    def test_enabled(self):
        registrar = mock.Mock(spec=Registrar)
        mode = ServiceNameMode('es')
        assert activate(Enabled(mode), registrar,
                        lambda m: ('module', m),
                        lambda m: ('kubernetes', 'handler', m)) is True
        registrar.register_module.assert_called_once_with(('module', mode))
        registrar.register_discovery.assert_called_once_with(
            'kubernetes', 'handler', mode)

    def test_base_registrar(self):
        with pytest.raises(NotImplementedError):
            Registrar().register_module(None)

    def test_services(self):
        registrar = mock.Mock(spec=Registrar)
        mode = PodLabelMode('app=es', '9300')
        activate(Enabled(mode), registrar,
                 lambda m: 'module',
                 lambda m: ('kubernetes', 'handler', 'provider'),
                 service_factory=lambda m: ['s1', 's2'])
        assert registrar.register_service.call_args_list == [
            mock.call('s1'), mock.call('s2')]

    def test_disabled_registers_no_services(self):
        registrar = mock.Mock(spec=Registrar)
        service_factory = mock.Mock()
        activate(DISABLED, registrar, mock.Mock(), mock.Mock(),
                 service_factory=service_factory)
        assert not service_factory.called
        assert not registrar.register_service.called

    def test_base_registrar_service(self):
        with pytest.raises(NotImplementedError):
            Registrar().register_service(None)


class TestBlankValues(object):

    @pytest.mark.parametrize('value', ['\xa0', '\u2007', '\u202f'])
    def test_non_breaking_space_is_text(self, value):
        bag = make_bag(type='kubernetes', namespace=value, service_name='es')
        assert evaluate(bag) == Enabled(ServiceNameMode('es'))

    def test_other_unicode_space_is_blank(self):
        bag = make_bag(type='kubernetes', namespace='\u2003', service_name='es')
        assert evaluate(bag) is DISABLED
