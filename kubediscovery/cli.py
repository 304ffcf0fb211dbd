#!/usr/bin/env python
import os
import sys

import click
from clint.textui import puts, indent, colored

from kubediscovery.context import Context
from kubediscovery.gate import evaluate
from kubediscovery.host import Host, RegistrationError
from kubediscovery.settings import (
    ConfigurationBag, SettingsError, parse_override)


def _write(s):
    # Look up stdout on every call, so output can be captured.
    click.echo(s, nl=False)


def say(s=''):
    puts(s, stream=_write)


def with_printer(event_stream, verbose=False):
    """Given a stream of context events, output the ones we know how
    to render, pass through those that are unknown.
    """
    for event in event_stream:
        if 'job' in event:
            say('-----> %s' % event['job'])
        elif 'log' in event:
            with indent(7):
                say('%s' % event['log'])
        elif 'warn' in event:
            with indent(7):
                say(colored.yellow('Warning: %s' % event['warn']))
        elif 'error' in event:
            with indent(7):
                say(colored.red('Error: %s' % event['error']))
        elif 'debug' in event or 'trace' in event:
            if verbose:
                with indent(7):
                    say(colored.cyan('%s' % (
                        event.get('debug') or event.get('trace'))))
        else:
            yield event


def print_events(context, verbose=False):
    """Close ``context`` and render everything it collected."""
    context.done()
    for event in with_printer(context, verbose=verbose):
        raise ValueError(event)


def load_settings(filename, overrides):
    if not filename:
        filename = os.environ.get('DISCOVERY_SETTINGS')
    try:
        bag = ConfigurationBag.load(filename) if filename \
            else ConfigurationBag()
        return bag.with_overrides(dict(parse_override(o) for o in overrides))
    except SettingsError as e:
        raise click.ClickException('%s' % e)


def describe_verdict(verdict):
    if not verdict:
        return colored.red('disabled')
    mode = verdict.mode
    fields = ', '.join('%s=%s' % item for item in mode._asdict().items())
    return colored.green('enabled: %s(%s)' % (type(mode).__name__, fields))


settings_file_argument = click.argument(
    'settings-file', type=click.Path(exists=True, dir_okay=False),
    required=False)
overrides_option = click.option(
    '--set', 'overrides', multiple=True, metavar='KEY=VALUE',
    help='Override a setting.')
verbose_option = click.option(
    '-v', '--verbose', default=False, is_flag=True,
    help='Also show debug and trace messages.')


@click.group()
def main():
    pass


@main.command()
@settings_file_argument
@overrides_option
@verbose_option
@click.option('--strict', default=False, is_flag=True,
              help='Exit with an error if discovery is disabled.')
def check(settings_file, overrides, verbose, strict):
    """Tell whether Kubernetes discovery would be enabled.
    """
    bag = load_settings(settings_file, overrides)

    context = Context()
    verdict = evaluate(bag, context)
    print_events(context, verbose=verbose)

    say('Kubernetes discovery: %s' % describe_verdict(verdict))
    if strict and not verdict:
        sys.exit(1)


@main.command()
@settings_file_argument
@overrides_option
@verbose_option
def start(settings_file, overrides, verbose):
    """Load the plugins as the node would, show what they registered.
    """
    bag = load_settings(settings_file, overrides)

    host = Host(bag)
    try:
        host.start()
    except RegistrationError as e:
        host.context.error('%s' % e)
        print_events(host.context, verbose=verbose)
        raise click.ClickException('Aborted.')
    print_events(host.context, verbose=verbose)

    say('Plugins:')
    with indent(4):
        for plugin in host.plugins:
            describe = getattr(plugin, 'describe', None)
            say('%s - %s%s' % (
                plugin.name, plugin.description,
                ' [%s]' % describe() if describe else ''))
    say('Modules:')
    with indent(4):
        for module in host.modules:
            say('%r' % (module,))
    say('Services:')
    with indent(4):
        for service in host.services:
            say('%r' % (service,))
    say('Discovery types:')
    with indent(4):
        for name, handler in sorted(host.discovery.discovery_types.items()):
            say('%s -> %s' % (name, handler.__name__))
    say('Hosts providers:')
    with indent(4):
        for provider in host.discovery.hosts_providers:
            say('%r' % (provider,))
    host.stop()


def run():
    sys.exit(main(sys.argv[1:]) or None)


if __name__ == '__main__':
    run()
