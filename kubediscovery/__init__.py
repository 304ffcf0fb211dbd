"""Kubernetes discovery support for a clustered node.

:mod:`kubediscovery.gate` decides whether discovery is switched on;
:mod:`kubediscovery.plugins.kubernetes` wires it into the host.
"""

__version__ = '0.1'
