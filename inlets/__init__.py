"""The inlets provisioner package."""
from inlets.provision import get_provisioner
from inlets.provision import wait_for_ready
from inlets.provision.common import BasicHost
from inlets.provision.common import ProvisionedHost
from inlets.provision.common import Provisioner

__version__ = '0.1.0'

__all__ = [
    '__version__',
    'BasicHost',
    'ProvisionedHost',
    'Provisioner',
    'get_provisioner',
    'wait_for_ready',
]
