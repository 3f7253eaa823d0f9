"""Azure provisioner for inlets."""

from inlets.provision.azure.config import bootstrap_resource_group
from inlets.provision.azure.instance import AzureProvisioner
from inlets.provision.azure.utils import make_container_group_id
from inlets.provision.azure.utils import parse_container_group_id
