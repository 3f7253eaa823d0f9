"""Azure SDK adaptor"""

# pylint: disable=import-outside-toplevel
import json
import logging
import os
from typing import Any, Dict, Optional

from inlets import exceptions as inlets_exceptions
from inlets import inlets_logging
from inlets.adaptors import common

azure = common.LazyImport(
    'azure',
    import_error_message=('Failed to import dependencies for Azure. '
                          'Try pip install "inlets-provisioner[azure]"'),
    set_loggers=lambda: logging.getLogger('azure.identity').setLevel(logging.
                                                                     ERROR))

Client = Any
logger = inlets_logging.init_logger(__name__)

_LAZY_MODULES = (azure,)

# Same variable the Azure SDKs read for file-based authentication.
ENV_VAR_AZURE_AUTH_LOCATION = 'AZURE_AUTH_LOCATION'

# Keys of the SDK auth file written by
# `az ad sp create-for-rbac --sdk-auth`.
_REQUIRED_AUTH_KEYS = ('clientId', 'clientSecret', 'tenantId')
_DEFAULT_RESOURCE_MANAGER_ENDPOINT = 'https://management.azure.com/'


def resolve_auth_file_path(path: Optional[str] = None) -> str:
    """Returns the auth file path, falling back to AZURE_AUTH_LOCATION."""
    if path is None:
        path = os.environ.get(ENV_VAR_AZURE_AUTH_LOCATION)
    if not path:
        raise inlets_exceptions.InvalidCloudCredentials(
            'No Azure credentials file given. Pass a path or set '
            f'{ENV_VAR_AZURE_AUTH_LOCATION}.')
    return os.path.expanduser(path)


def load_auth_file(path: Optional[str] = None) -> Dict[str, str]:
    """Loads and checks an Azure SDK auth file.

    Raises:
        InvalidCloudCredentials: if the file is missing, is not JSON, or lacks
            any of the service principal keys.
    """
    path = resolve_auth_file_path(path)
    try:
        # The SDK auth file may be written with a BOM on Windows.
        with open(path, 'r', encoding='utf-8-sig') as f:
            auth = json.load(f)
    except (OSError, ValueError) as e:
        raise inlets_exceptions.InvalidCloudCredentials(
            f'Failed to read Azure credentials file {path!r}: {e}') from e
    if not isinstance(auth, dict):
        raise inlets_exceptions.InvalidCloudCredentials(
            f'Azure credentials file {path!r} is not a JSON object.')
    missing = [k for k in _REQUIRED_AUTH_KEYS if not auth.get(k)]
    if missing:
        raise inlets_exceptions.InvalidCloudCredentials(
            f'Azure credentials file {path!r} is missing: '
            f'{", ".join(missing)}')
    return auth


def resource_manager_endpoint(auth: Dict[str, str]) -> str:
    return auth.get('resourceManagerEndpointUrl',
                    _DEFAULT_RESOURCE_MANAGER_ENDPOINT)


@common.load_lazy_modules(modules=_LAZY_MODULES)
def get_credential(auth: Dict[str, str]) -> Any:
    """Creates a service principal credential from a loaded auth file.

    The credential caches and refreshes its own tokens and is safe to share
    between threads.
    """
    from azure import identity
    kwargs = {}
    authority = auth.get('activeDirectoryEndpointUrl')
    if authority:
        kwargs['authority'] = authority
    return identity.ClientSecretCredential(tenant_id=auth['tenantId'],
                                           client_id=auth['clientId'],
                                           client_secret=auth['clientSecret'],
                                           **kwargs)


@common.load_lazy_modules(modules=_LAZY_MODULES)
def exceptions():
    """Azure exceptions."""
    from azure.core import exceptions as azure_exceptions
    return azure_exceptions


@common.load_lazy_modules(modules=_LAZY_MODULES)
def azure_mgmt_models(name: str):
    if name == 'resource':
        from azure.mgmt.resource.resources import models
        return models
    elif name == 'container':
        from azure.mgmt.containerinstance import models
        return models
    raise ValueError(f'Models not supported: "{name}"')


@common.load_lazy_modules(modules=_LAZY_MODULES)
def get_client(name: str,
               credential: Any,
               subscription_id: str,
               base_url: Optional[str] = None) -> Client:
    """Creates and returns an Azure management client.

    Args:
        name: The type of Azure client to create, 'resource' or 'container'.
        credential: The credential returned by get_credential().
        subscription_id: The Azure subscription ID.
        base_url: Resource Manager endpoint, for sovereign clouds.

    Returns:
        An instance of the specified Azure client.

    Raises:
        ValueError: If an unsupported client type is specified.
    """
    kwargs: Dict[str, Any] = {}
    if base_url is not None and base_url != _DEFAULT_RESOURCE_MANAGER_ENDPOINT:
        kwargs['base_url'] = base_url
        kwargs['credential_scopes'] = [base_url.rstrip('/') + '/.default']
    if name == 'resource':
        from azure.mgmt import resource
        return resource.ResourceManagementClient(credential, subscription_id,
                                                 **kwargs)
    elif name == 'container':
        from azure.mgmt import containerinstance
        return containerinstance.ContainerInstanceManagementClient(
            credential, subscription_id, **kwargs)
    else:
        raise ValueError(f'Client not supported: "{name}"')
