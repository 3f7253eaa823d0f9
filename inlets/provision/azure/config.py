"""Azure configuration bootstrapping.

Creates or updates the resource group a host's container group lives in.
"""
from typing import Any

from inlets import exceptions
from inlets import inlets_logging
from inlets.adaptors import azure
from inlets.provision import common
from inlets.provision.azure import utils

logger = inlets_logging.init_logger(__name__)

_STAGE = exceptions.FatalProvisionError.Stage.RESOURCE_GROUP
_FAILED_STATE = 'failed'


def _clear_state(group: Any) -> None:
    # provisioning_state is server-assigned and read-only.
    if group.properties is not None:
        group.properties.provisioning_state = None


def _provisioning_state(group: Any) -> str:
    if group.properties is None:
        return ''
    return group.properties.provisioning_state or ''


@common.log_function_start_end
def bootstrap_resource_group(resource_client: Any, resource_group: str,
                             region: str) -> Any:
    """Upserts the resource group and returns the backend's view of it.

    An existing group is fetched and re-submitted with the new location, so
    calling this repeatedly for the same name never creates a second group.

    Raises:
        FatalProvisionError: on any failure other than the group not existing
            yet, and when the backend reports the upserted group as failed.
    """
    resource_models = azure.azure_mgmt_models('resource')
    try:
        group = resource_client.resource_groups.get(resource_group)
        logger.debug(f'Resource group {resource_group!r} exists, updating.')
    except azure.exceptions().AzureError as e:
        err = utils.classify_azure_error(
            e,
            _STAGE,
            f'Failed to get resource group {resource_group!r}.',
            allow_not_found=True)
        if not isinstance(err, exceptions.ResourceNotFoundError):
            raise err from e
        logger.info(f'Creating resource group {resource_group!r} '
                    f'in {region}.')
        group = resource_models.ResourceGroup(location=region)

    _clear_state(group)
    group.location = region
    try:
        updated = resource_client.resource_groups.create_or_update(
            resource_group, group)
    except azure.exceptions().AzureError as e:
        raise utils.classify_azure_error(
            e, _STAGE,
            f'Failed to update resource group {resource_group!r}.') from e

    if updated is None:
        raise exceptions.FatalProvisionError(
            f'Resource group {resource_group!r} update returned no result.',
            stage=_STAGE)
    state = _provisioning_state(updated)
    if state.lower() == _FAILED_STATE:
        raise exceptions.FatalProvisionError(
            f'Resource group {resource_group!r} is in state {state!r}.',
            stage=_STAGE)
    logger.debug(f'Resource group {resource_group!r} state: {state!r}.')
    return updated
