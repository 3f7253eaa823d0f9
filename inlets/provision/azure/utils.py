"""Utilities for the Azure provisioner."""
from typing import Optional, Tuple

import colorama

from inlets import exceptions
from inlets import inlets_logging
from inlets.adaptors import azure
from inlets.utils import common_utils

logger = inlets_logging.init_logger(__name__)

# ARM resource id of a container group. The id embeds everything needed to
# find the container group again, so no other state has to be persisted.
_CONTAINER_GROUP_ID = (
    '/subscriptions/{subscription_id}/resourceGroups/{resource_group}'
    '/providers/Microsoft.ContainerInstance/containerGroups/{name}')
# (index, literal) of the fixed segments of a split container group id.
_CONTAINER_GROUP_ID_LITERALS = (
    (1, 'subscriptions'),
    (3, 'resourceGroups'),
    (5, 'providers'),
    (6, 'Microsoft.ContainerInstance'),
    (7, 'containerGroups'),
)
_CONTAINER_GROUP_ID_NUM_SEGMENTS = 9

_AUTH_ERROR_CODES = {
    'AuthenticationFailed',
    'AuthorizationFailed',
    'InvalidAuthenticationToken',
    'InvalidAuthenticationTokenTenant',
    'LinkedAuthorizationFailed',
    'SubscriptionNotFound',
}
_INVALID_INPUT_ERROR_CODES = {
    'InvalidParameter',
    'InvalidRequestContent',
    'InvalidResourceGroupLocation',
    'InvalidResourceName',
    'InvalidContainerGroupName',
    'LocationNotAvailableForResourceGroup',
    'NoRegisteredProviderFound',
    'MissingSubscriptionRegistration',
}


def make_container_group_id(subscription_id: str, resource_group: str,
                            name: str) -> str:
    """Encodes the ARM resource id of a container group."""
    for field, value in (('subscription_id', subscription_id),
                         ('resource_group', resource_group), ('name', name)):
        if not value or '/' in value:
            raise ValueError(f'Invalid {field} for a container group id: '
                             f'{value!r}')
    return _CONTAINER_GROUP_ID.format(subscription_id=subscription_id,
                                      resource_group=resource_group,
                                      name=name)


def parse_container_group_id(resource_id: str) -> Tuple[str, str, str]:
    """Decodes a container group id.

    Returns:
        A tuple of (subscription_id, resource_group, container_group_name).

    Raises:
        MalformedIdentifierError: if `resource_id` is not a container group
            id.
    """
    if not isinstance(resource_id, str) or not resource_id:
        raise exceptions.MalformedIdentifierError(
            str(resource_id), 'Host identifier must be a non-empty string.')
    path = resource_id[:-1] if resource_id.endswith('/') else resource_id
    segments = path.split('/')
    if len(segments) != _CONTAINER_GROUP_ID_NUM_SEGMENTS or segments[0]:
        raise exceptions.MalformedIdentifierError(
            resource_id,
            f'Expected {_CONTAINER_GROUP_ID_NUM_SEGMENTS - 1} path segments '
            f'starting with "/", got {len(segments) - 1}.')
    for index, literal in _CONTAINER_GROUP_ID_LITERALS:
        # ARM treats these segments case-insensitively.
        if segments[index].lower() != literal.lower():
            raise exceptions.MalformedIdentifierError(
                resource_id, f'Expected {literal!r} at segment {index}, '
                f'got {segments[index]!r}.')
    subscription_id, resource_group, name = (segments[2], segments[4],
                                             segments[8])
    if not (subscription_id and resource_group and name):
        raise exceptions.MalformedIdentifierError(
            resource_id, 'Subscription, resource group and name must be '
            'non-empty.')
    return subscription_id, resource_group, name


def _error_code(exc: Exception) -> Optional[str]:
    error = getattr(exc, 'error', None)
    return getattr(error, 'code', None)


def classify_azure_error(
        exc: Exception,
        stage: exceptions.FatalProvisionError.Stage,
        msg: str,
        allow_not_found: bool = False) -> exceptions.ProvisionError:
    """Maps an Azure SDK error into the provisioner's error taxonomy.

    The caller raises the returned error from `exc`. With `allow_not_found`,
    a not-found error maps to ResourceNotFoundError so the caller can
    recover from it. Everything else is fatal, with a reason derived from
    the error type, HTTP status and ARM error code.
    """
    azure_exceptions = azure.exceptions()
    if (allow_not_found and
            isinstance(exc, azure_exceptions.ResourceNotFoundError)):
        return exceptions.ResourceNotFoundError(msg, cause=exc)

    status_code = getattr(exc, 'status_code', None)
    error_code = _error_code(exc)
    reason = exceptions.FatalProvisionError.Reason.UNKNOWN
    if (isinstance(exc, azure_exceptions.ClientAuthenticationError) or
            status_code in (401, 403) or error_code in _AUTH_ERROR_CODES):
        reason = exceptions.FatalProvisionError.Reason.AUTH
    elif status_code == 429 or (error_code is not None and
                                'quota' in error_code.lower()):
        reason = exceptions.FatalProvisionError.Reason.QUOTA
    elif status_code == 400 or error_code in _INVALID_INPUT_ERROR_CODES:
        reason = exceptions.FatalProvisionError.Reason.INVALID_INPUT

    generic_message = msg
    if error_code is not None:
        generic_message += (f' Error code: {colorama.Style.BRIGHT}{error_code}'
                            f'{colorama.Style.RESET_ALL}.')
    first_line = str(exc).strip().split('\n')[0]
    if first_line:
        generic_message += f' Details: {first_line}'
    logger.debug(f'Azure error at stage {stage.value!r}: '
                 f'{common_utils.format_exception(exc, use_bracket=True)}')
    return exceptions.FatalProvisionError(generic_message,
                                          stage=stage,
                                          reason=reason,
                                          cause=exc)
