from unittest import mock

from azure.core import exceptions as azure_exceptions
import pytest

from inlets import exceptions
from inlets.provision.azure import utils
from inlets.utils import status_lib

Stage = exceptions.FatalProvisionError.Stage
Reason = exceptions.FatalProvisionError.Reason


def _error(cls=azure_exceptions.HttpResponseError,
           status_code=None,
           code=None,
           message='Operation failed.\nMore details on the next line.'):
    err = cls(message=message)
    err.status_code = status_code
    err.error = None if code is None else mock.Mock(code=code)
    return err


@pytest.mark.parametrize('error,reason', [
    (_error(azure_exceptions.ClientAuthenticationError), Reason.AUTH),
    (_error(status_code=401), Reason.AUTH),
    (_error(status_code=403), Reason.AUTH),
    (_error(status_code=409, code='AuthorizationFailed'), Reason.AUTH),
    (_error(status_code=429), Reason.QUOTA),
    (_error(status_code=409, code='QuotaExceeded'), Reason.QUOTA),
    (_error(status_code=400), Reason.INVALID_INPUT),
    (_error(status_code=409, code='InvalidResourceName'),
     Reason.INVALID_INPUT),
    (_error(status_code=500), Reason.UNKNOWN),
    (azure_exceptions.ServiceRequestError('connection reset'),
     Reason.UNKNOWN),
])
def test_classify_azure_error_reason(error, reason):
    err = utils.classify_azure_error(error, Stage.CONTAINER_GROUP,
                                     'Failed to update container group.')
    assert isinstance(err, exceptions.FatalProvisionError)
    assert err.reason == reason
    assert err.stage == Stage.CONTAINER_GROUP
    assert err.cause is error


def test_classify_azure_error_message():
    err = utils.classify_azure_error(_error(status_code=409,
                                            code='Conflict'), Stage.WAIT,
                                     'Failed to wait.')
    message = str(err)
    assert message.startswith('[wait for completion]')
    assert 'Failed to wait.' in message
    assert 'Conflict' in message
    assert 'Operation failed.' in message
    assert 'More details' not in message


def test_classify_not_found():
    error = _error(azure_exceptions.ResourceNotFoundError, status_code=404)
    err = utils.classify_azure_error(error,
                                     Stage.RESOURCE_GROUP,
                                     'Failed to get resource group.',
                                     allow_not_found=True)
    assert isinstance(err, exceptions.ResourceNotFoundError)
    assert not isinstance(err, exceptions.FatalProvisionError)
    assert err.cause is error


def test_classify_not_found_is_fatal_unless_allowed():
    error = _error(azure_exceptions.ResourceNotFoundError, status_code=404)
    err = utils.classify_azure_error(error, Stage.CONTAINER_GROUP, 'Failed.')
    assert isinstance(err, exceptions.FatalProvisionError)
    assert err.reason == Reason.UNKNOWN


@pytest.mark.parametrize('state,ip,status', [
    ('Succeeded', '20.1.2.3', status_lib.HostStatus.ACTIVE),
    ('succeeded', '20.1.2.3', status_lib.HostStatus.ACTIVE),
    ('Succeeded', '', status_lib.HostStatus.PROVISIONING),
    ('Creating', '20.1.2.3', status_lib.HostStatus.PROVISIONING),
    ('Updating', None, status_lib.HostStatus.PROVISIONING),
    ('Failed', '', status_lib.HostStatus.FAILED),
    ('Canceled', '', status_lib.HostStatus.FAILED),
    ('SomethingNew', '', status_lib.HostStatus.PROVISIONING),
    (None, '20.1.2.3', status_lib.HostStatus.PROVISIONING),
])
def test_host_status_from_azure(state, ip, status):
    assert status_lib.HostStatus.from_azure(state, ip) == status
