import json
import threading
import time
from typing import Any, Dict, List, Optional
from unittest import mock

from azure.core import polling
import pytest

from inlets import inlets_config
from inlets.adaptors import azure as azure_adaptor
from inlets.provision.azure import instance
from inlets.utils import context

SUBSCRIPTION_ID = 'fea5a321-93e4-4a5b-9f44-8aefa414257d'


@pytest.fixture(autouse=True)
def empty_config(monkeypatch):
    """Runs every test against an empty user config."""
    monkeypatch.delenv(inlets_config.ENV_VAR_INLETS_CONFIG, raising=False)
    monkeypatch.setattr(inlets_config, '_loaded_config',
                        inlets_config.Config())


@pytest.fixture(autouse=True)
def reset_context():
    """Tests must not leak an installed context into each other."""
    token = context._CONTEXT.set(None)
    yield
    context._CONTEXT.reset(token)


@pytest.fixture
def auth_file(tmp_path):
    """Writes an SDK auth file as produced by `az ... --sdk-auth`."""

    def _write(**overrides: Any) -> str:
        auth: Dict[str, Any] = {
            'clientId': 'client-id',
            'clientSecret': 'client-secret',
            'subscriptionId': SUBSCRIPTION_ID,
            'tenantId': 'tenant-id',
            'activeDirectoryEndpointUrl': 'https://login.microsoftonline.com',
            'resourceManagerEndpointUrl': 'https://management.azure.com/',
        }
        auth.update(overrides)
        auth = {k: v for k, v in auth.items() if v is not None}
        path = tmp_path / 'azure_auth.json'
        path.write_text(json.dumps(auth), encoding='utf-8')
        return str(path)

    return _write


class PendingPolling(polling.PollingMethod):
    """Polling method of an operation that never finishes.

    An `LROPoller` runs it on a daemon thread that keeps polling until the
    process exits.
    """

    def initialize(self, client, initial_response, deserialization_callback):
        del client, deserialization_callback
        self._resource = initial_response
        self.polls = 0

    def run(self):
        while True:
            self.polls += 1
            time.sleep(0.01)

    def status(self) -> str:
        return 'InProgress'

    def finished(self) -> bool:
        return False

    def resource(self):
        return self._resource


def make_poller(initial: Any, polling_arg: Any = True) -> polling.LROPoller:
    """Builds the poller `begin_create_or_update` returns.

    As in the SDK, `polling=False` wraps the PUT response in NoPolling and
    starts no thread. Otherwise the operation is polled on a background
    thread, and here it never finishes.
    """
    method = (polling.NoPolling()
              if polling_arg is False else PendingPolling())
    return polling.LROPoller(None, initial, lambda response: response, method)


def set_submit_result(container_client: Any, initial: Any) -> None:
    """Makes the container group PUT return `initial`."""

    def _begin(resource_group_name,
               container_group_name,
               container_group,
               polling=True):
        del resource_group_name, container_group_name, container_group
        return make_poller(initial, polling)

    container_client.container_groups.begin_create_or_update.side_effect = (
        _begin)


def lro_threads() -> List[threading.Thread]:
    return [
        t for t in threading.enumerate()
        if t.name.startswith('LROPoller') and t.is_alive()
    ]


def make_container_group(name: str = 'inlets',
                         resource_group: Optional[str] = None,
                         state: Optional[str] = 'Succeeded',
                         ip: Optional[str] = '20.1.2.3',
                         subscription_id: str = SUBSCRIPTION_ID) -> mock.Mock:
    """Backend view of a container group."""
    resource_group = resource_group or name
    cg = mock.Mock()
    cg.id = (f'/subscriptions/{subscription_id}/resourceGroups/'
             f'{resource_group}/providers/Microsoft.ContainerInstance/'
             f'containerGroups/{name}')
    cg.name = name
    cg.provisioning_state = state
    cg.ip_address = None if ip is None else mock.Mock(ip=ip)
    return cg


@pytest.fixture
def clients():
    """Fake resource and container instance management clients."""
    resource_client = mock.MagicMock(name='resource_client')
    resource_client.resource_groups.create_or_update.side_effect = (
        lambda name, group: group)
    container_client = mock.MagicMock(name='container_client')
    set_submit_result(container_client, make_container_group())
    return {'resource': resource_client, 'container': container_client}


@pytest.fixture
def get_client_calls(monkeypatch, clients):
    calls = []

    def _get_client(name, credential, subscription_id, base_url=None):
        calls.append((name, credential, subscription_id, base_url))
        return clients[name]

    monkeypatch.setattr(azure_adaptor, 'get_client', _get_client)
    return calls


@pytest.fixture
def provisioner(monkeypatch, auth_file, get_client_calls):
    """An AzureProvisioner wired to the fake clients."""
    monkeypatch.setattr(azure_adaptor, 'get_credential',
                        lambda auth: 'fake-credential')
    return instance.AzureProvisioner(credentials_path=auth_file())


@pytest.fixture
def submit_result(clients):
    """Sets the container group returned by the PUT."""
    return lambda initial: set_submit_result(clients['container'], initial)


@pytest.fixture
def sdk_poller():
    return make_poller


@pytest.fixture
def running_lro_threads():
    return lro_threads


@pytest.fixture
def container_group_factory():
    return make_container_group


@pytest.fixture
def subscription_id():
    return SUBSCRIPTION_ID
