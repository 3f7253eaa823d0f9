"""Azure container instance provisioning."""
import dataclasses
import typing
from typing import Any, Optional

from inlets import exceptions
from inlets import inlets_config
from inlets import inlets_logging
from inlets.adaptors import azure
from inlets.provision import common
from inlets.provision import constants
from inlets.provision.azure import config as config_lib
from inlets.provision.azure import utils
from inlets.utils import context as context_lib
from inlets.utils import status_lib

if typing.TYPE_CHECKING:
    from azure.mgmt.containerinstance import models as aci_models

logger = inlets_logging.init_logger(__name__)

_SUBSCRIPTION_ID_KEY = 'subscriptionID'
_SUCCEEDED_STATE = 'succeeded'

Stage = exceptions.FatalProvisionError.Stage


@dataclasses.dataclass
class AzureHost(common.BasicHost):
    """A BasicHost with its Azure scope resolved."""
    subscription_id: str = ''

    @classmethod
    def from_basic_host(
            cls, host: common.BasicHost,
            default_subscription_id: Optional[str]) -> 'AzureHost':
        subscription_id = (host.additional.get(_SUBSCRIPTION_ID_KEY) or
                           default_subscription_id)
        if not subscription_id:
            raise exceptions.FatalProvisionError(
                f'No Azure subscription for host {host.name!r}: set '
                f'additional[{_SUBSCRIPTION_ID_KEY!r}] or subscriptionId in '
                'the credentials file.',
                stage=Stage.RESOURCE_GROUP,
                reason=exceptions.FatalProvisionError.Reason.INVALID_INPUT)
        return cls(name=host.name,
                   region=host.region,
                   token=host.token,
                   additional=dict(host.additional),
                   subscription_id=subscription_id)


def _azure_config(key: str, default: Any) -> Any:
    return inlets_config.get_nested(('azure', key), default)


def _container_group_ip(cg: Any) -> str:
    ip_address = getattr(cg, 'ip_address', None)
    if ip_address is None:
        return ''
    return ip_address.ip or ''


def new_container_group(host: AzureHost) -> 'aci_models.ContainerGroup':
    """Builds the container group running the tunnel server for `host`."""
    models = azure.azure_mgmt_models('container')
    data_port = _azure_config('data_port', constants.DATA_PORT)
    control_port = _azure_config('control_port', constants.CONTROL_PORT)
    memory_gb = _azure_config('memory_gb', constants.MEMORY_GB)
    cpu = _azure_config('cpu', constants.CPU)
    ports = [data_port, control_port]
    container = models.Container(
        name=constants.TUNNEL_CONTAINER_NAME,
        image=_azure_config('image', constants.TUNNEL_SERVER_IMAGE),
        command=constants.tunnel_server_command(host.token, data_port,
                                                control_port),
        ports=[models.ContainerPort(port=p, protocol='TCP') for p in ports],
        environment_variables=[
            models.EnvironmentVariable(name=constants.TOKEN_ENV_VAR,
                                       secure_value=host.token)
        ],
        resources=models.ResourceRequirements(
            requests=models.ResourceRequests(memory_in_gb=memory_gb, cpu=cpu),
            limits=models.ResourceLimits(memory_in_gb=memory_gb, cpu=cpu)))
    return models.ContainerGroup(
        location=host.region,
        containers=[container],
        os_type='Linux',
        ip_address=models.IpAddress(
            type='Public',
            ports=[models.Port(port=p, protocol='TCP') for p in ports]))


def wait_for_container_group(client: Any, resource_group: str, name: str,
                             container_group: Any, ctx: context_lib.Context,
                             poll_interval: float) -> Any:
    """Polls a container group until its provisioning state is terminal.

    `container_group` is the backend's view returned by the submission.
    Polling runs in the calling thread between `ctx.sleep` slices, so a
    canceled or expired `ctx` ends the wait with nothing left running.

    Returns:
        The container group in the succeeded state.

    Raises:
        ProvisionCancelledError: `ctx` was canceled or expired first.
        FatalProvisionError: the container group ended up failed or could
            not be read (stage WAIT).
    """
    cg = container_group
    while True:
        state = getattr(cg, 'provisioning_state', None) or ''
        if state.lower() == _SUCCEEDED_STATE:
            return cg
        if (status_lib.HostStatus.from_azure(state, None) ==
                status_lib.HostStatus.FAILED):
            raise exceptions.FatalProvisionError(
                f'Container group {name!r} is in state {state!r}.',
                stage=Stage.WAIT)
        logger.debug(f'Waiting for container group {name!r} '
                     f'(state: {state or "<unknown>"}).')
        ctx.sleep(poll_interval)
        ctx.check(Stage.WAIT.value)
        try:
            cg = client.container_groups.get(resource_group, name)
        except azure.exceptions().AzureError as e:
            raise utils.classify_azure_error(
                e, Stage.WAIT,
                f'Failed to get container group {name!r}.') from e


class AzureProvisioner(common.Provisioner):
    """Runs tunnel servers on Azure Container Instances.

    Each host gets a resource group and a container group, both named after
    the host. The host id is the container group's ARM resource id.
    """

    NAME = 'azure'

    def __init__(self, credentials_path: Optional[str] = None):
        auth = azure.load_auth_file(credentials_path)
        self._credential = azure.get_credential(auth)
        self._default_subscription_id: Optional[str] = auth.get(
            'subscriptionId')
        self._base_url = azure.resource_manager_endpoint(auth)

    def _client(self, name: str, subscription_id: str) -> Any:
        return azure.get_client(name,
                                self._credential,
                                subscription_id,
                                base_url=self._base_url)

    def provision(
            self,
            host: common.BasicHost,
            ctx: Optional[context_lib.Context] = None
    ) -> common.ProvisionedHost:
        ctx = context_lib.resolve(
            ctx,
            default_timeout=_azure_config('provision_timeout_seconds',
                                          constants.PROVISION_TIMEOUT_SECONDS))
        ctx.check(Stage.RESOURCE_GROUP.value)
        az_host = AzureHost.from_basic_host(host,
                                            self._default_subscription_id)
        logger.info(f'Provisioning host {az_host.name!r} in '
                    f'{az_host.region} (subscription: '
                    f'{az_host.subscription_id}).')
        config_lib.bootstrap_resource_group(
            self._client('resource', az_host.subscription_id), az_host.name,
            az_host.region)
        ctx.check(Stage.CONTAINER_GROUP.value)
        return self._provision_container_group(az_host, ctx)

    def _provision_container_group(
            self, host: AzureHost,
            ctx: context_lib.Context) -> common.ProvisionedHost:
        client = self._client('container', host.subscription_id)
        container_group = new_container_group(host)
        try:
            # polling=False returns the PUT response without starting the
            # SDK's polling thread; wait_for_container_group polls instead.
            poller = client.container_groups.begin_create_or_update(
                resource_group_name=host.name,
                container_group_name=host.name,
                container_group=container_group,
                polling=False)
        except azure.exceptions().AzureError as e:
            raise utils.classify_azure_error(
                e, Stage.CONTAINER_GROUP,
                f'Failed to update container group {host.name!r}.') from e
        try:
            submitted = poller.result()
        except azure.exceptions().AzureError as e:
            raise utils.classify_azure_error(
                e, Stage.RESULT,
                f'Failed to read container group {host.name!r}.') from e
        if submitted is None:
            raise exceptions.FatalProvisionError(
                f'Container group {host.name!r} update returned no result.',
                stage=Stage.RESULT)

        cg = wait_for_container_group(
            client, host.name, host.name, submitted, ctx,
            _azure_config('poll_interval_seconds',
                          constants.POLL_INTERVAL_SECONDS))
        if not getattr(cg, 'id', None):
            raise exceptions.FatalProvisionError(
                f'Container group {host.name!r} has no resource id.',
                stage=Stage.RESULT)
        ip = _container_group_ip(cg)
        state = getattr(cg, 'provisioning_state', None)
        status = status_lib.HostStatus.from_azure(state, ip)
        logger.info(f'Container group {host.name!r} provisioned '
                    f'(state: {state}, ip: {ip or "<pending>"}).')
        return common.ProvisionedHost(id=cg.id, ip=ip, status=status.value)

    def status(
            self,
            host_id: str,
            ctx: Optional[context_lib.Context] = None
    ) -> common.ProvisionedHost:
        ctx = context_lib.resolve(ctx)
        subscription_id, resource_group, name = (
            utils.parse_container_group_id(host_id))
        ctx.check(Stage.STATUS.value)
        client = self._client('container', subscription_id)
        try:
            cg = client.container_groups.get(resource_group, name)
        except azure.exceptions().AzureError as e:
            err = utils.classify_azure_error(
                e,
                Stage.STATUS,
                f'Failed to get container group {name!r}.',
                allow_not_found=True)
            if isinstance(err, exceptions.ResourceNotFoundError):
                raise exceptions.HostNotFoundError(host_id, cause=e) from e
            raise err from e

        state = cg.provisioning_state
        ip = _container_group_ip(cg)
        status = status_lib.HostStatus.from_azure(state, ip)
        if status != status_lib.HostStatus.ACTIVE:
            raise exceptions.HostNotReadyError(state, ip, status.value)
        return common.ProvisionedHost(id=cg.id or host_id,
                                      ip=ip,
                                      status=status.value)

    def __repr__(self) -> str:
        return (f'AzureProvisioner(subscription='
                f'{self._default_subscription_id!r})')
