"""Constants used by the provisioners."""
from typing import List

# Tunnel server container. Every value can be overridden per backend in the
# config file, e.g. `azure.image`.
TUNNEL_SERVER_IMAGE = 'jpangms/inlets:2.4.1'
TUNNEL_CONTAINER_NAME = 'inlets'
# Port the tunnel server exposes to the internet.
DATA_PORT = 80
# Port the inlets client connects to over websocket.
CONTROL_PORT = 8000
TOKEN_ENV_VAR = 'INLETSTOKEN'
MEMORY_GB = 0.5
CPU = 1.0

POLL_INTERVAL_SECONDS = 1
PROVISION_TIMEOUT_SECONDS = 600


def tunnel_server_command(token: str, data_port: int,
                          control_port: int) -> List[str]:
    return [
        'inlets',
        'server',
        f'--port={data_port}',
        f'--control-port={control_port}',
        f'--token={token}',
    ]
