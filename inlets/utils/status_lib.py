"""Host status."""
import enum
from typing import Dict, Optional


class HostStatus(enum.Enum):
    """Coarse-grained host status reported back to the controller."""
    # The tunnel server is up and has a public address.
    ACTIVE = 'active'
    # The backend is still creating or updating the host.
    PROVISIONING = 'provisioning'
    # The backend gave up on the host; it needs to be provisioned again.
    FAILED = 'failed'

    @classmethod
    def azure_provisioning_state_map(cls) -> Dict[str, 'HostStatus']:
        return {
            'pending': cls.PROVISIONING,
            'creating': cls.PROVISIONING,
            'updating': cls.PROVISIONING,
            'repairing': cls.PROVISIONING,
            # Succeeded only means the container group was accepted. The
            # host is not ready until it also has a public IP.
            'succeeded': cls.PROVISIONING,
            'failed': cls.FAILED,
            'canceled': cls.FAILED,
            'unhealthy': cls.FAILED,
            'deleting': cls.FAILED,
        }

    @classmethod
    def from_azure(cls, provisioning_state: Optional[str],
                   ip: Optional[str]) -> 'HostStatus':
        """Maps a container group's provisioning state and IP to a status."""
        if provisioning_state is None:
            return cls.PROVISIONING
        state = provisioning_state.lower()
        if state == 'succeeded' and ip:
            return cls.ACTIVE
        return cls.azure_provisioning_state_map().get(state, cls.PROVISIONING)
