"""Domain ports - abstract contracts implemented by infrastructure."""

from .control_plane_port import ControlPlanePort
from .rendering_port import UserDataRenderingPort
from .user_interface_port import UserInterfacePort

__all__ = [
    "ControlPlanePort",
    "UserDataRenderingPort",
    "UserInterfacePort",
]
