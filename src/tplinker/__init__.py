from importlib.metadata import version

from .client import SmartPlugClient
from .exceptions import (
    ERROR_VARIANTS,
    CommunicationError,
    DeviceError,
    GenericError,
    ProtocolError,
    Result,
    SectionError,
    TPLinkError,
    capture,
    converted,
    to_error,
)
from .models import Outlet, SysInfo

__version__ = version("tplinker")

__all__ = [
    "ERROR_VARIANTS",
    "CommunicationError",
    "DeviceError",
    "GenericError",
    "Outlet",
    "ProtocolError",
    "Result",
    "SectionError",
    "SmartPlugClient",
    "SysInfo",
    "TPLinkError",
    "__version__",
    "capture",
    "converted",
    "to_error",
]
