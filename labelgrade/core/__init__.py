__all__ = [
    "BootConfiguration",
    "di",
    "LabelgradeContainer",
    "LoggingProvider",
    "Settings",
]


from . import di
from .config import Settings
from .container import BootConfiguration, LabelgradeContainer
from .provider import LoggingProvider
