__all__ = [
    "GradingWebSettings",
    "LoggingSettings",
    "ServeSettings",
    "Settings",
    "WebSettings",
]


from .logging import LoggingSettings
from .settings import Settings
from .web import GradingWebSettings, ServeSettings, WebSettings
