"""NickServ identity and nickname-recovery plugin for IRC bots."""

from nickserv.classifier import NoticeClassifier, NoticeIntent, PatternClassifier
from nickserv.config import NickServConfig
from nickserv.core.errors import NickServConfigurationError, NickServError
from nickserv.events import EventKind, HandlerTable
from nickserv.plugin import NickServPlugin
from nickserv.recovery import Idle, PendingReclamation

__version__ = "0.1.0"

__all__ = [
    "EventKind",
    "HandlerTable",
    "Idle",
    "NickServConfig",
    "NickServConfigurationError",
    "NickServError",
    "NickServPlugin",
    "NoticeClassifier",
    "NoticeIntent",
    "PatternClassifier",
    "PendingReclamation",
    "__version__",
]
