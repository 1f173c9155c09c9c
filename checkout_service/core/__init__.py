# Core modules

from .config import settings, Settings
from .fields import FieldKey, ErrorKey, FieldStore
from .session import CheckoutManager, CheckoutState

__all__ = ["settings", "Settings", "FieldKey", "ErrorKey", "FieldStore", "CheckoutManager", "CheckoutState"]
