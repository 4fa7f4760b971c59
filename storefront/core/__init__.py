# Core modules

from .config import Settings, get_settings
from .session import Identity, Role, SessionManager, ShopperSession

__all__ = ["Settings", "get_settings", "Identity", "Role", "SessionManager", "ShopperSession"]
