from .loader import load_config, load_roles
from .models import RBACConfig, RBACSettings, RolegateConfig

__all__ = [
    "RBACConfig",
    "RBACSettings",
    "RolegateConfig",
    "load_config",
    "load_roles",
]
