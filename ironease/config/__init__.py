"""
Portal config: load from env with load_portal_config().
"""
from ironease.config.portal import PortalConfig, load_portal_config

__all__ = [
    "PortalConfig",
    "load_portal_config",
]
