"""
Management cluster installation modules.
"""
from .components import ComponentInstaller
from .host import Host
from .uninstall import Uninstaller

__all__ = [
    'ComponentInstaller',
    'Host',
    'Uninstaller',
]
