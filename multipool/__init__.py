"""Constant product AMM hosting many token-pair pools in one shared store."""

from multipool.manager import PoolManager, get_default_manager

__version__ = "0.1.0"
__all__ = ["PoolManager", "get_default_manager", "__version__"]
