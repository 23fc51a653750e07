"""
Telegram interface package.

Kept free of side-effect imports; import submodules directly, e.g.
    from amlguard.interfaces.telegram.handlers import register_all_handlers
    from amlguard.interfaces.telegram.dispatcher import MessageDispatcher
"""

__all__ = []
