"""
Channels Module
===============

Front ends driving a bot.
"""

from .shell import ShellChannel, QUIT_COMMAND

__all__ = ["ShellChannel", "QUIT_COMMAND"]
