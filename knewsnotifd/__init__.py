"""
knewsnotifd - Kernel release notifications for Discord webhooks.

Polls the kernel.org release feed on a fixed interval and posts a
notification for every newly published release to a chat webhook.
"""

__version__ = "0.3.0"
__author__ = "luxzi"
