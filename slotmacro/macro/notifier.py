# AI GOVERNANCE:
# Apply auditor-router
# This is a CODE change

"""
User notifications
Routes messages to the host with essential/non-essential filtering
"""

from __future__ import annotations
from typing import Optional

from .models import Importance, NotifyLevel, MacroError
from .host import IEditorHost

from slotmacro.utils.logger import log

DEFAULT_TITLE = "slotmacro"


class Notifier:
    """Sends notifications to the host, honoring less_notifications"""

    def __init__(self, host: IEditorHost,
                 default_level: NotifyLevel = NotifyLevel.INFO,
                 less_notifications: bool = False,
                 title: str = DEFAULT_TITLE):
        self._host = host
        self.default_level = default_level
        self.less_notifications = less_notifications
        self.title = title

    def notify(self, message: str,
               importance: Importance = Importance.ESSENTIAL,
               level: Optional[NotifyLevel] = None) -> bool:
        """
        Show a message

        Returns:
            True if the message was sent to the host
        """
        if importance == Importance.NONESSENTIAL and self.less_notifications:
            return False
        if level is None:
            level = self.default_level
        self._host.notify(message, int(level), self.title)
        return True

    def report(self, error: MacroError) -> bool:
        """Turn a handled macro error into a notification"""
        log(f"[NOTIFY] {type(error).__name__}: {error}")
        return self.notify(str(error), error.importance, error.level)
