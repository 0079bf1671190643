"""
Hooks component - action/filter extension points for the content core.

Hook names fired by the content service:
- ``content.prepare_create`` (filter over the validated create payload)
- ``content.created`` / ``content.updated`` / ``content.deleted`` (actions)
"""

from ._impl import BAIL, DEFAULT_PRIORITY, HookRegistry, Unsubscribe

CONTENT_PREPARE_CREATE = "content.prepare_create"
CONTENT_CREATED = "content.created"
CONTENT_UPDATED = "content.updated"
CONTENT_DELETED = "content.deleted"

__all__ = [
    "BAIL",
    "DEFAULT_PRIORITY",
    "HookRegistry",
    "Unsubscribe",
    "CONTENT_PREPARE_CREATE",
    "CONTENT_CREATED",
    "CONTENT_UPDATED",
    "CONTENT_DELETED",
]
