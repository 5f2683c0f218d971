"""Strongly typed identifiers.

Using NewType for strong typing prevents mixing up local account ids with
Telegram user ids.
"""

from typing import NewType
from uuid import UUID

# Local account id, owned by the account store
AccountId = NewType("AccountId", UUID)

# Stable numeric id of a Telegram user
TelegramUserId = NewType("TelegramUserId", int)
