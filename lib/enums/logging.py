from enum import Enum


class AdminAction(Enum):
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"


class TicketAction(Enum):
    CREATE = "create"
    CLOSE = "close"
    UPDATE = "update"
    CLAIM = "claim"
    UNCLAIM = "unclaim"


class MessageAction(Enum):
    UPDATE = "update"
    DELETE = "delete"


class AdminTargetType(Enum):
    CATEGORY = "category"
    QUESTION = "question"
    SETTINGS = "settings"
    TAG = "tag"
