"""Application-wide constants."""

# ──────────────────────────────────────────────────────────────────────
# Users
# ──────────────────────────────────────────────────────────────────────

# Role given to every registered user, in both Stream and the database
USER_ROLE = "user"

# ──────────────────────────────────────────────────────────────────────
# AI channel mirroring
# ──────────────────────────────────────────────────────────────────────

AI_CHANNEL_TYPE = "messaging"
AI_CHANNEL_NAME = "AI chat"
AI_CHANNEL_PREFIX = "chat-"

# ──────────────────────────────────────────────────────────────────────
# Error messages
# ──────────────────────────────────────────────────────────────────────

MSG_REGISTER_FIELDS_REQUIRED = "Name and email are required"
MSG_CHAT_FIELDS_REQUIRED = "Message and user are required"
MSG_HISTORY_FIELDS_REQUIRED = "User id is required"
MSG_USER_NOT_IN_DIRECTORY = "User not found, please, register first"
MSG_USER_NOT_IN_STORE = "User is not found, please register"
MSG_INTERNAL_ERROR = "Internal Server Error"
MSG_UPSTREAM_TIMEOUT = "Upstream request timed out"
MSG_INVALID_BODY = "Request body must be a JSON object"
