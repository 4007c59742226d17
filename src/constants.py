"""Application-wide constants.

This module centralizes all magic numbers, reserved payloads and canned
reply texts to ensure a single source of truth and easier maintenance.
"""

# =============================================================================
# Facebook API
# =============================================================================

# Facebook Graph API base URL (overridable via settings)
FACEBOOK_GRAPH_API_BASE_URL = "https://graph.facebook.com"

# Facebook Graph API version (thread_settings is only served by v2.x)
FACEBOOK_GRAPH_API_VERSION = "v2.6"

# Timeout for Facebook Graph API calls (seconds)
FACEBOOK_API_TIMEOUT_SECONDS = 10.0

# Header carrying the HMAC-SHA1 signature of the webhook body
SIGNATURE_HEADER = "X-Hub-Signature"

# Profile fields requested from the User Profile API
USER_PROFILE_FIELDS = (
    "first_name",
    "last_name",
    "profile_pic",
    "locale",
    "timezone",
)

# Max chars of an error response body kept in logs
ERROR_BODY_LOG_CHARS = 500

# =============================================================================
# Reserved Postback Payloads
# =============================================================================

GET_STARTED_PAYLOAD = "GET_STARTED"
HELP_PAYLOAD = "HELP"
TASKS_PAYLOAD = "TASKS"
JOKE_PAYLOAD = "JOKE"

# Attached to every plain text message we send
DEVELOPER_METADATA = "DEVELOPER_DEFINED_METADATA"

# =============================================================================
# Canned Replies
# =============================================================================

AUTHENTICATION_SUCCESS_TEXT = "Authentication successful"
QUICK_REPLY_ACK_TEXT = "Quick reply tapped"
ATTACHMENT_ACK_TEXT = "Message with attachment received"
POSTBACK_ACK_TEXT = "Payload received."
GENERIC_GREETING_TEXT = "Hello!"

DEFAULT_GREETING_TEXT = "Hi {{user_first_name}}. Welcome to Quas!"

INTRO_MESSAGE = (
    "I'm Quas, a little helper bot living in Messenger. "
    "Say hi, tap the menu for help, or type a keyword like "
    "'image', 'button' or 'receipt' to see what I can send."
)

# Lowercased phrases answered with a greeting by name
GREETING_PHRASES = frozenset(
    {
        "hi",
        "hello",
        "hey",
        "hi there",
        "hello there",
        "hey there",
        "howdy",
        "yo",
        "good morning",
        "good afternoon",
        "good evening",
    }
)

# Number of ordered messages sent by the "sync" command
SYNC_DEMO_MESSAGE_COUNT = 5

# =============================================================================
# Account Linking
# =============================================================================

# Authorization code handed back on the authorize page; per-user in real life
DEMO_AUTHORIZATION_CODE = "1234567890"

# =============================================================================
# Static Assets (relative to SERVER_URL)
# =============================================================================

ASSET_IMAGE = "/assets/rift.png"
ASSET_GIF = "/assets/instagram_logo.gif"
ASSET_AUDIO = "/assets/sample.mp3"
ASSET_VIDEO = "/assets/allofus480.mov"
ASSET_FILE = "/assets/test.txt"
ASSET_TOUCH = "/assets/touch.png"
ASSET_RIFT_SQUARE = "/assets/riftsq.png"
ASSET_GEAR_VR_SQUARE = "/assets/gearvrsq.png"

# =============================================================================
# Graceful Shutdown
# =============================================================================

# Wait this long for background tasks to complete on shutdown (seconds)
GRACEFUL_SHUTDOWN_TIMEOUT_SECONDS = 30.0
