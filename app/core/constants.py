"""Core constants: Firestore collection names and shared literal values.

Firestore has no DDL or migrations. Collections are created automatically
when the first document is written; these names are the single source of
truth for the "schema".
"""

# Collections
COLLECTION_USERS = "users"
COLLECTION_AUDIOS = "audios"
COLLECTION_SERMONS = "sermons"
COLLECTION_EVENTS = "events"
COLLECTION_POSTS = "posts"
COLLECTION_DONATIONS = "donations"
COLLECTION_SETTINGS = "settings"

# Singleton document holding live-stream status
APP_SETTINGS_DOCUMENT = "app_settings"

# Push topic every installed app subscribes to
BROADCAST_TOPIC = "all_users"

# Storage folders
FOLDER_AUDIOS = "audios"
FOLDER_THUMBNAILS = "thumbnails"
FOLDER_SERMON_IMAGES = "sermons/images"
FOLDER_SERMON_PDFS = "sermons/pdfs"
FOLDER_EVENTS = "events"
FOLDER_POST_IMAGES = "posts/images"
FOLDER_POST_VIDEOS = "posts/videos"

# Upload content types
AUDIO_MIME_TYPES = frozenset(
    {
        "audio/mpeg",
        "audio/mp3",
        "audio/wav",
        "audio/x-wav",
        "audio/m4a",
        "audio/x-m4a",
        "audio/mp4",
        "audio/aac",
    }
)
PDF_MIME_TYPES = frozenset({"application/pdf"})
IMAGE_MIME_PREFIX = "image/"
VIDEO_MIME_PREFIX = "video/"

# Firestore query directions
ASCENDING = "ASCENDING"
DESCENDING = "DESCENDING"
