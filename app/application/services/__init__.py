"""Application services: one per resource, plus authorization and stats."""

from app.application.services.audio_service import AudioService
from app.application.services.auth_service import AuthService
from app.application.services.authorization_service import AuthorizationService
from app.application.services.content_service import ContentService
from app.application.services.donation_service import DonationService
from app.application.services.event_service import EventService
from app.application.services.live_service import LiveService
from app.application.services.post_service import PostService
from app.application.services.sermon_service import SermonService
from app.application.services.stats_service import StatsService
from app.application.services.user_service import UserService

__all__ = [
    "AudioService",
    "AuthService",
    "AuthorizationService",
    "ContentService",
    "DonationService",
    "EventService",
    "LiveService",
    "PostService",
    "SermonService",
    "StatsService",
    "UserService",
]
