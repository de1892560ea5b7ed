"""
Services Package - storage, prediction and notification delivery
"""
from .store import InMemoryStore, paginate
from .push import ExpoPushClient, is_expo_push_token
from .notifications import Notifier
from .prediction import PredictionService
from .seed import seed_wellness_tips, ensure_superadmin

__all__ = [
    "InMemoryStore",
    "paginate",
    "ExpoPushClient",
    "is_expo_push_token",
    "Notifier",
    "PredictionService",
    "seed_wellness_tips",
    "ensure_superadmin",
]
