"""
Request-scoped accessors for the services created at application start-up.
"""
from fastapi import Request

from medora.services import InMemoryStore, Notifier, PredictionService


def get_store(request: Request) -> InMemoryStore:
    return request.app.state.store


def get_notifier(request: Request) -> Notifier:
    return request.app.state.notifier


def get_prediction_service(request: Request) -> PredictionService:
    return request.app.state.prediction_service
