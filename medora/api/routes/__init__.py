"""
API Routers

Registered on the application in medora.main.
"""
from . import dashboard, family, notifications, records, reminders, severity, superadmin, users

ALL_ROUTERS = [
    users.router,
    severity.router,
    records.router,
    reminders.router,
    notifications.router,
    family.router,
    dashboard.router,
    superadmin.router,
]

__all__ = ["ALL_ROUTERS"]
