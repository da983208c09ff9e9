"""Root API router."""

from __future__ import annotations

from fastapi import APIRouter

from pipeline_crm.api.routes import (
    activities,
    attachments,
    auth,
    health,
    interlocutors,
    next_actions,
    prospects,
    users,
)


def get_api_router(prefix: str = "/api") -> APIRouter:
    api_router = APIRouter(prefix=prefix)
    api_router.include_router(health.router)
    api_router.include_router(auth.router)
    api_router.include_router(prospects.router)
    api_router.include_router(next_actions.router)
    api_router.include_router(interlocutors.router)
    api_router.include_router(activities.router)
    api_router.include_router(attachments.router)
    api_router.include_router(users.router)
    return api_router
