"""
FastAPI dependencies resolving the services wired onto app.state.
"""

from typing import Annotated

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from print_queue.config import Settings
from print_queue.db.users import UserRepository
from print_queue.queue import HistoryService, QueueEngine


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_session_factory(request: Request) -> async_sessionmaker[AsyncSession]:
    return request.app.state.session_factory


def get_queue_engine(request: Request) -> QueueEngine:
    return request.app.state.queue_engine


def get_history_service(request: Request) -> HistoryService:
    return request.app.state.history_service


def get_user_repository(request: Request) -> UserRepository:
    return request.app.state.users


SettingsDep = Annotated[Settings, Depends(get_app_settings)]
SessionFactoryDep = Annotated[async_sessionmaker[AsyncSession], Depends(get_session_factory)]
QueueEngineDep = Annotated[QueueEngine, Depends(get_queue_engine)]
HistoryServiceDep = Annotated[HistoryService, Depends(get_history_service)]
UserRepositoryDep = Annotated[UserRepository, Depends(get_user_repository)]
