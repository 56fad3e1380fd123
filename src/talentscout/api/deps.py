"""FastAPI dependency injection for the career engine."""

from __future__ import annotations

import asyncio
from typing import Annotated

from fastapi import Depends, Request

from talentscout.core.engine import CareerEngine


async def get_engine(request: Request) -> CareerEngine:
    """Get the career engine from app state."""
    return request.app.state.engine


async def get_engine_lock(request: Request) -> asyncio.Lock:
    """Commands are applied one at a time; the lock serializes them."""
    return request.app.state.engine_lock


EngineDep = Annotated[CareerEngine, Depends(get_engine)]
LockDep = Annotated[asyncio.Lock, Depends(get_engine_lock)]
