"""
FastAPI dependencies shared by the v1 routers.
"""

from datetime import datetime, timezone
from typing import Annotated, Callable, Optional

from fastapi import Depends

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def get_clock() -> Clock:
    """Source of "now" when a request does not pin an evaluation time. Overridden in tests."""
    return utc_now


ClockDep = Annotated[Clock, Depends(get_clock)]


def resolve_now(clock: Clock, at: Optional[datetime]) -> datetime:
    return at if at is not None else clock()
