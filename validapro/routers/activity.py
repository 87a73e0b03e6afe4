from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from validapro.config import get_settings
from validapro.core.constants import ROLES
from validapro.dependencies import CurrentUser, get_db, require_roles
from validapro.schemas.activity import ActivityRead
from validapro.services.activity_service import recent_activity

router = APIRouter(prefix="/api", tags=["Activity"])


@router.get("/activities", response_model=list[ActivityRead])
def get_recent_activity(
    limit: int | None = Query(None, ge=1, le=100),
    db: Session = Depends(get_db),
    _user: CurrentUser = Depends(require_roles(*ROLES)),
):
    return recent_activity(db, limit or get_settings().ACTIVITY_FEED_LIMIT)
