from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from validapro.core.security import create_access_token
from validapro.dependencies import get_db
from validapro.schemas.auth import LoginRequest, TokenResponse
from validapro.services.user_service import authenticate

router = APIRouter(prefix="/auth", tags=["Auth"])


@router.post("/login", response_model=TokenResponse)
def login(payload: LoginRequest, db: Session = Depends(get_db)):
    user = authenticate(db, payload.username, payload.password)
    if user is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid credentials")
    token = create_access_token(user.id, user.role, user.store_id)
    return TokenResponse(token=token, role=user.role, store_id=user.store_id)
