from datetime import datetime, timedelta, timezone
from fastapi import APIRouter, Body, Depends, status
from fastapi.responses import JSONResponse
from core.dependencies import get_current_user, CurrentUser, TOKEN_COOKIE
from db.db_operation import MongoConnection, get_db
from models.user import UserRegister, UserLogin, UpdateDetails, UpdatePassword
from services import user_service
from settings.config import settings
from utils.jwt_handler import create_access_token
from utils.serializers import serialize_document
from utils.logger import get_logger

logger = get_logger("AUTH_ROUTE")

router = APIRouter(prefix="/auth", tags=["Authentication"])

def send_token_response(user: dict, status_code: int = status.HTTP_200_OK) -> JSONResponse:
    """Token in the body and as an HTTP-only cookie."""
    token = create_access_token(str(user["_id"]))
    response = JSONResponse(
        status_code=status_code,
        content={"success": True, "token": token, "data": serialize_document(user)},
    )
    response.set_cookie(
        key=TOKEN_COOKIE,
        value=token,
        expires=datetime.now(timezone.utc) + timedelta(days=settings.JWT_COOKIE_EXPIRE_DAYS),
        httponly=True,
        secure=settings.is_production,
    )
    return response

@router.post("/register")
async def register(payload: UserRegister = Body(...), db: MongoConnection = Depends(get_db)):
    user = await user_service.register_user(db, payload)
    logger.info(f"User registered with email: {payload.email}")
    return send_token_response(user, status.HTTP_201_CREATED)

@router.post("/login")
async def login(payload: UserLogin = Body(...), db: MongoConnection = Depends(get_db)):
    logger.info(f"Login attempt for: {payload.email}")
    user = await user_service.authenticate(db, payload.email, payload.password)
    return send_token_response(user)

@router.get("/me")
async def me(current_user: CurrentUser = Depends(get_current_user), db: MongoConnection = Depends(get_db)):
    return await user_service.get_user(db, current_user.id)

@router.put("/updatedetails")
async def update_details(
    payload: UpdateDetails = Body(...),
    current_user: CurrentUser = Depends(get_current_user),
    db: MongoConnection = Depends(get_db),
):
    return await user_service.update_details(db, current_user.id, payload)

@router.put("/updatepassword")
async def update_password(
    payload: UpdatePassword = Body(...),
    current_user: CurrentUser = Depends(get_current_user),
    db: MongoConnection = Depends(get_db),
):
    user = await user_service.change_password(db, current_user.id, payload)
    return send_token_response(user)
