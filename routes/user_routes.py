from fastapi import APIRouter, Body, Depends, Request, status
from core.authorization import require_role, ROLE_ADMIN
from core.dependencies import CurrentUser
from db.db_operation import MongoConnection, get_db
from models.user import UserCreate, UserUpdate
from services import user_service

# every route is admin only
admin_only = require_role(ROLE_ADMIN)
router = APIRouter(prefix="/users", tags=["Users"])

@router.get("")
async def api_list_users(request: Request, current_admin: CurrentUser = Depends(admin_only), db: MongoConnection = Depends(get_db)):
    return await user_service.list_users(db, request.query_params.multi_items())

@router.post("", status_code=status.HTTP_201_CREATED)
async def api_create_user(payload: UserCreate = Body(...), current_admin: CurrentUser = Depends(admin_only), db: MongoConnection = Depends(get_db)):
    return await user_service.create_user(db, payload, current_admin.email)

@router.get("/{user_id}")
async def api_get_user(user_id: str, current_admin: CurrentUser = Depends(admin_only), db: MongoConnection = Depends(get_db)):
    return await user_service.get_user(db, user_id)

@router.put("/{user_id}")
async def api_update_user(user_id: str, payload: UserUpdate = Body(...), current_admin: CurrentUser = Depends(admin_only), db: MongoConnection = Depends(get_db)):
    return await user_service.update_user(db, user_id, payload, current_admin.email)

@router.delete("/{user_id}")
async def api_delete_user(user_id: str, current_admin: CurrentUser = Depends(admin_only), db: MongoConnection = Depends(get_db)):
    return await user_service.delete_user(db, user_id, current_admin.email)
