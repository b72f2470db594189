from typing import Any
from fastapi import APIRouter, Body, Depends, Request, status
from core.authorization import require_role, ROLE_OWNER, ROLE_ADMIN
from core.dependencies import get_current_user, CurrentUser
from db.db_operation import MongoConnection, get_db
from models.dish import DishCreate, DishUpdate
from services import dish_service
from utils.logger import get_logger

logger = get_logger("Dish_Route")
router = APIRouter(prefix="/dishes", tags=["Dishes"])

manager = require_role(ROLE_OWNER, ROLE_ADMIN)

# fixed paths first so they are not captured by /{dish_id}
@router.get("/available")
async def api_dishes_available_today(db: MongoConnection = Depends(get_db)):
    return await dish_service.dishes_available_today(db)

@router.get("/available/day/{day_of_week}")
async def api_dishes_available_on_day(day_of_week: str, db: MongoConnection = Depends(get_db)):
    return await dish_service.dishes_available_on_day(db, day_of_week)

@router.get("/restaurant/{restaurant_id}")
async def api_dishes_by_restaurant(restaurant_id: str, db: MongoConnection = Depends(get_db)):
    return await dish_service.dishes_by_restaurant(db, restaurant_id)

@router.get("")
async def api_list_dishes(request: Request, db: MongoConnection = Depends(get_db)):
    return await dish_service.list_dishes(db, request.query_params.multi_items())

@router.post("", status_code=status.HTTP_201_CREATED)
async def api_create_dish(
    payload: DishCreate = Body(...),
    current_user: CurrentUser = Depends(manager),
    db: MongoConnection = Depends(get_db),
):
    return await dish_service.create_dish(db, payload, current_user)

@router.get("/{dish_id}")
async def api_get_dish(dish_id: str, db: MongoConnection = Depends(get_db)):
    return await dish_service.get_dish(db, dish_id)

@router.put("/{dish_id}")
async def api_update_dish(
    dish_id: str,
    payload: DishUpdate = Body(...),
    current_user: CurrentUser = Depends(manager),
    db: MongoConnection = Depends(get_db),
):
    return await dish_service.update_dish(db, dish_id, payload, current_user)

@router.delete("/{dish_id}")
async def api_delete_dish(dish_id: str, current_user: CurrentUser = Depends(manager), db: MongoConnection = Depends(get_db)):
    return await dish_service.delete_dish(db, dish_id, current_user)

@router.get("/{dish_id}/schedule")
async def api_get_schedule(dish_id: str, db: MongoConnection = Depends(get_db)):
    return await dish_service.get_weekly_schedule(db, dish_id)

# body: {"schedule": [{"dayOfWeek": 1, "isAvailable": true}, ...]}
@router.post("/{dish_id}/schedule")
async def api_set_schedule(
    dish_id: str,
    payload: Any = Body(None),
    current_user: CurrentUser = Depends(get_current_user),
    db: MongoConnection = Depends(get_db),
):
    return await dish_service.set_weekly_schedule(db, dish_id, payload, current_user)
