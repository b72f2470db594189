# routes/restaurant_routes.py
from fastapi import APIRouter, Body, Depends, Request, status
from core.authorization import require_role, ROLE_OWNER, ROLE_ADMIN
from core.dependencies import get_current_user, CurrentUser
from db.db_operation import MongoConnection, get_db
from models.restaurant import RestaurantCreate, RestaurantUpdate
from services import restaurant_service
from utils.logger import get_logger

logger = get_logger("Restaurant_Route")
router = APIRouter(prefix="/restaurants", tags=["Restaurants"])

# Public: restaurants within `distance` km of "lat,lng"
@router.get("/radius/{coordinates}/{distance}")
async def api_restaurants_in_radius(coordinates: str, distance: str, db: MongoConnection = Depends(get_db)):
    return await restaurant_service.restaurants_in_radius(db, coordinates, distance)

# Public: filtered / sorted / paginated listing, optional lat+lng+maxDistance
@router.get("")
async def api_list_restaurants(request: Request, db: MongoConnection = Depends(get_db)):
    return await restaurant_service.list_restaurants(db, request.query_params.multi_items())

@router.get("/{restaurant_id}")
async def api_get_restaurant(restaurant_id: str, db: MongoConnection = Depends(get_db)):
    return await restaurant_service.get_restaurant(db, restaurant_id)

# Owner / admin: the requester becomes the owner
@router.post("", status_code=status.HTTP_201_CREATED)
async def api_create_restaurant(
    payload: RestaurantCreate = Body(...),
    current_user: CurrentUser = Depends(get_current_user),
    db: MongoConnection = Depends(get_db),
):
    return await restaurant_service.create_restaurant(db, payload, current_user)

@router.put("/{restaurant_id}")
async def api_update_restaurant(
    restaurant_id: str,
    payload: RestaurantUpdate = Body(...),
    current_user: CurrentUser = Depends(require_role(ROLE_OWNER, ROLE_ADMIN)),
    db: MongoConnection = Depends(get_db),
):
    return await restaurant_service.update_restaurant(db, restaurant_id, payload, current_user)

@router.delete("/{restaurant_id}")
async def api_delete_restaurant(
    restaurant_id: str,
    current_user: CurrentUser = Depends(require_role(ROLE_OWNER, ROLE_ADMIN)),
    db: MongoConnection = Depends(get_db),
):
    return await restaurant_service.delete_restaurant(db, restaurant_id, current_user)
