from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
from core.authorization import require_role, ROLE_ADMIN
from core.dependencies import CurrentUser
from db.db_operation import MongoConnection, get_db
from services.daily_reset import reset_daily_dishes
from utils.logger import get_logger

router = APIRouter(prefix="/admin", tags=["Admin"])
logger = get_logger("Admin_Route")

@router.post("/reset-dishes")
async def api_reset_dishes(current_admin: CurrentUser = Depends(require_role(ROLE_ADMIN)), db: MongoConnection = Depends(get_db)):
    """
    Run the daily dish reset now. Same idempotent job as the 01:00 timer.
    """
    logger.info(f"Manual dish reset requested by {current_admin.email}")
    result = await reset_daily_dishes(db.dishes_collection)
    if not result["success"]:
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"success": False, "error": result["error"]},
        )
    return result
