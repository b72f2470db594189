from motor.motor_asyncio import AsyncIOMotorClient
from pymongo import ASCENDING, GEOSPHERE
from fastapi import Request
from utils.logger import get_logger

logger = get_logger("DB_OPERATION")

class MongoConnection:
    def __init__(self, mongo_uri: str, db_name: str):
        logger.info("Initializing MongoDB Connection")
        # tz_aware so availableDate windows compare as aware datetimes
        self.client = AsyncIOMotorClient(mongo_uri, tz_aware=True)
        self.db_name = db_name
        self.db = self.client[db_name]
        self.users_collection = self.db["users"]
        self.restaurants_collection = self.db["restaurants"]
        self.dishes_collection = self.db["dishes"]

    async def connect(self):
        try:
            # Force an actual connection & authentication check
            await self.db.command("ping")
            logger.info("Successfully connected to MongoDB and authenticated.")
            logger.info(f"Using Database: {self.db_name}")
        except Exception as e:
            logger.error(f"Could not connect to MongoDB: {e}")
            raise

    async def create_indexes(self):
        await self.users_collection.create_index("email", unique=True)
        await self.restaurants_collection.create_index([("location", GEOSPHERE)])
        await self.restaurants_collection.create_index("owner")
        await self.dishes_collection.create_index("restaurant")
        await self.dishes_collection.create_index([("availableDate", ASCENDING), ("isAvailable", ASCENDING)])
        await self.dishes_collection.create_index("weeklySchedule.dayOfWeek")
        logger.info("Indexes created")

    def close(self):
        self.client.close()
        logger.info("MongoDB connection closed")


def get_db(request: Request) -> MongoConnection:
    """Store handle of the running application context."""
    return request.app.state.context.mongo
