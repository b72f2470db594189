# scripts/seed_admin.py
import argparse
import asyncio
from datetime import datetime, timezone
from db.db_operation import MongoConnection
from settings.config import settings
from models.user import normalize_email
from utils.hash import hash_password
from utils.logger import get_logger

logger = get_logger("SEED_ADMIN")

async def seed(email: str, password: str, name: str):
    email = normalize_email(email)
    mongo = MongoConnection(settings.MONGO_URI, settings.DB_NAME)
    try:
        await mongo.connect()
        await mongo.create_indexes()
        users = mongo.users_collection
        existing = await users.find_one({"email": email})
        if existing:
            if existing.get("role") != "admin":
                await users.update_one({"_id": existing["_id"]}, {"$set": {"role": "admin", "updatedAt": datetime.now(timezone.utc)}})
                logger.info(f"Existing user {email} promoted to admin")
            else:
                logger.info(f"Admin {email} already exists")
            return
        now = datetime.now(timezone.utc)
        result = await users.insert_one({
            "name": name,
            "email": email,
            "password": hash_password(password),
            "role": "admin",
            "favorites": [],
            "createdAt": now,
            "updatedAt": now,
        })
        logger.info(f"Created admin {email} with id {result.inserted_id}")
    finally:
        mongo.close()

if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Create (or promote) the platform admin account")
    parser.add_argument("--email", default="admin@dailymeal.com")
    parser.add_argument("--password", default="Admin@123")
    parser.add_argument("--name", default="Platform Admin")
    args = parser.parse_args()
    asyncio.run(seed(args.email, args.password, args.name))
