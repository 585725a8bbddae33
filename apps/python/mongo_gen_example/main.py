"""Walk through the mongo_gen helpers against a local MongoDB.

    MONGO_URI=mongodb://localhost:27017 python apps/python/mongo_gen_example/main.py
"""

import sys

from loguru import logger

from mongo_gen import MongoDocument, MongoGenError, connect, find, find_one, save_one, settings

COLLECTION_NAME = "users"


class User(MongoDocument):
    name: str


def main() -> int:
    try:
        handler = connect(settings.db_name, settings.uri)
    except MongoGenError as exc:
        logger.error("Could not connect: {}", exc)
        return 1

    with handler:
        try:
            result = save_one(handler.db, COLLECTION_NAME, User(name="John Doe"))
            logger.info("Inserted {}", result.inserted_id)

            found = find_one(handler.db, COLLECTION_NAME, User, [("name", "John Doe")])
            logger.info("Found {!r}", found)

            users = find(handler.db, COLLECTION_NAME, User, [("name", 1)], [], 0, 10)
            logger.info("Listed {} users: {!r}", len(users), users)
        except MongoGenError as exc:
            logger.error("Mongo operation failed: {}", exc)
            return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
