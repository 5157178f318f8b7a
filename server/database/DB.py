import logging
import socket
from motor.motor_asyncio import AsyncIOMotorClient
from fastapi import Request

from config.config import MONGODB_URI, MONGODB_USERNAME, MONGODB_PASSWORD, CLUSTER_NAME, APP_NAME, DATABASE_NAME
from helpers.DateTimeSerializer import DateTimeSerializerVisitor

logger = logging.getLogger(__name__)

def get_db(request: Request):
    """Dependency to get database instance from app state"""
    return getattr(request.app.state, "db", None)

class Database:
    def __init__(self, uri=None, database_name=None):
        self.MONGO_URI = uri or MONGODB_URI or f"mongodb+srv://{MONGODB_USERNAME}:{MONGODB_PASSWORD}@{CLUSTER_NAME}.mongodb.net/?retryWrites=true&w=majority&appName={APP_NAME}"
        self.database_name = database_name or DATABASE_NAME
        self.client = None
        self.db = None

    def connect(self):
        self.client = AsyncIOMotorClient(self.MONGO_URI)
        self.db = self.client[self.database_name]
        logger.info("Connected to MongoDB database %s on host %s", self.database_name, socket.gethostname())

    def close(self):
        if self.client is not None:
            self.client.close()
            self.client = None
            self.db = None

    def serializer(self, obj):
        visitor = DateTimeSerializerVisitor()
        return visitor.visit(obj)

    def check_connection(self):
        """Resolve the Atlas host up front so DNS problems show up in the startup log."""
        if MONGODB_URI or not CLUSTER_NAME:
            return True

        hostname = f"{CLUSTER_NAME}.mongodb.net"
        try:
            ip = socket.gethostbyname(hostname)
            logger.info("DNS resolution successful: %s -> %s", hostname, ip)
            return True
        except socket.gaierror as dns_error:
            logger.warning("DNS resolution failed for %s: %s", hostname, dns_error)
            logger.warning("Continuing without DNS verification - connection may still work")
            return False

    async def add(self, collection_name, data):
        collection = self.db[collection_name]
        result = await collection.insert_one(data)

        if result.inserted_id:
            data["_id"] = str(result.inserted_id)
            data = self.serializer(data)
            return {
                "status": 200,
                "data": data,
                "message": "Document added successfully"
            }
        else:
            return {
                "status": 500,
                "message": "Failed to add document"
            }

    async def find_many(self, collection_name, query=None, projection=None, sort=None, limit=None):
        """Find multiple documents matching query"""
        collection = self.db[collection_name]
        cursor = collection.find(query or {}, projection)

        if sort:
            cursor = cursor.sort(sort)
        if limit:
            cursor = cursor.limit(limit)

        documents = []
        async for doc in cursor:
            doc["_id"] = str(doc["_id"])
            doc = self.serializer(doc)
            documents.append(doc)

        return {
            "status": 200,
            "data": documents,
            "message": "Documents retrieved successfully"
        }

    async def find_one(self, collection_name, query):
        """Find a single document (returns document directly or None)"""
        collection = self.db[collection_name]
        document = await collection.find_one(query)

        if document:
            document["_id"] = str(document["_id"])
            document = self.serializer(document)

        return document

    async def count(self, collection_name, query=None):
        collection = self.db[collection_name]
        return await collection.count_documents(query or {})

    async def update(self, collection_name, query, update_string):
        collection = self.db[collection_name]
        result = await collection.update_one(query, update_string)

        return {
            "status": 200 if result.modified_count > 0 else 404,
            "matched_count": result.matched_count,
            "modified_count": result.modified_count,
            "message": "Document updated successfully" if result.modified_count > 0 else "Document not found or no changes made"
        }

    async def delete(self, collection_name, query):
        collection = self.db[collection_name]
        result = await collection.delete_one(query)

        return {
            "status": 200 if result.deleted_count > 0 else 404,
            "deleted_count": result.deleted_count,
            "message": "Document deleted successfully" if result.deleted_count > 0 else "Document not found"
        }
