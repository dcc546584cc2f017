# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
MongoDB service layer with company-scoped operations and connection pooling.
"""

import os
import logging
from datetime import datetime
from typing import List, Dict, Optional, Any, Union
from pymongo import MongoClient, ASCENDING
from pymongo.collection import Collection
from pymongo.database import Database
from pymongo.errors import (
    ConnectionFailure,
    ServerSelectionTimeoutError
)
from bson import ObjectId

logger = logging.getLogger(__name__)


class MongoDBService:
    """MongoDB service with company-scoped operations and connection pooling."""

    def __init__(self, connection_string: str = None, database_name: str = None):
        """Initialize MongoDB service with connection pooling."""
        self.connection_string = connection_string or os.getenv(
            'MONGODB_URI',
            'mongodb://localhost:27017/domous_dev'
        )
        self.database_name = database_name or os.getenv('MONGODB_DATABASE', 'domous_dev')
        self._client: Optional[MongoClient] = None
        self._database: Optional[Database] = None

        # Connection pool settings
        self.max_pool_size = int(os.getenv('MONGODB_MAX_POOL_SIZE', '10'))
        self.min_pool_size = int(os.getenv('MONGODB_MIN_POOL_SIZE', '1'))
        self.max_idle_time_ms = int(os.getenv('MONGODB_MAX_IDLE_TIME_MS', '30000'))
        self.server_selection_timeout_ms = int(os.getenv('MONGODB_SERVER_SELECTION_TIMEOUT_MS', '5000'))

        logger.info(f"MongoDB service initialized for database: {self.database_name}")

    @property
    def client(self) -> MongoClient:
        """Get MongoDB client with connection pooling."""
        if self._client is None:
            try:
                self._client = MongoClient(
                    self.connection_string,
                    maxPoolSize=self.max_pool_size,
                    minPoolSize=self.min_pool_size,
                    maxIdleTimeMS=self.max_idle_time_ms,
                    serverSelectionTimeoutMS=self.server_selection_timeout_ms,
                    retryWrites=True,
                    retryReads=True
                )
                # Test connection
                self._client.admin.command('ping')
                logger.info("MongoDB connection established successfully")
            except (ConnectionFailure, ServerSelectionTimeoutError) as e:
                logger.error(f"Failed to connect to MongoDB: {e}")
                raise

        return self._client

    @property
    def database(self) -> Database:
        """Get MongoDB database."""
        if self._database is None:
            self._database = self.client[self.database_name]
        return self._database

    def get_collection(self, collection_name: str) -> Collection:
        """Get MongoDB collection."""
        return self.database[collection_name]

    def close_connection(self) -> None:
        """Close MongoDB connection."""
        if self._client:
            self._client.close()
            self._client = None
            self._database = None
            logger.info("MongoDB connection closed")

    def health_check(self) -> Dict[str, Any]:
        """Check MongoDB connection health."""
        try:
            result = self.client.admin.command('ping')
            server_info = self.client.server_info()

            return {
                'status': 'healthy',
                'ping': result.get('ok') == 1,
                'version': server_info.get('version'),
                'database': self.database_name,
                'connection_pool_size': self.max_pool_size
            }
        except Exception as e:
            logger.error(f"MongoDB health check failed: {e}")
            return {
                'status': 'unhealthy',
                'error': str(e),
                'database': self.database_name
            }

    @staticmethod
    def to_document_id(doc_id: str) -> Union[ObjectId, str]:
        """Convert string IDs to ObjectId when they are valid ObjectIds."""
        if ObjectId.is_valid(doc_id):
            return ObjectId(doc_id)
        return doc_id

    @staticmethod
    def serialize(document: Dict) -> Dict:
        """Replace ``_id`` with a string ``id`` for JSON serialization."""
        if "_id" in document:
            document["id"] = str(document.pop("_id"))
        return document

    def _build_company_query(self, company_id: str, filters: Dict = None) -> Dict:
        """Build company-scoped query with optional filters."""
        query = {"company_id": company_id}
        if filters:
            query.update(filters)
        return query

    def _add_timestamps(self, document: Dict, is_update: bool = False) -> Dict:
        """Add creation and update timestamps to document."""
        now = datetime.utcnow()

        if not is_update:
            document["created_at"] = now

        document["updated_at"] = now
        return document

    # Company-scoped operations

    def find_by_company(self, collection: str, company_id: str, filters: Dict = None) -> List[Dict]:
        """Find documents by company with optional filters."""
        try:
            query = self._build_company_query(company_id, filters)
            documents = [
                self.serialize(doc)
                for doc in self.get_collection(collection).find(query)
            ]

            logger.debug(f"Found {len(documents)} documents in {collection} for company {company_id}")
            return documents

        except Exception as e:
            logger.error(f"Failed to find documents in {collection}: {e}")
            raise

    def find_one_by_company(self, collection: str, company_id: str, doc_id: str) -> Optional[Dict]:
        """Find a single document by company and ID."""
        try:
            query = self._build_company_query(company_id, {"_id": self.to_document_id(doc_id)})
            document = self.get_collection(collection).find_one(query)

            if document:
                logger.debug(f"Found document {doc_id} in {collection}")
                return self.serialize(document)

            logger.debug(f"Document {doc_id} not found in {collection} for company {company_id}")
            return None

        except Exception as e:
            logger.error(f"Failed to find document {doc_id} in {collection}: {e}")
            raise

    def update_one_by_company(self, collection: str, company_id: str, doc_id: str,
                              updates: Dict, filters: Dict = None) -> bool:
        """
        Update a document by company and ID.

        ``filters`` narrows the match further so the update only applies while
        the document is still in the expected state.
        """
        try:
            query = self._build_company_query(company_id, {"_id": self.to_document_id(doc_id)})
            if filters:
                query.update(filters)

            updates = self._add_timestamps(dict(updates), is_update=True)
            result = self.get_collection(collection).update_one(query, {"$set": updates})

            if result.modified_count > 0:
                logger.info(f"Updated document {doc_id} in {collection}")
                return True

            logger.warning(f"No document updated for {doc_id} in {collection}")
            return False

        except Exception as e:
            logger.error(f"Failed to update document {doc_id} in {collection}: {e}")
            raise

    # Index Management

    def create_indexes(self) -> None:
        """Create performance and integrity indexes for all collections."""
        try:
            logger.info("Creating MongoDB indexes...")

            members = self.get_collection("team_members")
            members.create_index([("company_id", ASCENDING), ("status", ASCENDING)])
            members.create_index([("employment_type", ASCENDING), ("status", ASCENDING)])

            # One salary per member and month
            payments = self.get_collection("team_payments")
            payments.create_index(
                [("team_member_id", ASCENDING), ("reference_month", ASCENDING), ("payment_type", ASCENDING)],
                unique=True,
                partialFilterExpression={"payment_type": "salary"},
                name="unique_salary_per_member_month"
            )
            payments.create_index([("company_id", ASCENDING), ("due_date", ASCENDING)])
            payments.create_index([("status", ASCENDING), ("due_date", ASCENDING)])

            settings = self.get_collection("company_settings")
            settings.create_index("company_id", unique=True)

            commissions = self.get_collection("partner_commissions")
            commissions.create_index([("company_id", ASCENDING), ("partner_id", ASCENDING)])
            commissions.create_index([("status", ASCENDING), ("scheduled_payment_date", ASCENDING)])

            expenses = self.get_collection("company_expenses")
            expenses.create_index([("company_id", ASCENDING), ("due_date", ASCENDING)])
            expenses.create_index([("status", ASCENDING), ("due_date", ASCENDING)])

            roles = self.get_collection("user_roles")
            roles.create_index(
                [("user_id", ASCENDING), ("company_id", ASCENDING), ("role", ASCENDING)],
                unique=True
            )

            logger.info("MongoDB indexes created successfully")

        except Exception as e:
            logger.error(f"Failed to create MongoDB indexes: {e}")
            raise


# Singleton instance for application use
_mongodb_service: Optional[MongoDBService] = None


def get_mongodb_service() -> MongoDBService:
    """Get singleton MongoDB service instance."""
    global _mongodb_service
    if _mongodb_service is None:
        _mongodb_service = MongoDBService()
    return _mongodb_service


def close_mongodb_connection() -> None:
    """Close MongoDB connection (for cleanup)."""
    global _mongodb_service
    if _mongodb_service:
        _mongodb_service.close_connection()
        _mongodb_service = None
