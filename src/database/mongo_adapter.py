"""
MongoDB adapter for document-based operations.
Thin wrapper over a pymongo client used by the record services.
"""

import logging
from typing import Any, Dict, List, Optional, Sequence, Tuple
from urllib.parse import urlsplit

from pymongo import MongoClient
from pymongo.errors import ConnectionFailure

logger = logging.getLogger(__name__)

DEFAULT_DATABASE_NAME = "products"


def database_name_from_uri(connection_string: str) -> str:
    """Database named in the URI path, e.g. `mongodb://host/products`."""
    path = urlsplit(connection_string).path.strip("/")
    return path or DEFAULT_DATABASE_NAME


class MongoAdapter:
    """MongoDB adapter for document-based database operations"""

    def __init__(
        self,
        connection_string: str,
        database_name: Optional[str] = None,
        client: Optional[MongoClient] = None,
    ):
        if not connection_string and client is None:
            raise ValueError("MongoDB connection string required. Set MONGODB_URI or pass connection_string")

        self.connection_string = connection_string
        self.database_name = database_name or database_name_from_uri(connection_string)
        self.client = client
        self.db = None
        self._connect()

    def _connect(self) -> None:
        """Establish MongoDB connection"""
        try:
            if self.client is None:
                self.client = MongoClient(self.connection_string)
            self.db = self.client[self.database_name]

            # Test connection
            self.client.admin.command('ping')
            logger.info(f"MongoDB connected !! DB: {self.database_name}")

        except ConnectionFailure as e:
            logger.error(f"Failed to connect to MongoDB: {e}")
            raise
        except Exception as e:
            logger.error(f"MongoDB connection error: {e}")
            raise

    def ping(self) -> bool:
        """Return True when the server answers a ping."""
        try:
            self.client.admin.command('ping')
            return True
        except Exception as e:
            logger.warning(f"MongoDB ping failed: {e}")
            return False

    def init_collections(self, indexes: Dict[str, Sequence[Sequence[Tuple[str, int]]]]) -> None:
        """Create the given indexes, keyed by collection name"""
        try:
            for collection_name, collection_indexes in indexes.items():
                collection = self.db[collection_name]
                for keys in collection_indexes:
                    collection.create_index(list(keys))

            logger.info("MongoDB collections and indexes initialized successfully")

        except Exception as e:
            logger.error(f"Error initializing MongoDB collections: {e}")
            raise

    def create_document(self, collection: str, document: Dict[str, Any]) -> Optional[str]:
        """Insert a document; returns its id, or None if the write was not acknowledged"""
        try:
            result = self.db[collection].insert_one(dict(document))
            if not result.acknowledged:
                logger.warning(f"Insert into {collection} was not acknowledged")
                return None

            doc_id = str(result.inserted_id)
            logger.info(f"Created document in {collection} with ID: {doc_id}")
            return doc_id

        except Exception as e:
            logger.error(f"Error creating document in {collection}: {e}")
            raise

    def query_documents(self, collection: str, query: Dict[str, Any], limit: int = 0) -> List[Dict[str, Any]]:
        """Query documents with exact-match filters, in storage order"""
        try:
            cursor = self.db[collection].find(query)
            if limit:
                cursor = cursor.limit(limit)

            documents = []
            for doc in cursor:
                # Expose MongoDB's _id as a plain string id
                doc['id'] = str(doc.pop('_id'))
                documents.append(doc)

            return documents

        except Exception as e:
            logger.error(f"Error querying documents from {collection}: {e}")
            raise

    def count_documents(self, collection: str, query: Optional[Dict[str, Any]] = None) -> int:
        """Count documents matching query"""
        try:
            return self.db[collection].count_documents(query or {})
        except Exception as e:
            logger.error(f"Error counting documents in {collection}: {e}")
            raise

    def close(self) -> None:
        """Close MongoDB connection"""
        if self.client:
            self.client.close()
            logger.info("MongoDB connection closed")
