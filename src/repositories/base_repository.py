"""
Base repository pattern for MongoDB data access.

Provides generic CRUD operations for MongoDB collections with async/await support.
Driver failures surface as StorageUnavailableError; duplicate-key violations are
re-raised untouched so domain repositories can give them a meaning.
"""

from typing import Any, Dict, List, Optional, Union

from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorCollection
from pymongo.errors import DuplicateKeyError, PyMongoError

from src.core.errors import StorageUnavailableError
from src.core.logger import logger

DocumentId = Union[str, ObjectId]


class BaseRepository:
    """
    Base repository providing generic CRUD operations for MongoDB collections.

    Usage:
        class ItemRepository(BaseRepository):
            def __init__(self, collection: AsyncIOMotorCollection):
                super().__init__(collection)
    """

    def __init__(self, collection: AsyncIOMotorCollection):
        self.collection = collection
        self.collection_name = collection.name

    @staticmethod
    def _to_object_id(document_id: DocumentId) -> ObjectId:
        return document_id if isinstance(document_id, ObjectId) else ObjectId(document_id)

    def _storage_error(
        self,
        action: str,
        error: PyMongoError,
        correlation_id: Optional[str] = None,
        **metadata
    ) -> StorageUnavailableError:
        logger.error(
            f"Error {action} in {self.collection_name}",
            correlation_id=correlation_id,
            error=error,
            metadata={"collection": self.collection_name, **metadata}
        )
        return StorageUnavailableError(
            details={"collection": self.collection_name, "operation": action}
        )

    async def create(self, document: Dict[str, Any], correlation_id: Optional[str] = None) -> ObjectId:
        """
        Create a new document.

        Args:
            document: Document data to insert
            correlation_id: Optional correlation ID for logging

        Returns:
            ObjectId: ID of created document

        Raises:
            DuplicateKeyError: If a unique index rejects the document
            StorageUnavailableError: If the store cannot be reached
        """
        try:
            result = await self.collection.insert_one(document)
        except DuplicateKeyError:
            raise
        except PyMongoError as e:
            raise self._storage_error("creating document", e, correlation_id) from e

        logger.info(
            f"Document created successfully in {self.collection_name}",
            correlation_id=correlation_id,
            metadata={
                "collection": self.collection_name,
                "documentId": str(result.inserted_id)
            }
        )

        return result.inserted_id

    async def find_by_id(
        self,
        document_id: DocumentId,
        projection: Optional[Dict[str, Any]] = None,
        correlation_id: Optional[str] = None
    ) -> Optional[Dict[str, Any]]:
        """
        Find a document by ID.

        Returns:
            Optional[Dict]: Document if found, None otherwise
        """
        try:
            document = await self.collection.find_one(
                {"_id": self._to_object_id(document_id)}, projection
            )
        except PyMongoError as e:
            raise self._storage_error(
                "finding document", e, correlation_id, documentId=str(document_id)
            ) from e

        logger.debug(
            f"Document {'found' if document else 'not found'} in {self.collection_name}",
            correlation_id=correlation_id,
            metadata={
                "collection": self.collection_name,
                "documentId": str(document_id)
            }
        )

        return document

    async def find_one(
        self,
        query: Dict[str, Any],
        correlation_id: Optional[str] = None
    ) -> Optional[Dict[str, Any]]:
        try:
            return await self.collection.find_one(query)
        except PyMongoError as e:
            raise self._storage_error("finding document", e, correlation_id) from e

    async def find_many(
        self,
        query: Dict[str, Any],
        skip: int = 0,
        limit: Optional[int] = None,
        sort: Optional[List[tuple]] = None,
        projection: Optional[Dict[str, Any]] = None,
        correlation_id: Optional[str] = None
    ) -> List[Dict[str, Any]]:
        """
        Find multiple documents matching query.

        Args:
            query: MongoDB query filter
            skip: Number of documents to skip
            limit: Maximum number of documents to return
            sort: Sort specification
            projection: Fields to include or exclude
            correlation_id: Optional correlation ID for logging

        Returns:
            List[Dict]: List of matching documents
        """
        try:
            cursor = self.collection.find(query, projection)

            if sort:
                cursor = cursor.sort(sort)

            if skip:
                cursor = cursor.skip(skip)

            if limit:
                cursor = cursor.limit(limit)

            documents = await cursor.to_list(length=limit)
        except PyMongoError as e:
            raise self._storage_error("finding documents", e, correlation_id) from e

        logger.debug(
            f"Found {len(documents)} documents in {self.collection_name}",
            correlation_id=correlation_id,
            metadata={
                "collection": self.collection_name,
                "count": len(documents)
            }
        )

        return documents

    async def update(
        self,
        document_id: DocumentId,
        update_data: Dict[str, Any],
        correlation_id: Optional[str] = None
    ) -> bool:
        """
        Update a document by ID.

        Args:
            document_id: Document ID to update
            update_data: Update operations (should include $set, $inc, etc.)
            correlation_id: Optional correlation ID for logging

        Returns:
            bool: True if a document matched, False otherwise
        """
        try:
            result = await self.collection.update_one(
                {"_id": self._to_object_id(document_id)},
                update_data
            )
        except PyMongoError as e:
            raise self._storage_error(
                "updating document", e, correlation_id, documentId=str(document_id)
            ) from e

        matched = result.matched_count > 0

        if matched:
            logger.info(
                f"Document updated successfully in {self.collection_name}",
                correlation_id=correlation_id,
                metadata={
                    "collection": self.collection_name,
                    "documentId": str(document_id)
                }
            )
        else:
            logger.warning(
                f"No document matched in {self.collection_name}",
                correlation_id=correlation_id,
                metadata={
                    "collection": self.collection_name,
                    "documentId": str(document_id)
                }
            )

        return matched

    async def delete(self, document_id: DocumentId, correlation_id: Optional[str] = None) -> bool:
        """
        Delete a document by ID.

        Returns:
            bool: True if deleted, False otherwise
        """
        try:
            result = await self.collection.delete_one({"_id": self._to_object_id(document_id)})
        except PyMongoError as e:
            raise self._storage_error(
                "deleting document", e, correlation_id, documentId=str(document_id)
            ) from e

        success = result.deleted_count > 0

        logger.info(
            f"Document {'deleted' if success else 'not found for deletion'} in {self.collection_name}",
            correlation_id=correlation_id,
            metadata={
                "collection": self.collection_name,
                "documentId": str(document_id)
            }
        )

        return success

    async def count(self, query: Dict[str, Any], correlation_id: Optional[str] = None) -> int:
        try:
            return await self.collection.count_documents(query)
        except PyMongoError as e:
            raise self._storage_error("counting documents", e, correlation_id) from e
