"""Storage service for persisting JSON documents on the file system."""
import json
from datetime import datetime
from pathlib import Path
from typing import Optional, Dict, Any, List
import uuid

from ..config import settings

GYMS = "gyms"
BOOKINGS = "bookings"


class StorageService:
    """Document store keeping one JSON file per document, one directory per collection."""

    def __init__(self, base_path: Optional[Path] = None):
        """Initialize the storage service.

        Args:
            base_path: Base directory for storage. Defaults to settings.storage_path
        """
        self.base_path = base_path or settings.storage_path
        self._ensure_base_directory()

    def _ensure_base_directory(self) -> None:
        """Ensure the base storage directory exists."""
        self.base_path.mkdir(parents=True, exist_ok=True)

    def generate_id(self) -> str:
        """Generate a unique, time-sortable document ID.

        Returns:
            Document ID in format: YYYYMMDDHHMMSS{uuid}
        """
        timestamp = datetime.now().strftime("%Y%m%d%H%M%S")
        return f"{timestamp}{uuid.uuid4().hex[:10]}"

    def get_collection_directory(self, collection: str) -> Path:
        """Get (and create) the directory for a collection.

        Args:
            collection: Collection name (e.g., 'gyms')

        Returns:
            Path to the collection directory
        """
        collection_dir = self.base_path / collection
        collection_dir.mkdir(parents=True, exist_ok=True)
        return collection_dir

    def _document_path(self, collection: str, doc_id: str) -> Path:
        if not doc_id or "/" in doc_id or "\\" in doc_id or doc_id.startswith("."):
            raise ValueError(f"Invalid document id: {doc_id!r}")
        return self.get_collection_directory(collection) / f"{doc_id}.json"

    def save_document(self, collection: str, doc_id: str, data: Dict[str, Any]) -> Path:
        """Save a JSON document, replacing any previous version.

        Args:
            collection: Collection name
            doc_id: Document identifier
            data: Document body

        Returns:
            Path to the saved file
        """
        file_path = self._document_path(collection, doc_id)
        tmp_path = file_path.with_suffix(".json.tmp")

        with open(tmp_path, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2, default=str, ensure_ascii=False)
        tmp_path.replace(file_path)

        return file_path

    def load_document(self, collection: str, doc_id: str) -> Optional[Dict[str, Any]]:
        """Load a JSON document.

        Args:
            collection: Collection name
            doc_id: Document identifier

        Returns:
            Loaded document or None if it doesn't exist
        """
        try:
            file_path = self._document_path(collection, doc_id)
        except ValueError:
            return None

        if not file_path.exists():
            return None

        with open(file_path, "r", encoding="utf-8") as f:
            return json.load(f)

    def list_documents(self, collection: str) -> List[Dict[str, Any]]:
        """Load every document in a collection.

        Returns:
            Documents sorted by ID, newest first
        """
        collection_dir = self.get_collection_directory(collection)
        files = sorted(
            (f for f in collection_dir.iterdir() if f.is_file() and f.suffix == ".json"),
            key=lambda f: f.name,
            reverse=True,
        )

        documents = []
        for file_path in files:
            with open(file_path, "r", encoding="utf-8") as f:
                documents.append(json.load(f))
        return documents

    def document_exists(self, collection: str, doc_id: str) -> bool:
        """Check if a document exists.

        Returns:
            True if the document exists, False otherwise
        """
        try:
            return self._document_path(collection, doc_id).exists()
        except ValueError:
            return False

    def delete_document(self, collection: str, doc_id: str) -> bool:
        """Delete a document.

        Returns:
            True if deleted successfully, False if the document didn't exist
        """
        if not self.document_exists(collection, doc_id):
            return False
        self._document_path(collection, doc_id).unlink()
        return True


# Global storage service instance
storage_service = StorageService()
