from typing import Any

from bson import ObjectId
from fastapi.encoders import jsonable_encoder


def encode_document(document: Any) -> Any:
    """Make a store document JSON-safe: ObjectId -> str, datetime -> ISO 8601."""
    return jsonable_encoder(document, custom_encoder={ObjectId: str})
