from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

from .typing import PyObjectId


class MongoDocument(BaseModel):
    """
    Convenience base for documents handled by the mongo_gen helpers.

    - id: stored as ``_id``; left as None on new documents so the server
      generates an ObjectId on insert
    """

    model_config = ConfigDict(populate_by_name=True, arbitrary_types_allowed=True)

    id: Optional[PyObjectId] = Field(default=None, alias="_id")

    def get_id(self) -> Any:
        return self.id
