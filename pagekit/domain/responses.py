from typing import Optional, Union

from pydantic import BaseModel, ConfigDict


class DataTransferObject(BaseModel):
    """Base for request bodies and decoded response payloads.

    Fields may be populated by name or alias; bodies are serialized by alias.
    """
    model_config = ConfigDict(populate_by_name=True)


class EmptyResponse(BaseModel):
    """Acknowledgement with no meaningful payload; unknown keys are kept."""
    model_config = ConfigDict(extra="allow")


class ErrorResponse(BaseModel):
    """Error document returned by the server."""
    model_config = ConfigDict(extra="allow")

    code: Optional[Union[int, str]] = None
    message: Optional[str] = None
    status: Optional[int] = None
