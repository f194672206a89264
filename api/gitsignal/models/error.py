"""Error response schema for 404, 429, 502 and the 202 stats-computing reply. 422 uses FastAPI default."""

from pydantic import BaseModel


class ErrorDetail(BaseModel):
    """Simple error response: single top-level field detail (string). No extra keys."""

    detail: str
