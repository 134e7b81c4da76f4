"""Identity recovered from a verified token; never persisted."""

from pydantic import BaseModel


class SessionClaims(BaseModel):
    user_id: int
    username: str
