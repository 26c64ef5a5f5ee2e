# app/models/user.py
from pydantic import BaseModel, ConfigDict, Field
from datetime import datetime

class UserCredentials(BaseModel):
    # Optional here so the endpoints can answer "Missing data" themselves, as the web client expects
    username: str | None = Field(None, max_length=50)
    password: str | None = None

class UserInDBBase(BaseModel):
    id: int
    username: str
    created_at: datetime | None = None

    model_config = ConfigDict(from_attributes=True)

class UserPublic(UserInDBBase):
    pass

# Token issued on login; also set as the httpOnly auth cookie
class BackendToken(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: UserPublic | None = None
    expires_in: int
    message: str = "Login successful"
