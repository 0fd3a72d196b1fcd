from datetime import datetime
from pydantic import BaseModel
from ticketing.modules.users.schemas import UserOut

class LoginRequest(BaseModel):
    email: str
    password: str

class LoginResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    expires_at: datetime
    user: UserOut

class ChangePasswordRequest(BaseModel):
    current_password: str
    new_password: str
