from pydantic import BaseModel
from typing import Optional
from app.schemas.profile import ProfileIn, ProfileOut

class SignupRequest(BaseModel):
    email: str
    password: str
    username: Optional[str] = None

class LoginRequest(BaseModel):
    email: str
    password: str

class CompleteProfileRequest(BaseModel):
    email: str
    password: str
    profile: ProfileIn

# --- Session issued by Supabase Auth, never stored here ---
class SessionOut(BaseModel):
    access_token: str
    refresh_token: Optional[str] = None
    expires_in: Optional[int] = None
    token_type: Optional[str] = None

class SignupResponse(BaseModel):
    user_id: str
    message: str
    next_step: str

class ProfileCompleteResponse(BaseModel):
    session: SessionOut
    profile: ProfileOut
    message: str
    next_step: str

class LoginResponse(BaseModel):
    session: SessionOut
    profile: Optional[ProfileOut] = None
    message: str
    next_step: str
