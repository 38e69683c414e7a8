from pydantic import BaseModel

class UploadProfilePictureRequest(BaseModel):
    image_data: str  # base64, optionally with a data URL prefix
    file_name: str
    content_type: str  # "image/jpeg", "image/png", ...

class ProfilePictureResponse(BaseModel):
    profile_picture_url: str
    message: str

class SkipProfilePictureResponse(BaseModel):
    message: str
    next_step: str
