from typing import Optional
from src.models import CustomModel

class TokenClaims(CustomModel):
    """Claims the identity provider puts in an access token"""
    sub: str
    email: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    profile_image_url: Optional[str] = None
