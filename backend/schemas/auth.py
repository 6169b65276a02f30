from pydantic import BaseModel, Field
from datetime import datetime


class Credenciales(BaseModel):
    email: str = Field(min_length=3, max_length=255)
    password: str = Field(min_length=6, max_length=72)  # bcrypt limit


class Token(BaseModel):
    access_token: str
    token_type: str
    expires_at: datetime


class SesionActual(BaseModel):
    user_id: int
    email: str
    expires_at: datetime


class Mensaje(BaseModel):
    mensaje: str
