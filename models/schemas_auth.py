from pydantic import BaseModel, EmailStr

class SessionLogin(BaseModel):
    email: EmailStr
    slug: str = "unidep"

class SessionOut(BaseModel):
    email: EmailStr
    slug: str

class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    session: SessionOut
