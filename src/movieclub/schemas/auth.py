from pydantic import BaseModel, EmailStr, Field, ValidationInfo, field_validator
from zxcvbn import zxcvbn

from src.movieclub.schemas.user import UserRead

# zxcvbn scores 0-4; 3 is "safely unguessable"
MIN_PASSWORD_SCORE = 3


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(min_length=1, max_length=100)


class LoginResponse(BaseModel):
    token: str
    token_type: str = "bearer"
    user: UserRead


class RegisterRequest(BaseModel):
    username: str = Field(min_length=3, max_length=50)
    email: EmailStr
    password: str = Field(min_length=8, max_length=100)

    @field_validator("username", mode="before")
    @classmethod
    def strip_username(cls, v: object) -> object:
        return v.strip() if isinstance(v, str) else v

    @field_validator("password")
    @classmethod
    def reject_guessable_password(cls, v: str, info: ValidationInfo) -> str:
        """zxcvbn strength check that also treats the username and email as known words."""
        known_words = [str(info.data[name]) for name in ("username", "email") if name in info.data]
        result = zxcvbn(v, user_inputs=known_words)
        if result["score"] >= MIN_PASSWORD_SCORE:
            return v

        feedback = result["feedback"]
        hint = feedback["warning"] or next(iter(feedback["suggestions"]), "")
        if hint:
            raise ValueError(f"Weak password: {hint}")
        raise ValueError("Password is too weak. Use a longer passphrase.")


class RegisterResponse(BaseModel):
    user: UserRead
    message: str
