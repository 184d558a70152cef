from pydantic import BaseModel


class TokenPayload(BaseModel):
    sub: str  # auth provider user id
    exp: int
    email: str | None = None
    name: str | None = None
    phone: str | None = None


class Identity(BaseModel):
    """Server-verified caller. user_id is None for anonymous requests."""
    user_id: str | None = None
    email: str | None = None
    name: str | None = None
    phone: str | None = None

    @property
    def is_authenticated(self) -> bool:
        return bool(self.user_id)
