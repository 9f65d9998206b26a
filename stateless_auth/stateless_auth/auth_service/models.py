from sqlalchemy import Column, Integer, String

from .db import Base


class User(Base):
    __tablename__ = "users"
    id = Column(Integer, primary_key=True, index=True)
    username = Column(String, nullable=False)
    # Unique key, compared case-sensitively exactly as received
    email = Column(String, unique=True, index=True, nullable=False)
    password_hash = Column(String, nullable=False)

    def to_dict(self) -> dict:
        """Public view of the user. Never includes the password hash."""
        return {
            "id": self.id,
            "username": self.username,
            "email": self.email,
        }

    def __repr__(self) -> str:
        return f"<User id={self.id} email={self.email!r}>"
