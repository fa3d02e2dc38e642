"""Profile model."""

from sqlalchemy import Float, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from releasegate.database import Base


class Profile(Base):
    """User profile - trust score is maintained outside the engine."""

    __tablename__ = "profiles"

    id: Mapped[str] = mapped_column(Uuid(as_uuid=False), primary_key=True)
    user_type: Mapped[str] = mapped_column(String(20), nullable=False, default="freelancer")
    display_name: Mapped[str | None] = mapped_column(Text, nullable=True)
    trust_score: Mapped[float | None] = mapped_column(Float, nullable=True)
