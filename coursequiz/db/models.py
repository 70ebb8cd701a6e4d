from sqlalchemy import Column, String, ForeignKey, DateTime, Boolean, Float, Integer, JSON, UniqueConstraint, Uuid
from sqlalchemy.orm import relationship
from sqlalchemy.types import Text
from coursequiz.db.base import Base
from coursequiz.core.base_config import utcnow
import uuid


class User(Base):
    __tablename__ = "users"
    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    name = Column(String(100), nullable=False)
    email = Column(String(150), unique=True, nullable=False)
    password_hash = Column(Text, nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow)

    quiz_attempts = relationship("QuizAttempt", back_populates="user")
    module_progress = relationship("ModuleProgress", back_populates="user")


class QuizAttempt(Base):
    """Latest finished attempt of a user on a quiz. Upserted per (user, quiz)."""
    __tablename__ = "quiz_attempts"
    __table_args__ = (UniqueConstraint("user_id", "quiz_id", name="uq_quiz_attempts_user_quiz"),)

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    attempt_id = Column(String(100), nullable=False)
    user_id = Column(Uuid(as_uuid=True), ForeignKey("users.id"), nullable=False)
    quiz_id = Column(String(100), nullable=False, index=True)
    module_id = Column(String(100))
    answers = Column(JSON, nullable=False, default=dict)
    score = Column(Float, nullable=False)
    total_points = Column(Float, nullable=False)
    percentage = Column(Integer, nullable=False)
    passed = Column(Boolean, nullable=False)
    completed_at = Column(DateTime(timezone=True), nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    user = relationship("User", back_populates="quiz_attempts")


class ModuleProgress(Base):
    """How far a user is through a course module. Upserted per (user, module)."""
    __tablename__ = "user_progress"
    __table_args__ = (UniqueConstraint("user_id", "module_id", name="uq_user_progress_user_module"),)

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid(as_uuid=True), ForeignKey("users.id"), nullable=False)
    module_id = Column(String(100), nullable=False, index=True)
    progress_percentage = Column(Integer, nullable=False, default=0)
    completed = Column(Boolean, nullable=False, default=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    user = relationship("User", back_populates="module_progress")
