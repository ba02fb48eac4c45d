from uuid import uuid4
from datetime import datetime
from sqlalchemy import JSON, Column, String, Text, Boolean, Integer, DateTime, ForeignKey, Uuid
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import relationship
from career_transition.models.base import Base

# JSONB on Postgres, plain JSON elsewhere (SQLite in local runs and tests).
JsonColumn = JSON().with_variant(JSONB(), "postgresql")


class User(Base):
    __tablename__ = "users"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid4)
    email = Column(String(255), nullable=False, unique=True, index=True)
    name = Column(String(160), nullable=False)
    password_salt = Column(String(200), nullable=False)
    password_hash = Column(String(200), nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    intake_sessions = relationship("IntakeSession", back_populates="user")
    career_plans = relationship("CareerPlan", back_populates="user")


class IntakeSession(Base):
    __tablename__ = "intake_sessions"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid4)
    user_id = Column(Uuid(as_uuid=True), ForeignKey("users.id"), nullable=False, index=True)
    conversation_history = Column(JsonColumn, nullable=False, default=list)
    current_step = Column(Integer, nullable=False, default=0)
    is_complete = Column(Boolean, nullable=False, default=False)
    collected_data = Column(JsonColumn, nullable=False, default=dict)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    user = relationship("User", back_populates="intake_sessions")


class CareerPlan(Base):
    __tablename__ = "career_plans"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid4)
    user_id = Column(Uuid(as_uuid=True), ForeignKey("users.id"), nullable=False, index=True)
    intake_session_id = Column(Uuid(as_uuid=True), ForeignKey("intake_sessions.id"), nullable=True)
    target_role = Column(String(255), nullable=False)
    current_role = Column(String(255), nullable=False)
    timeline = Column(String(255), nullable=False)
    phases = Column(JsonColumn, nullable=False, default=list)
    agent_id = Column(String(64), nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    user = relationship("User", back_populates="career_plans")
    progress_tracking = relationship("ProgressTracking", back_populates="plan")


class ProgressTracking(Base):
    __tablename__ = "progress_tracking"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid4)
    user_id = Column(Uuid(as_uuid=True), ForeignKey("users.id"), nullable=False, index=True)
    plan_id = Column(Uuid(as_uuid=True), ForeignKey("career_plans.id"), nullable=False, index=True)
    completed_tasks = Column(JsonColumn, nullable=False, default=list)
    # Snapshot only; readers recompute the phase from completed_tasks.
    current_phase = Column(Integer, nullable=False, default=0)
    streak_days = Column(Integer, nullable=False, default=0)
    last_activity = Column(DateTime, default=datetime.utcnow, nullable=False)
    activity_log = Column(JsonColumn, nullable=False, default=dict)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    plan = relationship("CareerPlan", back_populates="progress_tracking")


class AgentInteraction(Base):
    __tablename__ = "agent_interactions"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid4)
    user_id = Column(Uuid(as_uuid=True), ForeignKey("users.id"), nullable=False, index=True)
    agent_id = Column(String(32), nullable=False, index=True)
    message = Column(Text, nullable=False)
    response = Column(Text, nullable=False)
    context = Column(JsonColumn, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
