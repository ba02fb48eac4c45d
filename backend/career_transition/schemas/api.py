from pydantic import BaseModel, StrictBool
from typing import Any, List, Optional


class AuthRegisterIn(BaseModel):
    email: str
    name: str
    password: str


class AuthLoginIn(BaseModel):
    email: str
    password: str


class UserOut(BaseModel):
    id: str
    email: str
    name: str


class AuthOut(BaseModel):
    token: str
    user: UserOut


class CurrentUserOut(UserOut):
    createdAt: Optional[str] = None


class IntakeStartOut(BaseModel):
    sessionId: str
    question: str
    currentStep: int = 1
    isComplete: bool = False


class IntakeMessageIn(BaseModel):
    message: str


class IntakeMessageOut(BaseModel):
    question: str
    isComplete: bool
    currentStep: int


class ConversationTurnOut(BaseModel):
    role: str
    content: str
    timestamp: Optional[str] = None


class IntakeSessionOut(BaseModel):
    id: str
    conversationHistory: List[ConversationTurnOut]
    currentStep: int
    isComplete: bool
    collectedData: dict[str, Any]


class GeneratePlanIn(BaseModel):
    sessionId: Optional[str] = None


class RegeneratePlanIn(BaseModel):
    phaseNumber: Optional[int] = None


class AgentChatIn(BaseModel):
    message: str
    context: Optional[dict[str, Any]] = None


class UpdateTaskIn(BaseModel):
    taskId: str
    completed: StrictBool
    milestoneId: Optional[str] = None


class ProgressStatsOut(BaseModel):
    streakDays: int
    currentPhase: int
    completedTasks: int
    totalTasks: int
    lastActivity: Optional[str] = None
    message: Optional[str] = None
