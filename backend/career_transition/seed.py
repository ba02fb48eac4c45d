from datetime import datetime, timedelta
import logging

from sqlalchemy.orm import Session

from career_transition.core.database import SessionLocal, init_db
from career_transition.core.logging import configure_logging
from career_transition.models.entities import CareerPlan, IntakeSession, ProgressTracking, User
from career_transition.services.auth import hash_password
from career_transition.services.plans import PLAN_AGENT_ID

logger = logging.getLogger("career_transition.seed")

DEMO_PASSWORD = "password123"

DEMO_USERS = [
    ("john.doe@example.com", "John Doe"),
    ("jane.smith@example.com", "Jane Smith"),
]

DEMO_CONVERSATION = [
    ("assistant", "Hi! I'm here to help you plan your career transition. What is your current role?"),
    ("user", "I'm currently working as a Marketing Manager at a tech company."),
    ("assistant", "Great! What role or career are you looking to transition into?"),
    ("user", "I want to become a Product Manager."),
    ("assistant", "Excellent choice! What's your timeline for making this transition?"),
    ("user", "I'm hoping to transition within the next 12 months."),
    ("assistant", "What skills do you currently have that you think will help in product management?"),
    (
        "user",
        "I have strong communication skills, experience with user research, and I understand "
        "the product development lifecycle from working closely with product teams.",
    ),
    (
        "assistant",
        "Thank you! I have all the information I need to create your personalized career transition plan.",
    ),
]

DEMO_INTAKE_DATA = {
    "currentRole": "Marketing Manager",
    "targetRole": "Product Manager",
    "timeline": "12 months",
    "skills": ["Communication", "User Research", "Product Development Lifecycle"],
    "experience": "5 years in marketing at tech companies",
    "education": "Bachelor's in Marketing",
    "motivations": "Want to have more impact on product decisions and strategy",
    "constraints": {
        "time": "10-15 hours per week",
        "budget": "$2000 for courses",
        "location": "Remote or San Francisco Bay Area",
    },
}


def _task(task_id: str, title: str, description: str, resource: tuple[str, str, str]) -> dict:
    resource_title, url, resource_type = resource
    return {
        "id": task_id,
        "title": title,
        "description": description,
        "resources": [{"type": resource_type, "title": resource_title, "url": url, "description": ""}],
    }


DEMO_PHASES = [
    {
        "title": "Foundation Building",
        "description": "Build core product management skills and knowledge",
        "duration": "3 months",
        "phaseNumber": 1,
        "milestones": [
            {
                "id": "milestone-1-1",
                "title": "Complete Product Management Fundamentals",
                "description": "Learn the basics of product management through online courses",
                "tasks": [
                    _task(
                        "task-1-1-1",
                        'Complete "Product Management 101" on Coursera',
                        "Comprehensive introduction to product management principles",
                        (
                            "Product Management 101 - Coursera",
                            "https://www.coursera.org/learn/product-management",
                            "course",
                        ),
                    ),
                    _task(
                        "task-1-1-2",
                        'Read "Inspired" by Marty Cagan',
                        "Essential book on product management",
                        (
                            "Inspired - Amazon",
                            "https://www.amazon.com/INSPIRED-Create-Tech-Products-Customers/dp/1119387507",
                            "book",
                        ),
                    ),
                ],
            },
            {
                "id": "milestone-1-2",
                "title": "Learn Product Analytics",
                "description": "Understand how to use data to make product decisions",
                "tasks": [
                    _task(
                        "task-1-2-1",
                        "Complete Google Analytics certification",
                        "Learn to analyze product metrics",
                        (
                            "Google Analytics Academy",
                            "https://analytics.google.com/analytics/academy/",
                            "course",
                        ),
                    ),
                ],
            },
        ],
    },
    {
        "title": "Practical Experience",
        "description": "Gain hands-on product management experience",
        "duration": "4 months",
        "phaseNumber": 2,
        "milestones": [
            {
                "id": "milestone-2-1",
                "title": "Lead Cross-functional Project",
                "description": "Take ownership of a product initiative in current role",
                "tasks": [
                    _task(
                        "task-2-1-1",
                        "Volunteer for product launch project",
                        "Work with engineering, design, and sales teams",
                        (
                            "Cross-functional leadership guide",
                            "https://www.atlassian.com/team-playbook",
                            "article",
                        ),
                    ),
                ],
            },
        ],
    },
]

DEMO_COMPLETED_TASKS = ["task-1-1-1", "task-1-1-2"]


def get_or_create_user(session: Session, email: str, name: str) -> User:
    user = session.query(User).filter(User.email == email).one_or_none()
    if user:
        return user
    salt, digest = hash_password(DEMO_PASSWORD)
    user = User(email=email, name=name, password_salt=salt, password_hash=digest)
    session.add(user)
    session.flush()
    return user


def ensure_demo_plan(session: Session, user: User) -> None:
    if session.query(CareerPlan).filter(CareerPlan.user_id == user.id).first():
        return

    now = datetime.utcnow()
    intake = IntakeSession(
        user_id=user.id,
        conversation_history=[
            {"role": role, "content": content, "timestamp": now.isoformat()}
            for role, content in DEMO_CONVERSATION
        ],
        current_step=8,
        is_complete=True,
        collected_data=DEMO_INTAKE_DATA,
    )
    session.add(intake)
    session.flush()

    plan = CareerPlan(
        user_id=user.id,
        intake_session_id=intake.id,
        target_role=DEMO_INTAKE_DATA["targetRole"],
        current_role=DEMO_INTAKE_DATA["currentRole"],
        timeline=DEMO_INTAKE_DATA["timeline"],
        phases=DEMO_PHASES,
        agent_id=PLAN_AGENT_ID,
    )
    session.add(plan)
    session.flush()

    yesterday = now - timedelta(days=1)
    session.add(
        ProgressTracking(
            user_id=user.id,
            plan_id=plan.id,
            completed_tasks=list(DEMO_COMPLETED_TASKS),
            current_phase=0,
            streak_days=2,
            last_activity=yesterday,
            activity_log={
                (yesterday - timedelta(days=1)).date().isoformat(): 1,
                yesterday.date().isoformat(): 1,
            },
        )
    )
    session.flush()


def seed() -> None:
    init_db()
    session = SessionLocal()
    try:
        users = [get_or_create_user(session, email, name) for email, name in DEMO_USERS]
        ensure_demo_plan(session, users[0])
        session.commit()
        logger.info("Seeded demo users: %s", ", ".join(user.email for user in users))
    finally:
        session.close()


if __name__ == "__main__":
    configure_logging()
    seed()
