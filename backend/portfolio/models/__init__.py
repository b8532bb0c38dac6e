from portfolio.models.career import Education, Experience
from portfolio.models.message import Message
from portfolio.models.role import Role, user_roles
from portfolio.models.showcase import Project, Skill
from portfolio.models.social_link import SocialLink
from portfolio.models.user import User

__all__ = [
    "Education",
    "Experience",
    "Message",
    "Project",
    "Role",
    "Skill",
    "SocialLink",
    "User",
    "user_roles",
]
