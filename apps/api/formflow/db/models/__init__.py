"""SQLAlchemy ORM models."""

from formflow.db.models.config import ProjectConfigItem
from formflow.db.models.forms import Form, Notification
from formflow.db.models.integrations import FormIntegration, Integration
from formflow.db.models.jobs import Job
from formflow.db.models.stencils import Stencil
from formflow.db.models.submissions import Submission

__all__ = [
    "Form",
    "FormIntegration",
    "Integration",
    "Job",
    "Notification",
    "ProjectConfigItem",
    "Stencil",
    "Submission",
]
