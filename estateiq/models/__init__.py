from sqlalchemy.orm import declarative_base

Base = declarative_base()

# Register models on Base.metadata
from estateiq.models.user import User  # noqa: E402
from estateiq.models.session import UserSession  # noqa: E402
from estateiq.models.roe_analysis import PropertyRoeAnalysis  # noqa: E402

__all__ = ["Base", "User", "UserSession", "PropertyRoeAnalysis"]
