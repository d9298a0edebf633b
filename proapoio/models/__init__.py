"""Database models."""

# Import all models in dependency order to ensure proper relationship initialization

# Base models (no foreign keys)
from proapoio.models.user import User

# Profiles
from proapoio.models.candidate import Candidate
from proapoio.models.institution import Institution

# Models with foreign keys to profiles
from proapoio.models.vacancy import Vacancy
from proapoio.models.proposal import Proposal

# Export all models
__all__ = [
    "User",
    "Candidate",
    "Institution",
    "Vacancy",
    "Proposal",
]
