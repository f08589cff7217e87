# Package initialization
# Import all models to ensure they are registered on Base.metadata
from .study_block import StudyBlock

__all__ = [
    "StudyBlock",
]
