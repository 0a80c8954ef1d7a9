"""
verseboard - translation progress for Bible translation projects.

Computes audio and text completion per chapter of a source edition and
ranks recently changed audio assets.
"""

__version__ = "0.1.0"

# Re-export core models for convenience
from verseboard.core.config.models import VerseboardConfig
from verseboard.core.progress.models import ActivityEntry, ProgressAxis, ProgressSnapshot

__all__ = [
    "ActivityEntry",
    "ProgressAxis",
    "ProgressSnapshot",
    "VerseboardConfig",
    "__version__",
]
