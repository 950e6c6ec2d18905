"""
Plagiarism Session Controller

Client-side controller for a class plagiarism check: triggers the pairwise
similarity scan, holds the returned pairs, classifies risk for a viewer and
summarizes the results for display.
"""

from .session import PlagiarismSessionController

__version__ = "0.1.0"

__all__ = ["PlagiarismSessionController", "__version__"]
