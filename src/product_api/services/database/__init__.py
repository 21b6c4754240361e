"""
Product API Database Layer

This module contains the Product API database services that provide
document-based operations over the submission records collection.
"""

from .submission_service import SubmissionService, USER_LOOKUP_INDEX

__all__ = ['SubmissionService', 'USER_LOOKUP_INDEX']
