"""
Request handlers for the Product API.

Each handler runs one endpoint's workflow and signals failures with
`product_api.errors.ProductApiError` subclasses.
"""

from .query import QueryHandler
from .submission import ATTACHMENT_FIELDS, SubmissionForm, SubmissionHandler

__all__ = ['ATTACHMENT_FIELDS', 'QueryHandler', 'SubmissionForm', 'SubmissionHandler']
