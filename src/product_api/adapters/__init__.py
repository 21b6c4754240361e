"""
Adapter layer for the Product API.

Contains the object-storage adapter that moves staged attachments into the
media bucket.
"""
