"""
ReviewWeb service module.

This module provides the HTTP client for the ReviewWeb.site REST API.
"""

from reviewweb.service.client import ReviewWebClient

__all__ = ["ReviewWebClient"]
