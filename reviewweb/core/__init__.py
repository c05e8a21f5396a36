"""
ReviewWeb core module.

Provides the controller every front end calls, plus the shared error
taxonomy and logging setup.
"""

from reviewweb.core.errors import ErrorType, ReviewWebError
from reviewweb.core.controller import ControllerResponse, ReviewWebController, run_operation

__all__ = ["ErrorType", "ReviewWebError", "ControllerResponse", "ReviewWebController", "run_operation"]
