"""可复用的视图基类."""

from .form_controller_view import FormControllerView

__all__ = ["FormControllerView"]
