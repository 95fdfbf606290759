# Import chart modules to trigger self-registration.
import knitpreview.patterns.charts  # noqa: F401
from knitpreview.patterns.registry import Chart, get, list_types, register

__all__ = ["Chart", "get", "list_types", "register"]
