"""
Application routes package.

Contains all API endpoint blueprints for the dashboard.
"""

from codedocgen.routes.flows import flows_bp
from codedocgen.routes.session import session_bp
from codedocgen.routes.views import views_bp

__all__ = ["flows_bp", "session_bp", "views_bp"]
