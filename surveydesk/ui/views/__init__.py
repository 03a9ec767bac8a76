"""
View renderers, one per ``View``.
"""

from collections.abc import Callable

from surveydesk.services.session import SessionController, View

from .auth import render_login, render_register
from .create import render_create
from .home import render_home
from .report import render_report
from .take import render_take

RENDERERS: dict[View, Callable[[SessionController], None]] = {
    View.LOGIN: render_login,
    View.REGISTER: render_register,
    View.HOME: render_home,
    View.CREATE: render_create,
    View.TAKE: render_take,
    View.REPORT: render_report,
}

_missing = set(View) - set(RENDERERS)
if _missing:
    raise RuntimeError(f"No renderer for view(s): {sorted(_missing)}")

__all__ = ["RENDERERS"]
