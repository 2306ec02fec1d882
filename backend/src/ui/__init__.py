from .chat import render_chat
from .landing import render_landing
from .sidebar import render_sidebar

__all__ = ["render_chat", "render_landing", "render_sidebar"]
