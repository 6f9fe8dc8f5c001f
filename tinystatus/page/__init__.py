"""Status page — check file loading, HTML rendering and daemon mode."""

from .render import render_html
from .source import CheckSource, IncidentSource
from .status_page import StatusPage
