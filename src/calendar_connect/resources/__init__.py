"""Resource facades exposed on ConnectClient."""

from calendar_connect.resources.auth import Auth
from calendar_connect.resources.calendars import Calendars
from calendar_connect.resources.events import Events

__all__ = ["Auth", "Calendars", "Events"]
