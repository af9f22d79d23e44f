from .events import EventListView, EventSlotsView
from .registrations import MyRegistrationView
from .generics import api_error
