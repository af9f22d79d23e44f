from django.urls import path
from .views import (
    EventListView,
    EventSlotsView,
    MyRegistrationView,
)

urlpatterns = [
    path("", EventListView.as_view(), name="event-list"),

    # Roster (GET ONLY)
    path(
        "registration/me/",
        MyRegistrationView.as_view(),
        name="my-registration",
    ),

    path(
        "<slug:key>/slots/",
        EventSlotsView.as_view(),
        name="event-slots",
    ),
]
