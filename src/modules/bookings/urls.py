"""Booking URL configuration.

The list-level ``flights``, ``hotels`` and ``itinerary`` actions are routed
ahead of the detail route, so they never collide with a booking id.
"""

from __future__ import annotations

from rest_framework.routers import SimpleRouter

from modules.bookings.views import BookingViewSet

router = SimpleRouter()
router.register("bookings", BookingViewSet, basename="booking")

urlpatterns = router.urls
