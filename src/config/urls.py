from drf_spectacular.views import (
    SpectacularAPIView,
    SpectacularRedocView,
    SpectacularSwaggerView,
)

from django.urls import include, path

urlpatterns = [
    # Domain modules, versioned API
    path("api/v1/", include("modules.cart.urls")),
    path("api/v1/", include("modules.orders.urls")),
    path("api/v1/", include("modules.bookings.urls")),
    path("api/v1/", include("modules.learning.urls")),
    # OpenAPI schema & docs (public)
    path("api/schema/", SpectacularAPIView.as_view(), name="schema"),
    path(
        "api/docs/",
        SpectacularSwaggerView.as_view(url_name="schema"),
        name="swagger-ui",
    ),
    path("api/redoc/", SpectacularRedocView.as_view(url_name="schema"), name="redoc"),
]
