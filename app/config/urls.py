"""
Root URLconf.

    /                            ReDoc
    /schema/                     OpenAPI schema
    /admin/                      Django admin
    /health/                     health probe
    /api/v1/auth/token/          JWT pair (email + password)
    /api/v1/auth/token/refresh/
    /api/v1/payments/            see payments.urls
"""

from django.contrib import admin
from django.urls import include, path
from drf_spectacular.views import SpectacularAPIView, SpectacularRedocView
from rest_framework_simplejwt.views import TokenObtainPairView, TokenRefreshView

from core.views import health_check

api_v1 = [
    path("auth/token/", TokenObtainPairView.as_view(), name="token_obtain_pair"),
    path("auth/token/refresh/", TokenRefreshView.as_view(), name="token_refresh"),
    path("payments/", include("payments.urls")),
]

urlpatterns = [
    path("", SpectacularRedocView.as_view(url_name="schema"), name="redoc"),
    path("schema/", SpectacularAPIView.as_view(), name="schema"),
    path("admin/", admin.site.urls),
    path("health/", health_check, name="health_check"),
    path("api/v1/", include(api_v1)),
]

admin.site.site_header = "Subscription Billing Admin"
admin.site.site_title = "Billing Admin"
admin.site.index_title = "Orders and accounts"
