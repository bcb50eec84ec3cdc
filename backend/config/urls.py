from django.conf import settings
from django.conf.urls.static import static
from django.contrib import admin
from django.urls import include, path
from rest_framework.routers import DefaultRouter
from rest_framework_simplejwt.views import TokenRefreshView

from accounts.api import ChangePasswordView, LoginView, MeView, RegisterView
from bookings.api import BookingViewSet
from payments.api import (
    InitPaymentView,
    InvoiceView,
    PaymentCancelView,
    PaymentFailView,
    PaymentSuccessView,
)
from stats.api import BookingStatsView, PaymentStatsView, TourStatsView, UserStatsView
from tours.api import DivisionViewSet, TourTypeViewSet, TourViewSet

router = DefaultRouter()
router.register(r"tours", TourViewSet, basename="tour")
router.register(r"divisions", DivisionViewSet, basename="division")
router.register(r"tour-types", TourTypeViewSet, basename="tour-type")
router.register(r"bookings", BookingViewSet, basename="booking")

urlpatterns = [
    path("admin/", admin.site.urls),
    path("api/auth/register/", RegisterView.as_view(), name="auth-register"),
    path("api/auth/login/", LoginView.as_view(), name="auth-login"),
    path("api/auth/refresh/", TokenRefreshView.as_view(), name="auth-refresh"),
    path(
        "api/auth/change-password/",
        ChangePasswordView.as_view(),
        name="auth-change-password",
    ),
    path("api/auth/me/", MeView.as_view(), name="auth-me"),
    path(
        "api/payments/init-payment/<int:booking_id>/",
        InitPaymentView.as_view(),
        name="payment-init",
    ),
    path("api/payments/success/", PaymentSuccessView.as_view(), name="payment-success"),
    path("api/payments/fail/", PaymentFailView.as_view(), name="payment-fail"),
    path("api/payments/cancel/", PaymentCancelView.as_view(), name="payment-cancel"),
    path(
        "api/payments/invoice/<int:payment_id>/",
        InvoiceView.as_view(),
        name="payment-invoice",
    ),
    path("api/stats/bookings/", BookingStatsView.as_view(), name="stats-bookings"),
    path("api/stats/payments/", PaymentStatsView.as_view(), name="stats-payments"),
    path("api/stats/users/", UserStatsView.as_view(), name="stats-users"),
    path("api/stats/tours/", TourStatsView.as_view(), name="stats-tours"),
    path("api/", include(router.urls)),
]

if settings.DEBUG:
    urlpatterns += static(settings.MEDIA_URL, document_root=settings.MEDIA_ROOT)
