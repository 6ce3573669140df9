from django.conf import settings
from django.conf.urls.static import static
from django.contrib import admin
from django.urls import include, path
from rest_framework.routers import DefaultRouter
from rest_framework_simplejwt.views import TokenRefreshView

from accounts.api import (
    AdminUserViewSet,
    ChangePasswordView,
    LoginView,
    MeView,
    RegisterView,
)
from bookings.api import AdminBookingViewSet, BookingViewSet, OwnerBookingViewSet
from catalog.api import AdminGameViewSet, CategoryViewSet, GameViewSet, PartnerGameViewSet
from disputes.api import AdminDisputeViewSet, DisputeViewSet
from partners.api import AdminPartnerApplicationViewSet, MyPartnerApplicationView
from payments.api import AdminPaymentViewSet, BookingPaymentsView, PaymentWebhookView
from reviews.api import GameReviewListView, ReviewCreateView

router = DefaultRouter()
router.register(r"categories", CategoryViewSet, basename="category")
router.register(r"games", GameViewSet, basename="game")
router.register(r"partner/games", PartnerGameViewSet, basename="partner-game")
router.register(r"partner/bookings", OwnerBookingViewSet, basename="partner-booking")
router.register(r"bookings", BookingViewSet, basename="booking")
router.register(r"disputes", DisputeViewSet, basename="dispute")
router.register(r"admin/users", AdminUserViewSet, basename="admin-user")
router.register(r"admin/games", AdminGameViewSet, basename="admin-game")
router.register(r"admin/bookings", AdminBookingViewSet, basename="admin-booking")
router.register(r"admin/payments", AdminPaymentViewSet, basename="admin-payment")
router.register(
    r"admin/partner-applications",
    AdminPartnerApplicationViewSet,
    basename="admin-partner-application",
)
router.register(r"admin/disputes", AdminDisputeViewSet, basename="admin-dispute")

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
        "api/bookings/<int:booking_id>/payments/",
        BookingPaymentsView.as_view(),
        name="booking-payments",
    ),
    path(
        "api/games/<int:game_id>/reviews/",
        GameReviewListView.as_view(),
        name="game-reviews",
    ),
    path("api/reviews/", ReviewCreateView.as_view(), name="review-create"),
    path(
        "api/partner-applications/me/",
        MyPartnerApplicationView.as_view(),
        name="my-partner-application",
    ),
    path("api/webhooks/payments/", PaymentWebhookView.as_view(), name="payment-webhook"),
    path("api/", include(router.urls)),
]

if settings.DEBUG:
    urlpatterns += static(settings.MEDIA_URL, document_root=settings.MEDIA_ROOT)
