from django.contrib.auth import get_user_model
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView
from rest_framework_simplejwt.views import TokenObtainPairView

from . import services
from .permissions import Action, Resource, RoleGate
from .serializers import (
    EmailTokenObtainPairSerializer,
    PasswordChangeSerializer,
    ProfileUpdateSerializer,
    RegisterSerializer,
    RoleUpdateSerializer,
    UserSerializer,
)

User = get_user_model()


class RegisterView(APIView):
    """Create a new customer account and issue an initial JWT pair."""

    permission_classes = [AllowAny]

    def post(self, request, *args, **kwargs):
        serializer = RegisterSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = serializer.save()
        refresh = EmailTokenObtainPairSerializer.get_token(user)
        return Response(
            {
                "user": UserSerializer(user).data,
                "access": str(refresh.access_token),
                "refresh": str(refresh),
            },
            status=status.HTTP_201_CREATED,
        )


class LoginView(TokenObtainPairView):
    """Authenticate an existing user via email + password."""

    serializer_class = EmailTokenObtainPairSerializer


class MeView(APIView):
    """Return the serialized profile for the current authenticated user."""

    def get(self, request, *args, **kwargs):
        return Response(UserSerializer(request.user).data)

    def patch(self, request, *args, **kwargs):
        """Update the current user's profile."""
        serializer = ProfileUpdateSerializer(
            instance=request.user, data=request.data, partial=True
        )
        serializer.is_valid(raise_exception=True)
        user = serializer.save()
        return Response(UserSerializer(user).data)


class ChangePasswordView(APIView):
    """Allow the current user to rotate their password after verifying the old one."""

    permission_classes = [IsAuthenticated]

    def post(self, request, *args, **kwargs):
        serializer = PasswordChangeSerializer(
            data=request.data, context={"request": request}
        )
        serializer.is_valid(raise_exception=True)
        serializer.save()
        return Response(status=status.HTTP_204_NO_CONTENT)


class AdminUserViewSet(viewsets.ReadOnlyModelViewSet):
    """User administration for admins; privileged accounts need a super admin."""

    serializer_class = UserSerializer
    permission_classes = [IsAuthenticated, RoleGate]
    gate_rules = {"*": (Resource.USER, Action.MANAGE)}
    filterset_fields = ["role", "is_active"]
    search_fields = ["email", "full_name"]
    ordering_fields = ["date_joined", "email"]

    def get_queryset(self):
        return User.objects.all().order_by("id")

    @action(detail=True, methods=["patch"], url_path="role")
    def role(self, request, pk=None):
        target = self.get_object()
        serializer = RoleUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = services.update_role(
            actor=request.user, target=target, role=serializer.validated_data["role"]
        )
        return Response(UserSerializer(user).data)

    @action(detail=True, methods=["patch"], url_path="status")
    def toggle_status(self, request, pk=None):
        target = self.get_object()
        user = services.toggle_active(actor=request.user, target=target)
        return Response(UserSerializer(user).data)

    def destroy(self, request, *args, **kwargs):
        target = self.get_object()
        services.delete_user(actor=request.user, target=target)
        return Response(status=status.HTTP_204_NO_CONTENT)
