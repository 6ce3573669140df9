from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from accounts.permissions import Action, Resource, RoleGate
from core.exceptions import NotFound

from . import services
from .models import PartnerApplication
from .serializers import ApplicationRejectSerializer, PartnerApplicationSerializer


class MyPartnerApplicationView(APIView):
    """Submit or view the current user's partner application."""

    permission_classes = [IsAuthenticated, RoleGate]
    gate_rules = {"post": (Resource.PARTNER_APPLICATION, Action.CREATE)}

    def get(self, request, *args, **kwargs):
        application = PartnerApplication.objects.filter(user=request.user).first()
        if application is None:
            raise NotFound("No partner application submitted.")
        return Response(PartnerApplicationSerializer(application).data)

    def post(self, request, *args, **kwargs):
        serializer = PartnerApplicationSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        application = services.submit_application(
            user=request.user, data=serializer.validated_data
        )
        return Response(
            PartnerApplicationSerializer(application).data, status=status.HTTP_201_CREATED
        )


class AdminPartnerApplicationViewSet(viewsets.ReadOnlyModelViewSet):
    serializer_class = PartnerApplicationSerializer
    permission_classes = [IsAuthenticated, RoleGate]
    gate_rules = {"*": (Resource.PARTNER_APPLICATION, Action.MANAGE)}
    filterset_fields = ["status"]
    search_fields = ["business_name", "user__email"]
    ordering_fields = ["submitted_at"]

    def get_queryset(self):
        return PartnerApplication.objects.select_related("user", "decided_by")

    @action(detail=True, methods=["post"], url_path="approve")
    def approve(self, request, pk=None):
        application = services.approve_application(
            admin=request.user, application=self.get_object()
        )
        return Response(self.get_serializer(application).data)

    @action(detail=True, methods=["post"], url_path="reject")
    def reject(self, request, pk=None):
        serializer = ApplicationRejectSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        application = services.reject_application(
            admin=request.user,
            application=self.get_object(),
            reason=serializer.validated_data["reason"],
        )
        return Response(self.get_serializer(application).data)
