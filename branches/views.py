# branches/views.py
import logging
from django.db import transaction
from django.shortcuts import get_object_or_404
from rest_framework import status, permissions
from rest_framework.exceptions import PermissionDenied, ValidationError
from rest_framework.response import Response
from rest_framework.views import APIView

from users.permissions import IsOwner, caller_id, caller_role
from .models import Branch, BranchService
from .serializers import (
    BranchSerializer, BranchListItemSerializer, BranchServiceSerializer,
    ServiceUpdateSerializer, ShareSettingsSerializer
)
from .services import migrate_share_settings
from .shares import branch_shares, default_shares

logger = logging.getLogger(__name__)


def owned_branch(request, branch_id):
    """Branch by id; 403 unless the caller owns it"""
    branch = get_object_or_404(Branch, pk=branch_id)
    if str(branch.owner_id) != caller_id(request.user):
        raise PermissionDenied("You do not own this branch")
    return branch


def parse_service_index(value, services):
    try:
        index = int(value)
    except (TypeError, ValueError):
        raise ValidationError("Service index is required")
    if index < 0 or index >= len(services):
        raise ValidationError("Invalid service index")
    return index


class BranchListCreateView(APIView):
    """
    GET  /api/branches/?ownerId=<id>   branches of an owner (with services)
    GET  /api/branches/                id + name of every branch (login picker)
    POST /api/branches/                create a branch (owner)
    """

    def get_permissions(self):
        if self.request.method == 'POST':
            return [IsOwner()]
        return [permissions.AllowAny()]

    def get(self, request):
        owner_id = request.query_params.get('ownerId')

        if owner_id is None:
            branches = Branch.objects.only('id', 'name')
            return Response(BranchListItemSerializer(branches, many=True).data)

        if not owner_id.isdigit():
            return Response({"error": "Invalid owner ID"}, status=status.HTTP_400_BAD_REQUEST)

        branches = Branch.objects.filter(owner_id=owner_id).prefetch_related('services')
        return Response(BranchSerializer(branches, many=True).data)

    def post(self, request):
        serializer = BranchSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        branch = serializer.save(owner_id=int(caller_id(request.user)))

        logger.info(f"Owner {branch.owner_id} created branch {branch.id} ({branch.name})")
        return Response(BranchSerializer(branch).data, status=status.HTTP_201_CREATED)


class BranchDetailView(APIView):
    """
    GET/PUT/DELETE /api/branches/<id>/
    """

    def get_permissions(self):
        if self.request.method in ('PUT', 'PATCH', 'DELETE'):
            return [IsOwner()]
        return [permissions.IsAuthenticated()]

    def get(self, request, branch_id):
        branch = get_object_or_404(Branch, pk=branch_id)
        return Response(BranchSerializer(branch).data)

    def put(self, request, branch_id):
        branch = owned_branch(request, branch_id)
        serializer = BranchSerializer(branch, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        serializer.save()
        return Response(BranchSerializer(branch).data)

    def delete(self, request, branch_id):
        branch = owned_branch(request, branch_id)
        logger.info(f"Owner {branch.owner_id} deleted branch {branch.id} ({branch.name})")
        branch.delete()
        return Response({"message": "Branch deleted"})


class BranchServicesView(APIView):
    """
    POST   /api/branches/<id>/services/                   append a service
    PUT    /api/branches/<id>/services/                   {serviceIndex, service}
    DELETE /api/branches/<id>/services/?serviceIndex=<i>
    """
    permission_classes = [IsOwner]

    def post(self, request, branch_id):
        branch = owned_branch(request, branch_id)
        serializer = BranchServiceSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        defaults = default_shares()
        serializer.validated_data.setdefault('barber_share', defaults['barberShare'])
        serializer.validated_data.setdefault('washer_share', defaults['washerShare'])
        serializer.save(branch=branch, position=branch.services.count())

        return Response(BranchSerializer(branch).data, status=status.HTTP_201_CREATED)

    def put(self, request, branch_id):
        branch = owned_branch(request, branch_id)
        serializer = ServiceUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        services = branch.ordered_services()
        index = parse_service_index(serializer.validated_data['serviceIndex'], services)
        service = services[index]
        data = serializer.validated_data['service']

        # Share settings left out of the payload keep their previous values
        defaults = default_shares()
        if data.get('barber_share') is None:
            data['barber_share'] = service.barber_share if service.barber_share is not None else defaults['barberShare']
        if data.get('washer_share') is None:
            data['washer_share'] = service.washer_share if service.washer_share is not None else defaults['washerShare']

        for key, value in data.items():
            setattr(service, key, value)
        service.save()

        return Response(BranchSerializer(branch).data)

    def delete(self, request, branch_id):
        branch = owned_branch(request, branch_id)
        services = branch.ordered_services()
        index = parse_service_index(request.query_params.get('serviceIndex'), services)

        with transaction.atomic():
            services.pop(index).delete()
            for position, service in enumerate(services):
                if service.position != position:
                    service.position = position
                    service.save(update_fields=['position'])

        return Response(BranchSerializer(branch).data)


class ShareSettingsView(APIView):
    """
    Legacy branch-level share settings
    GET /api/branches/<id>/share-settings/
    PUT /api/branches/<id>/share-settings/   {shareSettings: {barberShare, washerShare}}
    """

    def get(self, request, branch_id):
        branch = get_object_or_404(Branch, pk=branch_id)
        return Response({"shareSettings": branch_shares(branch)})

    def put(self, request, branch_id):
        if caller_role(request.user) != 'owner':
            raise PermissionDenied("Only owners can update share settings")

        branch = owned_branch(request, branch_id)
        serializer = ShareSettingsSerializer(data=request.data.get('shareSettings') or {})
        serializer.is_valid(raise_exception=True)

        for key in ('barber_share', 'washer_share'):
            if key in serializer.validated_data:
                setattr(branch, key, serializer.validated_data[key])
        branch.save(update_fields=['barber_share', 'washer_share', 'updated_at'])

        logger.info(f"Share settings of branch {branch.id} set to {branch_shares(branch)}")
        return Response({
            "message": "Share settings updated",
            "shareSettings": branch_shares(branch)
        })


class MigrateShareSettingsView(APIView):
    """
    POST /api/branches/migrate-share-settings/
    """
    permission_classes = [IsOwner]

    def post(self, request):
        updated = migrate_share_settings(owner_id=caller_id(request.user))
        return Response({"message": "Migration complete", "updatedBranches": updated})
