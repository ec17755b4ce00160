# users/views.py
import logging
from rest_framework.views import APIView
from rest_framework.response import Response
from rest_framework import status, permissions, generics
from rest_framework.exceptions import PermissionDenied
from django.shortcuts import get_object_or_404
from django_filters.rest_framework import DjangoFilterBackend

from .models import User
from .filters import StaffFilter
from .permissions import IsOwner, caller_claim, caller_id
from .serializers import (
    RegisterSerializer, LoginSerializer, UserSerializer,
    StaffUpdateSerializer, ClaimsSerializer
)
from .services import register_user, login_with_phone, reactivate_user, suspend_user

logger = logging.getLogger(__name__)


def owned_staff(request, user_id):
    """Staff user by id; 403 unless they work in one of the caller's branches"""
    user = get_object_or_404(User.objects.select_related('branch'), pk=user_id)
    if user.branch is None or str(user.branch.owner_id) != caller_id(request.user):
        raise PermissionDenied("User does not belong to your branches")
    return user


class RegisterView(APIView):
    """
    Register a new user
    POST /api/auth/register/
    """
    permission_classes = [permissions.AllowAny]
    authentication_classes = []

    def post(self, request):
        serializer = RegisterSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        data = serializer.validated_data
        result = register_user(
            name=data['name'],
            phone=data['phone'],
            password=data['password'],
            role=data['role'],
            branch=data.get('branch'),
        )

        if "error" in result:
            error_code, error_detail = result["error"]
            return Response({
                "code": error_code,
                "error": error_detail
            }, status=status.HTTP_400_BAD_REQUEST)

        return Response({
            "message": "Registered",
            **result["ok"]
        }, status=status.HTTP_201_CREATED)


class LoginView(APIView):
    """
    Login with phone + password
    POST /api/auth/login/
    """
    permission_classes = [permissions.AllowAny]
    authentication_classes = []

    def post(self, request):
        serializer = LoginSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = login_with_phone(**serializer.validated_data)

        if "error" in result:
            error_code, error_detail, http_status = result["error"]
            logger.info(f"Login refused for {serializer.validated_data['phone']}: {error_code}")
            return Response({
                "code": error_code,
                "error": error_detail
            }, status=http_status)

        return Response(result["ok"], status=status.HTTP_200_OK)


class MeView(APIView):
    """
    Claims of the current token
    GET /api/auth/me/
    """

    def get(self, request):
        serializer = ClaimsSerializer({
            'id': caller_id(request.user),
            'name': caller_claim(request.user, 'name'),
            'phone': caller_claim(request.user, 'phone'),
            'role': caller_claim(request.user, 'role'),
        })
        return Response(serializer.data)


class StaffListView(generics.ListAPIView):
    """
    Staff (admin/barber/washer) across all branches of an owner
    GET /api/users/?ownerId=<id>
    """
    serializer_class = UserSerializer
    permission_classes = [IsOwner]
    filter_backends = [DjangoFilterBackend]
    filterset_class = StaffFilter

    def list(self, request, *args, **kwargs):
        if not request.query_params.get('ownerId'):
            return Response({"error": "Owner ID is required"}, status=status.HTTP_400_BAD_REQUEST)
        if request.query_params['ownerId'] != caller_id(request.user):
            raise PermissionDenied("You can only list your own staff")
        return super().list(request, *args, **kwargs)

    def get_queryset(self):
        owner_id = self.request.query_params.get('ownerId')
        if not str(owner_id).isdigit():
            return User.objects.none()
        return User.objects.filter(
            branch__owner_id=owner_id,
            role__in=User.STAFF_ROLES
        ).select_related('branch')


class StaffDetailView(generics.RetrieveUpdateDestroyAPIView):
    """
    GET/PUT/DELETE /api/users/<id>/
    """
    queryset = User.objects.select_related('branch')
    permission_classes = [IsOwner]
    lookup_url_kwarg = 'user_id'

    def get_object(self):
        return owned_staff(self.request, self.kwargs['user_id'])

    def get_serializer_class(self):
        if self.request.method in ('PUT', 'PATCH'):
            return StaffUpdateSerializer
        return UserSerializer

    def update(self, request, *args, **kwargs):
        kwargs['partial'] = True
        super().update(request, *args, **kwargs)
        return Response(UserSerializer(self.get_object()).data)

    def perform_destroy(self, instance):
        logger.info(f"Owner {caller_id(self.request.user)} deleted user {instance.phone}")
        instance.delete()


class ReactivateUserView(APIView):
    """
    PUT /api/users/<id>/reactivate/
    """
    permission_classes = [IsOwner]

    def put(self, request, user_id):
        user = owned_staff(request, user_id)
        reactivate_user(user)
        return Response({
            "message": "User reactivated successfully",
            "user": UserSerializer(user).data
        })


class SuspendUserView(APIView):
    """
    PUT /api/users/<id>/suspend/
    """
    permission_classes = [IsOwner]

    def put(self, request, user_id):
        user = owned_staff(request, user_id)
        suspend_user(user)
        return Response({
            "message": "User suspended successfully",
            "user": UserSerializer(user).data
        })


class WorkersListView(generics.ListAPIView):
    """
    Barbers and washers, used by admins when recording operations
    GET /api/workers/?branch=<id>
    """
    serializer_class = UserSerializer
    filter_backends = [DjangoFilterBackend]
    filterset_class = StaffFilter

    def get_queryset(self):
        return User.objects.filter(
            role__in=User.WORKER_ROLES,
            is_active=True,
            is_suspended=False
        ).select_related('branch').order_by('name')
