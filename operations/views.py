# operations/views.py
"""
Operation lifecycle, recording and dashboard endpoints.

Role checks run on the token claims (users.permissions) before anything is
read. Barbers and washers are then limited to their own list, admins to
the users of their branch and owners to the users of the branches they own.
"""
import logging

from rest_framework import status, generics
from rest_framework.decorators import api_view, permission_classes
from rest_framework.exceptions import NotFound, PermissionDenied, ValidationError
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from branches.views import owned_branch
from users.models import User
from users.permissions import (
    IsAdminRole, IsOperationActor, IsOwner, IsOwnerOrAdmin,
    caller_claim, caller_id, caller_role,
)
from .filters import OperationFilter, WorkerOperationFilter
from .grouping import status_summary, with_indices
from .lifecycle import ById, ByIndex, ref_from_data, ref_from_index
from .models import Operation
from .reports import branch_report, worker_report
from .serializers import (
    OperationSerializer, WorkerOperationSerializer,
    SingleTransitionSerializer, FinishByIdSerializer, BulkTransitionSerializer,
    ConfirmPaymentSerializer, BulkConfirmPaymentSerializer,
    RecordWorkerOperationsSerializer, RecordAdminOperationsSerializer,
    AdminOperationUpdateSerializer,
)
from .services import (
    transition_one, transition_many,
    record_worker_operations, record_admin_operations,
    update_admin_operation, delete_admin_operation,
)

logger = logging.getLogger(__name__)


def scoped_user(request, user_id):
    """
    The user whose operations are addressed, once the caller may act on them:
    barbers and washers only on themselves, admins within their own branch,
    owners within the branches they own.
    """
    user = target_user(user_id)
    role = caller_role(request.user)
    me = caller_id(request.user)

    if str(user.id) == me:
        return user
    if role in User.WORKER_ROLES:
        raise PermissionDenied("Workers can only access their own operations")
    if role == User.ROLE_ADMIN:
        branch_id = caller_claim(request.user, 'branch_id')
        if branch_id is None or str(user.branch_id) != str(branch_id):
            raise PermissionDenied("User does not belong to your branch")
    if role == User.ROLE_OWNER:
        if user.branch is None or str(user.branch.owner_id) != me:
            raise PermissionDenied("User does not belong to your branches")
    return user


def target_user(user_id):
    user = User.objects.select_related('branch').filter(pk=user_id).first()
    if user is None:
        raise NotFound("User not found")
    return user


def caller_user(request, label='User'):
    user = User.objects.select_related('branch').filter(pk=caller_id(request.user)).first()
    if user is None:
        raise NotFound(f"{label} not found")
    return user


# ================================
# Single transitions
# ================================

@api_view(['PATCH'])
@permission_classes([IsOwner])
def update_operation(request, user_id, index):
    """
    Move the operation at ``index`` of the user's list
    PATCH /api/users/<id>/operations/<index>/   {status, finishedDate?}
    """
    serializer = SingleTransitionSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    data = serializer.validated_data

    user = scoped_user(request, user_id)
    index, operation = transition_one(
        user, [ByIndex(index)], data['status'],
        finished_date=data.get('finishedDate'),
    )
    operation.list_index = index

    return Response({
        "message": "Operation status updated successfully",
        "operation": OperationSerializer(operation).data
    })


@api_view(['POST'])
@permission_classes([IsOperationActor])
def confirm_payment(request, user_id):
    """
    POST /api/users/<id>/confirm-payment/
    {operationData?: {name, price}, operationIndex?, status, workerConfirmedDate?}

    The descriptor is tried first, then the index.
    """
    serializer = ConfirmPaymentSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    data = serializer.validated_data

    refs = []
    if data.get('operationData'):
        refs.append(ref_from_data(data['operationData']))
    if data.get('operationIndex') is not None:
        refs.append(ref_from_index(data['operationIndex']))

    user = scoped_user(request, user_id)
    index, operation = transition_one(
        user, refs, data['status'],
        worker_confirmed_date=data.get('workerConfirmedDate'),
        payment_confirmed_date=data.get('paymentConfirmedDate'),
    )
    operation.list_index = index

    return Response({
        "message": "Payment confirmed successfully",
        "status": operation.status,
        "operation": OperationSerializer(operation).data
    })


# ================================
# Bulk transitions
# ================================

def _bulk_refs(data):
    # Descriptors, when sent, take precedence over the indices
    if data.get('operationsData'):
        return [ref_from_data(item) for item in data['operationsData']]
    return [ref_from_index(index) for index in data['operationIndices']]


@api_view(['PATCH'])
@permission_classes([IsOperationActor])
def bulk_update_operations(request, user_id):
    """
    PATCH /api/users/<id>/operations/bulk-update/
    {operationIndices, status, finishedDate?, workerConfirmedDate?,
     paymentConfirmedDate?, operationsData?}
    """
    serializer = BulkTransitionSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    data = serializer.validated_data

    user = scoped_user(request, user_id)
    updated = transition_many(
        user, _bulk_refs(data), data['status'],
        finished_date=data.get('finishedDate'),
        worker_confirmed_date=data.get('workerConfirmedDate'),
        payment_confirmed_date=data.get('paymentConfirmedDate'),
    )

    return Response({
        "message": f"Successfully updated {updated} operations",
        "updatedCount": updated,
        "status": data['status']
    })


@api_view(['POST'])
@permission_classes([IsOperationActor])
def bulk_confirm_payment(request, user_id):
    """
    Always finishes the operations
    POST /api/users/<id>/bulk-confirm-payment/
    {operationIndices, operationsData?, workerConfirmedDate?}
    """
    serializer = BulkConfirmPaymentSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    data = serializer.validated_data

    user = scoped_user(request, user_id)
    updated = transition_many(
        user, _bulk_refs(data), Operation.STATUS_FINISHED,
        worker_confirmed_date=data.get('workerConfirmedDate'),
    )

    return Response({
        "message": f"Successfully confirmed {updated} payments",
        "updatedCount": updated,
        "status": Operation.STATUS_FINISHED
    })


# ================================
# Listings
# ================================

@api_view(['GET', 'PATCH'])
@permission_classes([IsOwner])
def user_operations(request, user_id):
    """
    GET   /api/users/<id>/operations/?date=YYYY-MM-DD&status=   newest first
    PATCH /api/users/<id>/operations/   {operationId}            finish by uid
    """
    if request.method == 'PATCH':
        serializer = FinishByIdSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        user = scoped_user(request, user_id)
        index, operation = transition_one(
            user, [ById(str(serializer.validated_data['operationId']))],
            Operation.STATUS_FINISHED,
        )
        operation.list_index = index
        return Response({
            "message": "Operation status updated successfully",
            "operation": OperationSerializer(operation).data
        })

    user = scoped_user(request, user_id)
    operations = Operation.objects.for_user(user)
    positions = {pk: index for index, pk in enumerate(operations.values_list('id', flat=True))}

    filterset = OperationFilter(request.query_params, queryset=operations)
    if not filterset.is_valid():
        raise ValidationError(filterset.errors)

    result = list(filterset.qs.order_by('-created_at', '-id'))
    for operation in result:
        operation.list_index = positions[operation.id]

    return Response(OperationSerializer(result, many=True).data)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def payment_confirmations(request, user_id):
    """
    Operations waiting for confirmation, latest confirmation first
    GET /api/users/<id>/payment-confirmations/
    """
    user = scoped_user(request, user_id)
    operations = [
        op for op in with_indices(Operation.objects.for_user(user))
        if op.status == Operation.STATUS_PENDING_TO_CONFIRM
    ]
    operations.sort(key=lambda op: op.payment_confirmed_date or op.created_at, reverse=True)

    return Response({
        "operations": OperationSerializer(operations, many=True).data,
        "count": len(operations)
    })


@api_view(['GET'])
@permission_classes([IsOwnerOrAdmin])
def operations_summary(request, user_id):
    """
    Dashboard: the user's operations per status, grouped by day
    GET /api/users/<id>/operations/summary/
    """
    user = scoped_user(request, user_id)
    operations = with_indices(Operation.objects.for_user(user))

    return Response({
        "user": {"id": user.id, "name": user.name, "role": user.role},
        **status_summary(operations, OperationSerializer)
    })


# ================================
# Recording (admin)
# ================================

class WorkerOperationsView(generics.ListAPIView):
    """
    POST /api/users/service-operations/   {serviceOperations: [...]}   (admin)
    GET  /api/users/service-operations/?branch=&userId=
    """
    serializer_class = WorkerOperationSerializer
    filterset_class = WorkerOperationFilter

    def get_permissions(self):
        if self.request.method == 'POST':
            return [IsAdminRole()]
        return [IsAuthenticated()]

    def get_queryset(self):
        queryset = Operation.objects.filter(kind=Operation.KIND_WORKER).select_related('user')
        params = self.request.query_params
        if not params.get('branch') and not params.get('userId'):
            queryset = queryset.filter(user_id=caller_id(self.request.user))
        return queryset.order_by('-created_at', '-id')

    def post(self, request):
        serializer = RecordWorkerOperationsSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        admin = caller_user(request, 'Admin user')
        results = record_worker_operations(admin, serializer.validated_data['serviceOperations'])

        return Response({
            "message": "Service operations saved successfully",
            "results": results
        }, status=status.HTTP_201_CREATED)


class AdminOperationsView(APIView):
    """
    POST /api/admin/service-operations/   {serviceOperations: [...]}
    GET  /api/admin/service-operations/   the caller's own list
    """
    permission_classes = [IsAdminRole]

    def get(self, request):
        admin = caller_user(request, 'Admin user')
        operations = with_indices(Operation.objects.for_user(admin))
        return Response(OperationSerializer(operations, many=True).data)

    def post(self, request):
        serializer = RecordAdminOperationsSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        admin = caller_user(request, 'Admin user')
        created = record_admin_operations(admin, serializer.validated_data['serviceOperations'])

        return Response({
            "message": "Admin service operations saved successfully",
            "results": OperationSerializer(created, many=True).data
        }, status=status.HTTP_201_CREATED)


class AdminOperationDetailView(APIView):
    """
    PUT    /api/admin/service-operations/<uid>/   {...changes, originalOperation?}
    DELETE /api/admin/service-operations/<uid>/   {originalOperation?}
    """
    permission_classes = [IsAdminRole]

    def put(self, request, uid):
        serializer = AdminOperationUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        changes = dict(serializer.validated_data)
        original = changes.pop('originalOperation', None)

        admin = caller_user(request, 'Admin user')
        operation = update_admin_operation(admin, uid, changes, original=original)

        return Response({
            "message": "Service operation updated successfully",
            "updatedOperation": OperationSerializer(operation).data
        })

    def delete(self, request, uid):
        original = request.data.get('originalOperation') if hasattr(request.data, 'get') else None

        admin = caller_user(request, 'Admin user')
        delete_admin_operation(admin, uid, original=original)

        return Response({"message": "Service operation deleted successfully"})


# ================================
# Reports
# ================================

@api_view(['GET'])
@permission_classes([IsOwner])
def branch_report_view(request, branch_id):
    """
    GET /api/report/branch/<id>/
    """
    branch = owned_branch(request, branch_id)
    return Response(branch_report(branch))


@api_view(['GET'])
@permission_classes([IsOperationActor])
def worker_report_view(request, user_id):
    """
    GET /api/report/worker/<id>/
    """
    return Response(worker_report(scoped_user(request, user_id)))
