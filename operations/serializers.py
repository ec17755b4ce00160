# operations/serializers.py
from rest_framework import serializers
from .models import Operation


INDICES_REQUIRED = "Operation indices are required"


# ==============================
# Output
# ==============================

class OperationSerializer(serializers.ModelSerializer):
    """
    An operation as the dashboards see it. ``index`` is its position in the
    owner's list when the view attached one.
    """
    index = serializers.IntegerField(source='list_index', read_only=True, default=None)
    userId = serializers.IntegerField(source='user_id', read_only=True)
    branchId = serializers.IntegerField(source='branch_id', read_only=True)
    price = serializers.DecimalField(max_digits=10, decimal_places=2, coerce_to_string=False, read_only=True)
    originalPrice = serializers.DecimalField(
        source='original_price', max_digits=10, decimal_places=2,
        coerce_to_string=False, read_only=True
    )
    paymentImageUrl = serializers.CharField(source='payment_image_url', read_only=True)
    createdAt = serializers.DateTimeField(source='created_at', read_only=True)
    finishedDate = serializers.DateTimeField(source='finished_date', read_only=True)
    workerConfirmedDate = serializers.DateTimeField(source='worker_confirmed_date', read_only=True)
    paymentConfirmedDate = serializers.DateTimeField(source='payment_confirmed_date', read_only=True)

    class Meta:
        model = Operation
        fields = [
            'uid', 'index', 'kind', 'userId', 'branchId',
            'name', 'price', 'originalPrice', 'status',
            'by', 'paymentImageUrl', 'workers',
            'createdAt', 'finishedDate', 'workerConfirmedDate', 'paymentConfirmedDate',
        ]
        read_only_fields = fields


class WorkerOperationSerializer(OperationSerializer):
    """Worker operation flattened with the worker it belongs to"""
    workerId = serializers.IntegerField(source='user.id', read_only=True)
    workerName = serializers.CharField(source='user.name', read_only=True)
    workerRole = serializers.CharField(source='user.role', read_only=True)

    class Meta(OperationSerializer.Meta):
        fields = OperationSerializer.Meta.fields + ['workerId', 'workerName', 'workerRole']
        read_only_fields = fields


# ==============================
# Lifecycle input
# ==============================

class OperationDataSerializer(serializers.Serializer):
    """``{name, price}`` descriptor, or ``{uid}`` for a stable reference"""
    uid = serializers.UUIDField(required=False)
    name = serializers.CharField(required=False)
    price = serializers.DecimalField(max_digits=12, decimal_places=2, required=False)

    def validate(self, attrs):
        if 'uid' not in attrs and ('name' not in attrs or 'price' not in attrs):
            raise serializers.ValidationError("Operation data needs a name and a price")
        return attrs


class StatusField(serializers.ChoiceField):

    def __init__(self, **kwargs):
        kwargs.setdefault('error_messages', {
            'required': "Status is required",
            'invalid_choice': "Invalid status",
        })
        super().__init__(choices=[c[0] for c in Operation.STATUS_CHOICES], **kwargs)


def indices_field(**kwargs):
    return serializers.ListField(
        child=serializers.IntegerField(),
        allow_empty=False,
        error_messages={
            'required': INDICES_REQUIRED,
            'null': INDICES_REQUIRED,
            'not_a_list': INDICES_REQUIRED,
            'empty': INDICES_REQUIRED,
        },
        **kwargs
    )


class SingleTransitionSerializer(serializers.Serializer):
    """PATCH /api/users/<id>/operations/<index>/"""
    status = StatusField()
    finishedDate = serializers.DateTimeField(required=False, allow_null=True)


class FinishByIdSerializer(serializers.Serializer):
    """PATCH /api/users/<id>/operations/"""
    operationId = serializers.UUIDField(error_messages={'required': "Operation ID is required"})


class BulkTransitionSerializer(serializers.Serializer):
    """PATCH /api/users/<id>/operations/bulk-update/"""
    operationIndices = indices_field()
    status = StatusField()
    finishedDate = serializers.DateTimeField(required=False, allow_null=True)
    workerConfirmedDate = serializers.DateTimeField(required=False, allow_null=True)
    paymentConfirmedDate = serializers.DateTimeField(required=False, allow_null=True)
    operationsData = OperationDataSerializer(many=True, required=False, allow_null=True)


class ConfirmPaymentSerializer(serializers.Serializer):
    """POST /api/users/<id>/confirm-payment/"""
    operationIndex = serializers.IntegerField(required=False, allow_null=True)
    operationData = OperationDataSerializer(required=False, allow_null=True)
    status = StatusField()
    workerConfirmedDate = serializers.DateTimeField(required=False, allow_null=True)
    paymentConfirmedDate = serializers.DateTimeField(required=False, allow_null=True)

    def validate(self, attrs):
        if attrs.get('operationIndex') is None and not attrs.get('operationData'):
            raise serializers.ValidationError("Operation index or operation data is required")
        return attrs


class BulkConfirmPaymentSerializer(serializers.Serializer):
    """POST /api/users/<id>/bulk-confirm-payment/"""
    operationIndices = indices_field()
    operationsData = OperationDataSerializer(many=True, required=False, allow_null=True)
    workerConfirmedDate = serializers.DateTimeField(required=False, allow_null=True)


# ==============================
# Recording input
# ==============================

class WorkerOperationEntrySerializer(serializers.Serializer):
    name = serializers.CharField(error_messages={'required': "Service name is required",
                                                 'blank': "Service name is required"})
    workerId = serializers.IntegerField(required=False, allow_null=True)
    barberPrice = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=0,
                                           required=False, allow_null=True)
    washerId = serializers.IntegerField(required=False, allow_null=True)
    washerPrice = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=0,
                                           required=False, allow_null=True)
    by = serializers.ChoiceField(choices=[c[0] for c in Operation.PAYMENT_CHOICES],
                                 required=False, allow_null=True)
    paymentImageUrl = serializers.URLField(required=False, allow_null=True, allow_blank=True)

    def validate(self, attrs):
        if not attrs.get('workerId') and not attrs.get('washerId'):
            raise serializers.ValidationError(
                "At least one worker (barber or washer) must be assigned"
            )
        return attrs


class RecordWorkerOperationsSerializer(serializers.Serializer):
    serviceOperations = WorkerOperationEntrySerializer(
        many=True, allow_empty=False,
        error_messages={
            'required': "Service operations array is required",
            'not_a_list': "Service operations array is required",
            'empty': "Service operations array is required",
        }
    )


class AdminWorkerSerializer(serializers.Serializer):
    workerId = serializers.IntegerField()
    price = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=0,
                                     required=False, allow_null=True)


class AdminOperationEntrySerializer(serializers.Serializer):
    name = serializers.CharField(error_messages={'required': "Service name is required",
                                                 'blank': "Service name is required"})
    price = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=0,
                                     error_messages={'required': "Price is required"})
    workers = AdminWorkerSerializer(many=True, required=False)
    # single-worker form
    workerId = serializers.IntegerField(required=False, allow_null=True)
    workerName = serializers.CharField(required=False, allow_blank=True)
    workerRole = serializers.CharField(required=False, allow_blank=True)
    by = serializers.ChoiceField(choices=[c[0] for c in Operation.PAYMENT_CHOICES],
                                 required=False, allow_null=True)
    paymentImageUrl = serializers.URLField(required=False, allow_null=True, allow_blank=True)

    def validate(self, attrs):
        if not attrs.get('workers') and not attrs.get('workerId'):
            raise serializers.ValidationError("At least one worker must be assigned")
        return attrs


class RecordAdminOperationsSerializer(serializers.Serializer):
    serviceOperations = AdminOperationEntrySerializer(
        many=True, allow_empty=False,
        error_messages={
            'required': "Service operations array is required",
            'not_a_list': "Service operations array is required",
            'empty': "Service operations array is required",
        }
    )


class AdminOperationUpdateSerializer(serializers.Serializer):
    """PUT /api/admin/service-operations/<uid>/"""
    name = serializers.CharField(required=False)
    price = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=0, required=False)
    workers = AdminWorkerSerializer(many=True, required=False, allow_empty=False)
    by = serializers.ChoiceField(choices=[c[0] for c in Operation.PAYMENT_CHOICES],
                                 required=False, allow_null=True)
    paymentImageUrl = serializers.URLField(required=False, allow_null=True, allow_blank=True)
    status = StatusField(required=False)
    originalOperation = OperationDataSerializer(required=False, allow_null=True)
