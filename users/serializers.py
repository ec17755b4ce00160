# users/serializers.py
from rest_framework import serializers
from branches.models import Branch
from .models import User
from .utils import to_e164


class RegisterSerializer(serializers.Serializer):
    """
    Register a user of any role; staff roles need a branch
    """
    name = serializers.CharField(min_length=2, max_length=150)
    phone = serializers.CharField(min_length=8, max_length=25)
    password = serializers.CharField(min_length=6, max_length=128, write_only=True)
    role = serializers.ChoiceField(choices=[c[0] for c in User.ROLE_CHOICES])
    branchId = serializers.PrimaryKeyRelatedField(
        queryset=Branch.objects.all(),
        source='branch',
        required=False,
        allow_null=True,
        error_messages={'does_not_exist': "Branch does not exist"},
    )

    def validate_phone(self, value):
        try:
            return to_e164(value)
        except ValueError as e:
            raise serializers.ValidationError(str(e))

    def validate(self, attrs):
        if attrs['role'] in User.STAFF_ROLES and not attrs.get('branch'):
            raise serializers.ValidationError("Branch is required for admin, barber and washer")
        return attrs


class LoginSerializer(serializers.Serializer):
    phone = serializers.CharField()
    password = serializers.CharField(write_only=True)


class UserSerializer(serializers.ModelSerializer):
    """
    Public view of a user; the password hash never leaves the server
    """
    branchId = serializers.PrimaryKeyRelatedField(source='branch', read_only=True)
    branchName = serializers.CharField(source='branch.name', read_only=True, default=None)

    class Meta:
        model = User
        fields = [
            'id', 'name', 'phone', 'role', 'branchId', 'branchName',
            'is_active', 'is_suspended', 'created_at'
        ]
        read_only_fields = fields


class StaffUpdateSerializer(serializers.ModelSerializer):
    """
    Owner edits of a staff member
    """
    branchId = serializers.PrimaryKeyRelatedField(
        queryset=Branch.objects.all(),
        source='branch',
        required=False,
        error_messages={'does_not_exist': "Branch does not exist"},
    )
    role = serializers.ChoiceField(choices=list(User.STAFF_ROLES), required=False)

    class Meta:
        model = User
        fields = ['name', 'phone', 'role', 'branchId', 'is_active']
        extra_kwargs = {
            'name': {'required': False},
            'phone': {'required': False},
            'is_active': {'required': False},
        }

    def validate_phone(self, value):
        try:
            phone = to_e164(value)
        except ValueError as e:
            raise serializers.ValidationError(str(e))
        if User.objects.filter(phone=phone).exclude(pk=self.instance.pk if self.instance else None).exists():
            raise serializers.ValidationError("User with this phone already exists")
        return phone


class ClaimsSerializer(serializers.Serializer):
    """
    Current token claims (GET /api/auth/me/)
    """
    id = serializers.CharField()
    name = serializers.CharField(allow_null=True)
    phone = serializers.CharField(allow_null=True)
    role = serializers.CharField(allow_null=True)
