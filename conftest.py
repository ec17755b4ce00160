import pytest
from rest_framework.test import APIClient

from branches.models import Branch, BranchService
from operations.models import Operation
from users.models import User
from users.services import issue_tokens


PASSWORD = 'secret123'


@pytest.fixture
def api_client():
    return APIClient()


@pytest.fixture
def owner(db):
    return User.objects.create_owner('+251911000001', PASSWORD, name='Abebe Owner')


@pytest.fixture
def other_owner(db):
    return User.objects.create_owner('+251911000009', PASSWORD, name='Other Owner')


@pytest.fixture
def branch(owner):
    return Branch.objects.create(name='Bole', owner=owner)


@pytest.fixture
def haircut(branch):
    return BranchService.objects.create(
        branch=branch, position=0, name='Cut',
        barber_price=100, washer_price=50,
    )


@pytest.fixture
def admin_staff(branch):
    return User.objects.create_staff('+251911000002', PASSWORD, 'admin', branch, name='Almaz Admin')


@pytest.fixture
def barber(branch):
    return User.objects.create_staff('+251911000003', PASSWORD, 'barber', branch, name='Bekele Barber')


@pytest.fixture
def other_barber(branch):
    return User.objects.create_staff('+251911000004', PASSWORD, 'barber', branch, name='Dawit Barber')


@pytest.fixture
def washer(branch):
    return User.objects.create_staff('+251911000005', PASSWORD, 'washer', branch, name='Meron Washer')


@pytest.fixture
def customer(db):
    return User.objects.create_user('+251911000006', PASSWORD, name='Kebede Customer')


@pytest.fixture
def client_for():
    """APIClient carrying a bearer token for ``user``"""
    def make(user):
        client = APIClient()
        client.credentials(HTTP_AUTHORIZATION=f"Bearer {issue_tokens(user)['token']}")
        return client
    return make


@pytest.fixture
def make_operation():
    def make(user, name='Cut', price=100, status=Operation.STATUS_PENDING, **extra):
        kind = extra.pop('kind', user.operation_kind)
        return Operation.objects.create(
            user=user, kind=kind, branch=user.branch,
            name=name, price=price, status=status, **extra
        )
    return make
