from datetime import datetime, timedelta
from decimal import Decimal

import pytest
from django.utils import timezone

from operations.models import Operation


pytestmark = pytest.mark.django_db


def at(operation, when):
    Operation.objects.filter(pk=operation.pk).update(created_at=when)
    operation.refresh_from_db()
    return operation


def local(year, month, day, hour=10):
    return timezone.make_aware(datetime(year, month, day, hour))


class TestOperationList:

    def test_newest_first_with_list_indices(self, owner, barber, client_for, make_operation):
        at(make_operation(barber, 'Old'), local(2025, 3, 1))
        at(make_operation(barber, 'New'), local(2025, 3, 2))

        response = client_for(owner).get(f'/api/users/{barber.id}/operations/')

        assert response.status_code == 200
        assert [(row['name'], row['index']) for row in response.data] == [('New', 1), ('Old', 0)]

    def test_single_day(self, owner, barber, client_for, make_operation):
        at(make_operation(barber, 'Morning'), local(2025, 3, 1, 7))
        at(make_operation(barber, 'Late'), local(2025, 3, 1, 23))
        at(make_operation(barber, 'Next day'), local(2025, 3, 2, 0))

        response = client_for(owner).get(f'/api/users/{barber.id}/operations/', {'date': '2025-03-01'})

        assert {row['name'] for row in response.data} == {'Morning', 'Late'}

    def test_status_filter(self, owner, barber, client_for, make_operation):
        make_operation(barber, 'Done', status='finished')
        make_operation(barber, 'Open')

        response = client_for(owner).get(f'/api/users/{barber.id}/operations/', {'status': 'finished'})

        assert [row['name'] for row in response.data] == ['Done']

    def test_bad_date(self, owner, barber, client_for):
        response = client_for(owner).get(f'/api/users/{barber.id}/operations/', {'date': 'yesterday'})
        assert response.status_code == 400


class TestPaymentConfirmations:

    def test_only_waiting_entries_latest_confirmation_first(self, barber, customer, client_for, make_operation):
        now = timezone.now()
        make_operation(barber, 'Open')
        make_operation(barber, 'Older', status='pending_to_confirm', payment_confirmed_date=now - timedelta(days=2))
        make_operation(barber, 'Newer', status='pending_to_confirm', payment_confirmed_date=now - timedelta(hours=1))
        make_operation(barber, 'Done', status='finished')

        response = client_for(customer).get(f'/api/users/{barber.id}/payment-confirmations/')

        assert response.status_code == 200
        assert response.data['count'] == 2
        assert [(row['name'], row['index']) for row in response.data['operations']] == [('Newer', 2), ('Older', 1)]

    def test_unknown_user(self, barber, client_for):
        response = client_for(barber).get('/api/users/9999/payment-confirmations/')
        assert response.status_code == 404


class TestSummary:

    def test_grouped_by_day_per_status(self, admin_staff, barber, client_for, make_operation):
        at(make_operation(barber, 'Cut', 50), local(2025, 3, 1))
        at(make_operation(barber, 'Beard', 20), local(2025, 3, 1, 15))
        at(make_operation(barber, 'Shave', 30), local(2025, 3, 3))
        at(make_operation(barber, 'Paid', 40, status='finished'), local(2025, 3, 2))

        response = client_for(admin_staff).get(f'/api/users/{barber.id}/operations/summary/')

        assert response.status_code == 200
        pending = response.data['pending']
        assert pending['count'] == 3
        assert pending['total'] == Decimal('100')
        assert [g['date'] for g in pending['groups']] == ['2025-03-03', '2025-03-01']
        assert pending['groups'][1]['count'] == 2
        assert pending['groups'][1]['total'] == Decimal('70')
        assert [op['name'] for op in pending['groups'][1]['operations']] == ['Beard', 'Cut']
        assert response.data['finished']['count'] == 1
        assert response.data['pending_to_confirm'] == {'groups': [], 'total': Decimal('0'), 'count': 0}

    def test_workers_cannot_view(self, barber, client_for):
        response = client_for(barber).get(f'/api/users/{barber.id}/operations/summary/')
        assert response.status_code == 401


class TestReports:

    def test_branch_totals_per_user(self, owner, branch, barber, washer, client_for, make_operation):
        make_operation(barber, 'Cut', 50, status='finished')
        make_operation(barber, 'Cut', 50)
        make_operation(washer, 'Wash', 5, status='pending_to_confirm')

        response = client_for(owner).get(f'/api/report/branch/{branch.id}/')

        assert response.status_code == 200
        assert response.data['count'] == 3
        assert response.data['total'] == Decimal('105')
        by_user = {row['userId']: row for row in response.data['users']}
        assert by_user[barber.id]['finished'] == {'count': 1, 'total': Decimal('50')}
        assert by_user[barber.id]['pending']['count'] == 1
        assert by_user[washer.id]['pending_to_confirm']['total'] == Decimal('5')

    def test_branch_of_another_owner(self, other_owner, branch, client_for):
        response = client_for(other_owner).get(f'/api/report/branch/{branch.id}/')
        assert response.status_code == 403

    def test_worker_sees_own_report(self, barber, client_for, make_operation):
        make_operation(barber, 'Cut', 50, status='finished')

        response = client_for(barber).get(f'/api/report/worker/{barber.id}/')

        assert response.status_code == 200
        assert response.data['finished']['total'] == Decimal('50')
        assert response.data['pending'] == {'count': 0, 'total': Decimal('0')}

    def test_worker_cannot_see_others(self, barber, other_barber, client_for):
        response = client_for(barber).get(f'/api/report/worker/{other_barber.id}/')
        assert response.status_code == 403

    def test_other_owner_cannot_see_worker_report(self, other_owner, barber, client_for):
        response = client_for(other_owner).get(f'/api/report/worker/{barber.id}/')
        assert response.status_code == 403

    def test_other_owner_cannot_see_summary(self, other_owner, barber, client_for):
        response = client_for(other_owner).get(f'/api/users/{barber.id}/operations/summary/')
        assert response.status_code == 403
