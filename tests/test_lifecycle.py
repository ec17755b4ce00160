from datetime import datetime, timezone as dt_timezone
from decimal import Decimal
from types import SimpleNamespace

import pytest

from operations.lifecycle import (
    ById, ByIdentity, ByIndex, InvalidTransition, OperationNotFound,
    apply_transition, bulk_transition, locate, ref_from_data, ref_from_index, resolve,
)


def op(name='Cut', price=100, status='pending', uid=None):
    return SimpleNamespace(
        name=name, price=Decimal(price), status=status, uid=uid or f'{name}-{price}-{status}',
        finished_date=None, worker_confirmed_date=None, payment_confirmed_date=None,
    )


T = datetime(2025, 3, 1, 9, 30, tzinfo=dt_timezone.utc)


class TestResolve:

    def test_index_in_range(self):
        assert resolve([op(), op()], ByIndex(1)) == 1

    @pytest.mark.parametrize('index', [-1, 2, 5])
    def test_index_out_of_range(self, index):
        assert resolve([op(), op()], ByIndex(index)) is None

    def test_identity_first_match_wins(self):
        operations = [op('Wash', 50, 'finished'), op('Cut', 100), op('Wash', 50)]
        assert resolve(operations, ByIdentity('Wash', Decimal('50'))) == 0

    def test_identity_is_deterministic(self):
        operations = [op('Cut', 100), op('Wash', 50), op('Wash', 50)]
        ref = ref_from_data({'name': 'Wash', 'price': 50})
        assert {resolve(operations, ref) for _ in range(5)} == {1}

    def test_identity_compares_price_numerically(self):
        assert resolve([op('Cut', 100)], ref_from_data({'name': 'Cut', 'price': '100.00'})) == 0

    def test_identity_no_match(self):
        assert resolve([op('Cut', 100)], ByIdentity('Cut', Decimal('99'))) is None

    def test_by_id(self):
        operations = [op(uid='a'), op(uid='b')]
        assert resolve(operations, ById('b')) == 1
        assert resolve(operations, ById('c')) is None

    def test_ref_from_data_prefers_uid(self):
        assert ref_from_data({'uid': 'abc', 'name': 'Cut', 'price': 1}) == ById('abc')

    @pytest.mark.parametrize('value', [True, 'x', None, 1.5])
    def test_ref_from_index_rejects_non_integers(self, value):
        assert resolve([op()], ref_from_index(value)) is None


class TestLocate:

    def test_identity_then_index_fallback(self):
        operations = [op('Cut', 100), op('Wash', 50)]
        assert locate(operations, ByIdentity('Shave', Decimal('10')), ByIndex(1)) == 1

    def test_not_found(self):
        with pytest.raises(OperationNotFound):
            locate([op()], ByIndex(3))


class TestApplyTransition:

    def test_finished_stamps_supplied_date(self):
        operation = op()
        apply_transition(operation, 'finished', finished_date=T)
        assert operation.status == 'finished'
        assert operation.finished_date == T

    def test_finished_stamps_now_without_date(self):
        operation = op()
        apply_transition(operation, 'finished')
        assert operation.finished_date is not None

    def test_other_targets_never_set_finished_date(self):
        operation = op()
        apply_transition(operation, 'pending_to_confirm', finished_date=T, worker_confirmed_date=T)
        assert operation.finished_date is None
        assert operation.worker_confirmed_date == T

    def test_backward_move_is_rejected(self):
        operation = op(status='finished')
        with pytest.raises(InvalidTransition):
            apply_transition(operation, 'pending')
        assert operation.status == 'finished'

    def test_same_status_is_allowed(self):
        operation = op(status='pending_to_confirm')
        fields = apply_transition(operation, 'pending_to_confirm', payment_confirmed_date=T)
        assert fields == ['status', 'payment_confirmed_date']

    def test_unknown_status(self):
        with pytest.raises(Exception) as info:
            apply_transition(op(), 'archived')
        assert 'Invalid status' in str(info.value.detail)


class TestBulkTransition:

    def test_out_of_range_indices_are_skipped(self):
        operations = [op(), op('Wash', 50)]
        updated = bulk_transition(operations, [ByIndex(0), ByIndex(7), ByIndex(-2), ByIndex(1)], 'finished')
        assert [index for index, _ in updated] == [0, 1]

    def test_repeated_index_counts_each_time(self):
        operations = [op(), op('Wash', 50)]
        updated = bulk_transition(operations, [ByIndex(1), ByIndex(1)], 'pending_to_confirm')
        assert [index for index, _ in updated] == [1, 1]
        assert operations[1].status == 'pending_to_confirm'
        assert operations[0].status == 'pending'

    def test_backward_entries_are_skipped(self):
        operations = [op(status='finished'), op()]
        updated = bulk_transition(operations, [ByIndex(0), ByIndex(1)], 'pending_to_confirm')
        assert [index for index, _ in updated] == [1]
        assert operations[0].status == 'finished'

    def test_reissuing_gives_same_statuses(self):
        operations = [op(), op('Wash', 50), op('Shave', 30)]
        refs = [ByIndex(0), ByIndex(2)]
        bulk_transition(operations, refs, 'finished', finished_date=T)
        first = [o.status for o in operations]
        bulk_transition(operations, refs, 'finished', finished_date=T)
        assert [o.status for o in operations] == first == ['finished', 'pending', 'finished']

    def test_untouched_entries_stay_the_same(self):
        operations = [op(), op('Wash', 50)]
        before = vars(operations[1]).copy()
        bulk_transition(operations, [ByIndex(0)], 'finished')
        assert vars(operations[1]) == before

    def test_identical_descriptors_reach_only_the_first(self):
        operations = [op('Wash', 50), op('Wash', 50)]
        refs = [ByIdentity('Wash', Decimal('50')), ByIdentity('Wash', Decimal('50'))]
        updated = bulk_transition(operations, refs, 'finished')
        assert [index for index, _ in updated] == [0]
        assert operations[1].status == 'pending'
