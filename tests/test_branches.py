import pytest
from django.core.management import call_command

from branches.models import Branch, BranchService


pytestmark = pytest.mark.django_db


def services_url(branch):
    return f'/api/branches/{branch.id}/services/'


class TestBranchList:

    def test_without_owner_lists_names_for_login(self, branch, api_client):
        response = api_client.get('/api/branches/')
        assert response.status_code == 200
        assert response.data == [{'id': branch.id, 'name': 'Bole'}]

    def test_by_owner_includes_services(self, branch, haircut, other_owner, api_client):
        Branch.objects.create(name='Piassa', owner=other_owner)

        response = api_client.get('/api/branches/', {'ownerId': branch.owner_id})

        assert [b['name'] for b in response.data] == ['Bole']
        service = response.data[0]['services'][0]
        assert service['name'] == 'Cut'
        assert service['barberPrice'] == 100
        assert service['shareSettings'] == {'barberShare': None, 'washerShare': None}

    def test_invalid_owner_id(self, api_client):
        response = api_client.get('/api/branches/', {'ownerId': 'abc'})
        assert response.status_code == 400
        assert response.data['error'] == 'Invalid owner ID'


class TestBranchWrites:

    def test_owner_creates_branch_with_services(self, owner, client_for):
        response = client_for(owner).post('/api/branches/', {
            'name': 'Kazanchis',
            'services': [
                {'name': 'Cut', 'barberPrice': 120, 'washerPrice': 40},
                {'name': 'Wash', 'washerPrice': 30, 'shareSettings': {'barberShare': 0, 'washerShare': 20}},
            ],
        }, format='json')

        assert response.status_code == 201
        branch = Branch.objects.get(name='Kazanchis')
        assert branch.owner == owner
        assert [s.name for s in branch.ordered_services()] == ['Cut', 'Wash']
        assert branch.ordered_services()[1].washer_share == 20

    def test_name_required(self, owner, client_for):
        response = client_for(owner).post('/api/branches/', {'services': []}, format='json')
        assert response.status_code == 400

    def test_services_must_be_a_list(self, owner, client_for):
        response = client_for(owner).post('/api/branches/', {'name': 'X', 'services': 'Cut'}, format='json')
        assert response.status_code == 400

    def test_only_owners_create(self, admin_staff, client_for):
        response = client_for(admin_staff).post('/api/branches/', {'name': 'X'}, format='json')
        assert response.status_code == 401

    def test_rename(self, branch, owner, client_for):
        response = client_for(owner).put(f'/api/branches/{branch.id}/', {'name': 'Bole 2'}, format='json')
        assert response.status_code == 200
        branch.refresh_from_db()
        assert branch.name == 'Bole 2'

    def test_other_owner_is_forbidden(self, branch, other_owner, client_for):
        response = client_for(other_owner).delete(f'/api/branches/{branch.id}/')
        assert response.status_code == 403
        assert Branch.objects.filter(pk=branch.pk).exists()

    def test_delete(self, branch, owner, client_for):
        response = client_for(owner).delete(f'/api/branches/{branch.id}/')
        assert response.status_code == 200
        assert not Branch.objects.exists()


class TestServices:

    def test_append_gets_default_shares(self, branch, haircut, owner, client_for):
        response = client_for(owner).post(services_url(branch), {'name': 'Beard', 'barberPrice': 60}, format='json')

        assert response.status_code == 201
        beard = branch.ordered_services()[1]
        assert beard.name == 'Beard'
        assert (beard.barber_share, beard.washer_share) == (50, 10)

    def test_replace_keeps_previous_shares(self, branch, haircut, owner, client_for):
        haircut.barber_share = 60
        haircut.washer_share = 15
        haircut.save()

        response = client_for(owner).put(services_url(branch), {
            'serviceIndex': 0,
            'service': {'name': 'Cut deluxe', 'barberPrice': 150},
        }, format='json')

        assert response.status_code == 200
        haircut.refresh_from_db()
        assert haircut.name == 'Cut deluxe'
        assert (haircut.barber_share, haircut.washer_share) == (60, 15)

    def test_replace_without_previous_shares_uses_defaults(self, branch, haircut, owner, client_for):
        client_for(owner).put(services_url(branch), {
            'serviceIndex': 0,
            'service': {'name': 'Cut'},
        }, format='json')
        haircut.refresh_from_db()
        assert (haircut.barber_share, haircut.washer_share) == (50, 10)

    def test_replace_out_of_range(self, branch, haircut, owner, client_for):
        response = client_for(owner).put(services_url(branch), {
            'serviceIndex': 3,
            'service': {'name': 'Cut'},
        }, format='json')
        assert response.status_code == 400
        assert response.data['error'] == 'Invalid service index'

    def test_share_out_of_range(self, branch, haircut, owner, client_for):
        response = client_for(owner).put(services_url(branch), {
            'serviceIndex': 0,
            'service': {'name': 'Cut', 'shareSettings': {'barberShare': 150}},
        }, format='json')
        assert response.status_code == 400
        assert response.data['error'] == 'Barber share must be a number between 0 and 100'

    def test_delete_renumbers(self, branch, haircut, owner, client_for):
        BranchService.objects.create(branch=branch, position=1, name='Wash')
        BranchService.objects.create(branch=branch, position=2, name='Beard')

        response = client_for(owner).delete(f'{services_url(branch)}?serviceIndex=0')

        assert response.status_code == 200
        assert [(s.position, s.name) for s in branch.ordered_services()] == [(0, 'Wash'), (1, 'Beard')]

    def test_delete_bad_index(self, branch, haircut, owner, client_for):
        response = client_for(owner).delete(f'{services_url(branch)}?serviceIndex=x')
        assert response.status_code == 400


class TestShareSettings:

    def test_defaults(self, branch, barber, client_for):
        response = client_for(barber).get(f'/api/branches/{branch.id}/share-settings/')
        assert response.data == {'shareSettings': {'barberShare': 50, 'washerShare': 10}}

    def test_owner_updates(self, branch, owner, client_for):
        response = client_for(owner).put(f'/api/branches/{branch.id}/share-settings/', {
            'shareSettings': {'barberShare': 45, 'washerShare': 12},
        }, format='json')

        assert response.status_code == 200
        branch.refresh_from_db()
        assert (branch.barber_share, branch.washer_share) == (45, 12)

    def test_non_owner_is_forbidden(self, branch, admin_staff, client_for):
        response = client_for(admin_staff).put(f'/api/branches/{branch.id}/share-settings/', {
            'shareSettings': {'barberShare': 45},
        }, format='json')
        assert response.status_code == 403

    @pytest.mark.parametrize('value', [-1, 101, 'lots'])
    def test_range(self, value, branch, owner, client_for):
        response = client_for(owner).put(f'/api/branches/{branch.id}/share-settings/', {
            'shareSettings': {'washerShare': value},
        }, format='json')
        assert response.status_code == 400
        assert response.data['error'] == 'Washer share must be a number between 0 and 100'


class TestMigrateShareSettings:

    def test_copies_legacy_shares_to_services(self, branch, haircut, owner, client_for):
        branch.barber_share = 40
        branch.washer_share = 20
        branch.save()
        BranchService.objects.create(branch=branch, position=1, name='Wash', barber_share=55, washer_share=5)

        response = client_for(owner).post('/api/branches/migrate-share-settings/')

        assert response.data == {'message': 'Migration complete', 'updatedBranches': 1}
        haircut.refresh_from_db()
        branch.refresh_from_db()
        assert (haircut.barber_share, haircut.washer_share) == (40, 20)
        assert BranchService.objects.get(name='Wash').barber_share == 55
        assert not branch.has_legacy_shares

    def test_endpoint_only_touches_callers_branches(self, branch, haircut, other_owner, client_for):
        response = client_for(other_owner).post('/api/branches/migrate-share-settings/')

        assert response.data == {'message': 'Migration complete', 'updatedBranches': 0}
        haircut.refresh_from_db()
        assert haircut.barber_share is None

    def test_command_dry_run_changes_nothing(self, branch, haircut, capsys):
        call_command('migrate_share_settings', '--dry-run')

        haircut.refresh_from_db()
        assert haircut.barber_share is None
        assert 'Would update 1 branches' in capsys.readouterr().out

    def test_command(self, branch, haircut):
        call_command('migrate_share_settings')
        haircut.refresh_from_db()
        assert (haircut.barber_share, haircut.washer_share) == (50, 10)
