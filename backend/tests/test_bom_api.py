import re

import pytest

from infrastructure.persistence.models import BOMDocument

pytestmark = pytest.mark.django_db

URL = '/api/v1/boms/'
NUMBER_RE = re.compile(r'^BOM/\d{2}/\d{2}/\d{2}/\d{5}$')


def detail_url(bom_id):
    return f'{URL}{bom_id}/'


def create(client, payload):
    response = client.post(URL, payload, format='json')
    assert response.status_code == 201, response.data
    return response.data


def test_requires_authentication(client):
    assert client.get(URL).status_code == 401


def test_jwt_token_grants_access(client, user):
    response = client.post(
        '/api/v1/auth/token/',
        {'username': 'engineer', 'password': 'secret'},
        content_type='application/json',
    )

    assert response.status_code == 200
    token = response.json()['access']
    assert client.get(URL, HTTP_AUTHORIZATION=f'Bearer {token}').status_code == 200


def test_create_laptop_assembly(api_client, bom_payload):
    data = create(api_client, bom_payload)

    assert data['totalMaterialCost'] == 56300
    assert NUMBER_RE.match(data['bomNumber'])
    assert data['bomNumber'].endswith('/00001')
    assert data['status'] == 'DRAFT'
    assert data['revision'] == 1
    assert data['createdBy'] == 'engineer'
    assert data['bomDate'] is not None
    assert [item['itemCode'] for item in data['items']] == [1001, 2001, 3001]
    ram_slots = data['items'][0]['children'][1]
    assert ram_slots['amount'] == 800
    assert ram_slots['level'] == 1
    assert ram_slots['parentId'] == '1001'


def test_client_amounts_and_levels_are_recomputed(api_client, bom_payload):
    bom_payload['items'][0]['amount'] = 1
    bom_payload['items'][0]['children'][0]['level'] = 4

    data = create(api_client, bom_payload)

    assert data['items'][0]['amount'] == 15000
    assert data['items'][0]['children'][0]['level'] == 1
    assert data['totalMaterialCost'] == 56300


def test_numbers_are_sequential(api_client, bom_payload):
    first = create(api_client, bom_payload)['bomNumber']
    second = create(api_client, bom_payload)['bomNumber']

    assert first[:-5] == second[:-5]
    assert int(second[-5:]) == int(first[-5:]) + 1


def test_invalid_tree_returns_every_problem(api_client, bom_payload):
    bom_payload['items'][0]['children'][1]['itemCode'] = 1002
    bom_payload['items'][2]['quantity'] = 0

    response = api_client.post(URL, bom_payload, format='json')

    assert response.status_code == 400
    assert response.data['error'] == 'validation_error'
    assert [p['code'] for p in response.data['problems']] == ['DUPLICATE_ITEM_CODE', 'INVALID_QUANTITY']
    assert response.data['problems'][0]['path'] == 'items[0].children[1]'
    assert BOMDocument.objects.count() == 0


def test_missing_header_field_is_rejected(api_client, bom_payload):
    del bom_payload['header']['productCode']

    response = api_client.post(URL, bom_payload, format='json')

    assert response.status_code == 400
    assert 'header' in response.data


def test_retrieve_returns_stored_document(api_client, bom_payload):
    created = create(api_client, bom_payload)

    response = api_client.get(detail_url(created['id']))

    assert response.status_code == 200
    assert response.data['bomNumber'] == created['bomNumber']
    assert response.data['items'] == created['items']
    assert response.data['totalMaterialCost'] == 56300


def test_retrieve_unknown_returns_404(api_client):
    assert api_client.get(detail_url('00000000-0000-0000-0000-000000000000')).status_code == 404
    assert api_client.get(detail_url('not-a-uuid')).status_code == 404


def test_update_keeps_number_and_records_version(api_client, bom_payload):
    created = create(api_client, bom_payload)
    bom_payload['header']['status'] = 'ACTIVE'
    bom_payload['items'][2]['quantity'] = 2
    bom_payload['changeDescription'] = 'Doubled memory'

    response = api_client.put(detail_url(created['id']), bom_payload, format='json')

    assert response.status_code == 200, response.data
    assert response.data['bomNumber'] == created['bomNumber']
    assert response.data['id'] == created['id']
    assert response.data['revision'] == 2
    assert response.data['status'] == 'ACTIVE'
    assert response.data['totalMaterialCost'] == 68300
    assert response.data['createdBy'] == 'engineer'

    versions = api_client.get(detail_url(created['id']) + 'versions/')
    assert versions.status_code == 200
    assert len(versions.data) == 1
    assert versions.data[0]['versionNumber'] == 1
    assert versions.data[0]['reason'] == 'Doubled memory'
    assert versions.data[0]['snapshot']['status'] == 'DRAFT'


def test_update_unknown_returns_404(api_client, bom_payload):
    response = api_client.put(detail_url('00000000-0000-0000-0000-000000000000'), bom_payload, format='json')

    assert response.status_code == 404
    assert response.data['error'] == 'entity_not_found'


def test_update_with_invalid_tree_is_rejected(api_client, bom_payload):
    created = create(api_client, bom_payload)
    bom_payload['items'] = []

    response = api_client.put(detail_url(created['id']), bom_payload, format='json')

    assert response.status_code == 400
    assert response.data['problems'][0]['code'] == 'EMPTY_TREE'
    assert BOMDocument.objects.get(pk=created['id']).revision == 1


def test_patch_is_not_offered(api_client, bom_payload):
    created = create(api_client, bom_payload)

    response = api_client.patch(detail_url(created['id']), {'header': {}}, format='json')

    assert response.status_code == 405


def test_delete(api_client, bom_payload):
    created = create(api_client, bom_payload)

    assert api_client.delete(detail_url(created['id'])).status_code == 204
    assert api_client.get(detail_url(created['id'])).status_code == 404
    assert api_client.delete(detail_url(created['id'])).status_code == 404


def test_list_filters_and_search(api_client, bom_payload):
    create(api_client, bom_payload)
    bom_payload['header'].update(bomName='Office Chair BOM', productName='Ergonomic Chair', productCode='EC-001', bomType='SALES')
    bom_payload['items'] = [{'itemCode': 'SEAT', 'quantity': 1, 'rate': 2500, 'currency': 'INR'}]
    create(api_client, bom_payload)

    response = api_client.get(URL)
    assert response.status_code == 200
    assert response.data['count'] == 2
    assert 'items' not in response.data['results'][0]
    assert {row['itemCount'] for row in response.data['results']} == {6, 1}

    assert api_client.get(URL, {'productName': 'laptop'}).data['count'] == 1
    assert api_client.get(URL, {'bomType': 'SALES'}).data['results'][0]['productCode'] == 'EC-001'
    assert api_client.get(URL, {'costFrom': 10000}).data['count'] == 1
    assert api_client.get(URL, {'costTo': 10000}).data['count'] == 1
    assert api_client.get(URL, {'search': 'chair'}).data['count'] == 1

    ordered = api_client.get(URL, {'ordering': 'total_material_cost'}).data['results']
    assert [row['totalMaterialCost'] for row in ordered] == [2500, 56300]


def test_preview_does_not_save(api_client, laptop_items):
    response = api_client.post(URL + 'preview/', {'items': laptop_items}, format='json')

    assert response.status_code == 200
    assert response.data['totalMaterialCost'] == 56300
    assert response.data['nodeCount'] == 6
    assert response.data['depth'] == 2
    assert response.data['currencies'] == ['INR']
    assert response.data['mixedCurrency'] is False
    assert response.data['items'][0]['rollupCost'] == 16300
    assert BOMDocument.objects.count() == 0


def test_preview_reports_problems(api_client):
    response = api_client.post(URL + 'preview/', {'items': [{'itemCode': 'A', 'quantity': 1}]}, format='json')

    assert response.status_code == 400
    assert response.data['problems'][0]['code'] == 'INVALID_AMOUNT'


def test_recalculate(api_client, bom_payload):
    created = create(api_client, bom_payload)
    BOMDocument.objects.filter(pk=created['id']).update(total_material_cost=1)

    response = api_client.post(detail_url(created['id']) + 'recalculate/')

    assert response.status_code == 200
    assert response.data['changed'] is True
    assert response.data['document']['totalMaterialCost'] == 56300

    again = api_client.post(detail_url(created['id']) + 'recalculate/')
    assert again.data['changed'] is False


def test_history(api_client, bom_payload):
    created = create(api_client, bom_payload)
    api_client.put(detail_url(created['id']), bom_payload, format='json')

    response = api_client.get(detail_url(created['id']) + 'history/')

    assert response.status_code == 200
    assert [entry['type'] for entry in response.data] == ['~', '+']


def test_oversized_numbers_are_rejected_not_crashed(api_client, bom_payload):
    bom_payload['items'][2]['quantity'] = 1e30

    response = api_client.post(URL, bom_payload, format='json')

    assert response.status_code == 400
    assert response.data['problems'][0]['code'] == 'INVALID_AMOUNT'
    assert response.data['problems'][0]['path'] == 'items[2]'
    assert BOMDocument.objects.count() == 0

    preview = api_client.post(URL + 'preview/', {'items': bom_payload['items']}, format='json')
    assert preview.status_code == 400
    assert preview.data['problems'][0]['code'] == 'INVALID_AMOUNT'


def test_total_beyond_the_column_is_rejected(api_client, bom_payload):
    bom_payload['items'] = [
        {'itemCode': 'A', 'quantity': 9, 'rate': '1000000000000000'},
        {'itemCode': 'B', 'quantity': 9, 'rate': '1000000000000000'},
    ]

    response = api_client.post(URL, bom_payload, format='json')

    assert response.status_code == 400
    assert response.data['problems'][0]['path'] == 'items'


def test_fractional_quantities_survive_storage(api_client, bom_payload):
    bom_payload['items'] = [{'itemCode': 'A', 'quantity': '0.12499999999999999999', 'rate': '0.04'}]
    created = create(api_client, bom_payload)

    assert created['items'][0]['quantity'] == '0.12499999999999999999'
    assert created['totalMaterialCost'] == 0

    response = api_client.post(detail_url(created['id']) + 'recalculate/')
    assert response.data['changed'] is False
