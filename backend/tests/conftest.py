import copy

import pytest


LAPTOP_ITEMS = [
    {
        'itemCode': 1001,
        'itemDescription': 'Motherboard',
        'materialConsideration': 'High-end gaming motherboard',
        'quantity': 1,
        'uom': 'Piece',
        'rate': 15000,
        'currency': 'INR',
        'amount': 15000,
        'remarks': 'Primary component',
        'level': 0,
        'children': [
            {
                'itemCode': 1002,
                'itemDescription': 'CPU Socket',
                'materialConsideration': 'LGA 1200 socket',
                'quantity': 1,
                'uom': 'Piece',
                'rate': 500,
                'currency': 'INR',
                'amount': 500,
                'remarks': 'Integrated with motherboard',
                'level': 1,
                'parentId': '1001',
                'children': [],
            },
            {
                'itemCode': 1003,
                'itemDescription': 'RAM Slots',
                'materialConsideration': 'DDR4 slots',
                'quantity': 4,
                'uom': 'Piece',
                'rate': 200,
                'currency': 'INR',
                'amount': 800,
                'remarks': 'Memory expansion slots',
                'level': 1,
                'parentId': '1001',
                'children': [],
            },
        ],
    },
    {
        'itemCode': 2001,
        'itemDescription': 'Processor',
        'materialConsideration': 'Intel Core i7',
        'quantity': 1,
        'uom': 'Piece',
        'rate': 25000,
        'currency': 'INR',
        'amount': 25000,
        'remarks': 'High-performance CPU',
        'level': 0,
        'children': [
            {
                'itemCode': 2002,
                'itemDescription': 'CPU Cooler',
                'materialConsideration': 'Liquid cooling system',
                'quantity': 1,
                'uom': 'Piece',
                'rate': 3000,
                'currency': 'INR',
                'amount': 3000,
                'remarks': 'Essential for cooling',
                'level': 1,
                'parentId': '2001',
                'children': [],
            },
        ],
    },
    {
        'itemCode': 3001,
        'itemDescription': 'Memory (RAM)',
        'materialConsideration': 'DDR4 32GB Kit',
        'quantity': 1,
        'uom': 'Kit',
        'rate': 12000,
        'currency': 'INR',
        'amount': 12000,
        'remarks': 'High-speed memory',
        'level': 0,
        'children': [],
    },
]

LAPTOP_HEADER = {
    'bomName': 'Laptop Assembly BOM',
    'productName': 'High-Performance Laptop',
    'productCode': 'HP-LT-001',
    'version': '1.0',
    'bomType': 'MANUFACTURING',
    'description': 'Complete bill of materials for high-performance laptop assembly',
    'notes': 'Ensure all components are tested before assembly',
    'myCompanyName': 'Tech Solutions Pvt Ltd',
    'approvedBy': 'Jane Smith',
}


def chain(depth, code_prefix='N'):
    """A single-branch tree ``depth`` levels deep."""
    root = None
    for level in reversed(range(depth)):
        node = {
            'itemCode': f'{code_prefix}{level}',
            'quantity': 1,
            'rate': 10,
            'children': [root] if root else [],
        }
        root = node
    return [root]


@pytest.fixture
def laptop_items():
    return copy.deepcopy(LAPTOP_ITEMS)


@pytest.fixture
def laptop_header():
    return dict(LAPTOP_HEADER)


@pytest.fixture
def bom_payload(laptop_header, laptop_items):
    return {'header': laptop_header, 'items': laptop_items}


@pytest.fixture
def user(db, django_user_model):
    return django_user_model.objects.create_user(username='engineer', password='secret')


@pytest.fixture
def api_client(user):
    from rest_framework.test import APIClient

    client = APIClient()
    client.force_authenticate(user=user)
    return client
