"""Tests for encoding and decoding container group ids."""
import pytest

from inlets import exceptions
from inlets.provision.azure import utils

_ID = ('/subscriptions/fea5a321-93e4-4a5b-9f44-8aefa414257d/resourceGroups/'
       'inletsgroup/providers/Microsoft.ContainerInstance/containerGroups/'
       'inlets')


def test_parse_container_group_id():
    assert utils.parse_container_group_id(_ID) == (
        'fea5a321-93e4-4a5b-9f44-8aefa414257d', 'inletsgroup', 'inlets')


@pytest.mark.parametrize('subscription_id,resource_group,name', [
    ('sub', 'group', 'name'),
    ('fea5a321-93e4-4a5b-9f44-8aefa414257d', 'inlets-tunnel-1', 'inlets-1'),
    ('00000000-0000-0000-0000-000000000000', 'rg.with_dots-and_underscores',
     'cg_name.v2'),
    ('Sub-ID', 'MixedCase-RG', 'MixedCase'),
    ('1', 'a', 'b'),
])
def test_make_then_parse(subscription_id, resource_group, name):
    resource_id = utils.make_container_group_id(subscription_id,
                                                resource_group, name)
    assert resource_id == (f'/subscriptions/{subscription_id}/resourceGroups/'
                           f'{resource_group}/providers/'
                           'Microsoft.ContainerInstance/containerGroups/'
                           f'{name}')
    assert utils.parse_container_group_id(resource_id) == (subscription_id,
                                                           resource_group,
                                                           name)


def test_parse_ignores_literal_case_and_trailing_slash():
    resource_id = _ID.replace('resourceGroups', 'resourcegroups').replace(
        'Microsoft.ContainerInstance', 'microsoft.containerinstance') + '/'
    assert utils.parse_container_group_id(resource_id) == (
        'fea5a321-93e4-4a5b-9f44-8aefa414257d', 'inletsgroup', 'inlets')


@pytest.mark.parametrize(
    'resource_id',
    [
        '',
        'inlets',
        _ID[1:],
        _ID + '/extra',
        _ID.replace('/containerGroups/inlets', ''),
        _ID.replace('Microsoft.ContainerInstance', 'Microsoft.Compute'),
        _ID.replace('containerGroups', 'virtualMachines'),
        _ID.replace('/inletsgroup/', '//'),
        _ID.replace('subscriptions', 'tenants'),
    ],
)
def test_parse_malformed_id(resource_id):
    with pytest.raises(exceptions.MalformedIdentifierError) as e:
        utils.parse_container_group_id(resource_id)
    assert e.value.host_id == resource_id
    assert (e.value.reason ==
            exceptions.FatalProvisionError.Reason.MALFORMED_ID)


def test_malformed_id_is_a_value_error():
    with pytest.raises(ValueError):
        utils.parse_container_group_id('/subscriptions/sub')


def test_parse_rejects_non_string():
    with pytest.raises(exceptions.MalformedIdentifierError):
        utils.parse_container_group_id(None)


@pytest.mark.parametrize('args', [('', 'group', 'name'),
                                  ('sub', 'a/b', 'name'),
                                  ('sub', 'group', '')])
def test_make_rejects_invalid_parts(args):
    with pytest.raises(ValueError):
        utils.make_container_group_id(*args)
