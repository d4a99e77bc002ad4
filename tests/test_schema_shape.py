import pytest

from berrycrud import CrudSchema, TypeRegistry
from tests.models import Post, User
from tests.schema import crud, schema


def _introspect(type_name):
    res = schema.execute_sync(
        '{ __type(name: "%s") { kind name fields { name } inputFields { name type { kind } } enumValues { name } } }'
        % type_name
    )
    assert res.errors is None, res.errors
    return res.data['__type']


def _root_fields(kind):
    res = schema.execute_sync('{ __schema { %s { fields { name } } } }' % kind)
    assert res.errors is None, res.errors
    return [f['name'] for f in res.data['__schema'][kind]['fields']]


def test_root_field_names():
    assert set(_root_fields('queryType')) == {
        'user_count', 'user_find_by_id', 'user_find_by_ids', 'user_find_one', 'user_find_many',
        'post_count', 'post_find_by_id', 'post_find_by_ids', 'post_find_one', 'post_find_many',
    }
    assert set(_root_fields('mutationType')) == {
        'user_create_one', 'user_create_many', 'user_update_one',
        'post_create_one', 'post_create_many', 'post_update_one',
    }


@pytest.mark.parametrize('type_name', [
    'User',
    'CreateOneUserInput', 'CreateOneUserPayload',
    'CreateManyUserInput', 'CreateManyUserPayload',
    'UpdateOneUserInput', 'UpdateOneUserPayload',
    'FilterUserInput', 'FilterFindOneUserInput', 'FilterFindManyUserInput', 'FilterUpdateOneUserInput',
    'FilterUserOperatorsInput', 'FilterFindManyUserOperatorsInput',
    'SortFindByIdsUserInput', 'SortFindOneUserInput', 'SortFindManyUserInput', 'SortUpdateOneUserInput',
    'ErrorInterface', 'ValidatorError', 'ValidationError', 'ManyValidationError',
    'Role', 'RoleComparisonInput',
])
def test_generated_type_names(type_name):
    assert _introspect(type_name)['name'] == type_name


def test_create_one_input_requiredness():
    t = _introspect('CreateOneUserInput')
    kinds = {f['name']: f['type']['kind'] for f in t['inputFields']}
    # primary key is not accepted on create
    assert 'id' not in kinds
    assert kinds['name'] == 'NON_NULL'
    assert kinds['email'] == 'NON_NULL'
    assert {k for k, v in kinds.items() if v == 'NON_NULL'} == {'name', 'email'}


def test_update_one_input_all_optional():
    t = _introspect('UpdateOneUserInput')
    assert all(f['type']['kind'] != 'NON_NULL' for f in t['inputFields'])


def test_post_computed_required_not_static():
    kinds = {f['name']: f['type']['kind'] for f in _introspect('CreateOnePostInput')['inputFields']}
    assert kinds['title'] == 'NON_NULL'
    assert kinds['author_id'] == 'NON_NULL'
    assert kinds['published_at'] != 'NON_NULL'
    assert 'content_length' not in kinds


def test_filter_input_shape():
    names = {f['name'] for f in _introspect('FilterUserInput')['inputFields']}
    assert {'id', 'name', 'email', 'age', 'role', 'is_active', 'AND', 'OR', '_operators'} <= names
    ops = {f['name'] for f in _introspect('RoleComparisonInput')['inputFields']}
    assert ops == {'eq', 'ne', 'in', 'nin', 'exists'}


def test_sort_enum_values():
    values = {v['name'] for v in _introspect('SortFindManyUserInput')['enumValues']}
    assert {'ID_ASC', 'ID_DESC', 'EMAIL_ASC', 'CREATED_AT_DESC'} <= values


def test_payload_fields():
    fields = {f['name'] for f in _introspect('CreateManyUserPayload')['fields']}
    assert fields == {'record_ids', 'records', 'create_count', 'error'}
    fields = {f['name'] for f in _introspect('UpdateOneUserPayload')['fields']}
    assert fields == {'record_id', 'record', 'error'}


def test_errors_implement_interface():
    res = schema.execute_sync('{ __type(name: "ErrorInterface") { possibleTypes { name } } }')
    assert res.errors is None, res.errors
    names = {t['name'] for t in res.data['__type']['possibleTypes']}
    assert names == {'ValidationError', 'ManyValidationError'}


def test_register_twice_fails():
    with pytest.raises(ValueError):
        crud.register(User)


def test_subset_of_operations():
    local = CrudSchema(registry=TypeRegistry())
    local.register(Post, only=['count', 'findMany'])
    assert list(local.operations('Post')) == ['count', 'findMany']
    local_schema = local.to_strawberry()
    res = local_schema.execute_sync('{ __schema { mutationType { name } queryType { fields { name } } } }')
    assert res.errors is None, res.errors
    assert res.data['__schema']['mutationType'] is None
    assert {f['name'] for f in res.data['__schema']['queryType']['fields']} == {'post_count', 'post_find_many'}
    with pytest.raises(ValueError):
        CrudSchema(registry=TypeRegistry()).register(User, only=['deleteOne'])


def test_schema_without_queries_fails():
    local = CrudSchema(registry=TypeRegistry())
    local.register(User, only=['createOne'])
    with pytest.raises(ValueError):
        local.to_strawberry()
