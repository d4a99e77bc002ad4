from dataclasses import FrozenInstanceError

import pytest
from sqlalchemy import select

from berrycrud import CrudSchema, TypeRegistry
from berrycrud.core.query import QueryHandle
from berrycrud.entity import Entity
from berrycrud.operation import ResolveParams
from berrycrud.resolvers import count, create_one, find_many, find_one
from tests.models import Role, User


@pytest.fixture
def user_entity():
    return Entity(User, registry=TypeRegistry())


@pytest.mark.asyncio
async def test_before_query_can_narrow_query(db_session, sample_users, user_entity):
    def only_admins(query, params):
        assert isinstance(query, QueryHandle)
        query.where(User.role == Role.ADMIN)

    op = find_many(user_entity).with_hooks(before_query=only_admins)
    rows = await op.resolve(ResolveParams(session=db_session))
    assert [u.name for u in rows] == ['Alice Johnson']


@pytest.mark.asyncio
async def test_before_query_can_replace_statement(db_session, sample_users, user_entity):
    async def replace_statement(query, params):
        return select(User).where(User.email == 'dave@example.com')

    op = find_one(user_entity).with_hooks(before_query=replace_statement)
    found = await op.resolve(ResolveParams(args={'filter': {'name': 'Alice Johnson'}}, session=db_session))
    assert found.name == 'Dave Guest'


@pytest.mark.asyncio
async def test_before_query_can_return_handle(db_session, sample_users, user_entity):
    def other_handle(query, params):
        return QueryHandle(user_entity).where(User.is_active.is_(False)).count()

    op = count(user_entity).with_hooks(before_query=other_handle)
    assert await op.resolve(ResolveParams(session=db_session)) == 1


@pytest.mark.asyncio
async def test_before_query_value_short_circuits(user_entity):
    # The hook result is used as-is; storage is never touched
    op = count(user_entity).with_hooks(before_query=lambda query, params: 42)
    assert await op.resolve(ResolveParams(session=object())) == 42


@pytest.mark.asyncio
async def test_invocation_hook_wins(db_session, sample_users, user_entity):
    op = count(user_entity).with_hooks(before_query=lambda query, params: 1)
    assert await op.resolve(ResolveParams(session=db_session, before_query=lambda query, params: 2)) == 2


@pytest.mark.asyncio
async def test_missing_session(user_entity):
    with pytest.raises(ValueError):
        await count(user_entity).resolve(ResolveParams())


@pytest.mark.asyncio
async def test_wrap_resolve(db_session, sample_users, user_entity):
    calls = []

    def logging_wrapper(next_fn):
        async def _resolve(params):
            calls.append(dict(params.args))
            result = await next_fn(params)
            calls.append(len(result))
            return result
        return _resolve

    base = find_many(user_entity)
    op = base.wrap_resolve(logging_wrapper)
    rows = await op.resolve(ResolveParams(args={'filter': {'role': Role.MEMBER}}, session=db_session))
    assert len(rows) == 2
    assert calls == [{'filter': {'role': Role.MEMBER}}, 2]
    # the original descriptor is untouched
    assert base.resolve_fn is not op.resolve_fn
    assert op.args is base.args


@pytest.mark.asyncio
async def test_context_hooks_in_graphql(db_session, sample_users):
    crud = CrudSchema(registry=TypeRegistry())
    crud.register(User, only=['count', 'createOne'])
    schema = crud.to_strawberry()
    stamped = []

    def before_record_mutate(doc, params):
        stamped.append(params.context['user'])
        doc.role = Role.GUEST
        return doc

    def before_query(query, params):
        query.where(User.is_active.is_(True))

    context = {
        'db_session': db_session,
        'user': 'tester',
        'before_record_mutate': before_record_mutate,
        'before_query': before_query,
    }
    res = await schema.execute('{ user_count }', context_value=context)
    assert res.errors is None, res.errors
    assert res.data == {'user_count': 3}

    m = 'mutation { user_create_one(record: {name: "Eve", email: "eve@example.com", role: ADMIN}) { record { role } } }'
    res = await schema.execute(m, context_value=context)
    assert res.errors is None, res.errors
    assert res.data['user_create_one']['record']['role'] == 'GUEST'
    assert stamped == ['tester']


@pytest.mark.asyncio
async def test_operation_hook_replaced_in_schema(db_session, sample_users):
    crud = CrudSchema(registry=TypeRegistry())
    crud.register(User, only=['createOne', 'count'])
    op = crud.operation('User', 'createOne').with_hooks(before_record_mutate=lambda doc, params: None)
    crud.set_operation('User', op)
    schema = crud.to_strawberry()
    m = 'mutation { user_create_one(record: {name: "Eve", email: "eve@example.com"}) { record_id } }'
    res = await schema.execute(m, context_value={'db_session': db_session})
    assert res.errors is None, res.errors
    assert res.data['user_create_one'] is None
    count_res = await schema.execute('{ user_count }', context_value={'db_session': db_session})
    assert count_res.data == {'user_count': 4}


def test_create_one_factory_accepts_entity_only():
    with pytest.raises(TypeError):
        create_one(User)


def test_descriptor_copies(user_entity):
    base = find_many(user_entity)
    renamed = base.with_name('findActive', 'Active users only')
    assert (renamed.name, renamed.description) == ('findActive', 'Active users only')
    assert base.name == 'findMany'
    trimmed = base.without_args('skip', 'limit')
    assert list(trimmed.args) == ['filter', 'sort']
    restored = trimmed.with_args({'limit': base.args['limit']})
    assert list(restored.args) == ['filter', 'sort', 'limit']
    assert list(base.args) == ['filter', 'skip', 'limit', 'sort']
    with pytest.raises(FrozenInstanceError):
        base.name = 'other'
