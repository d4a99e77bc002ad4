import pytest

from berrycrud.core.validation import has_errors, validate_document, validate_many
from berrycrud.entity import Entity
from berrycrud.registry import TypeRegistry
from tests.models import Post, PostStatus, Role, User


@pytest.fixture
def users():
    return Entity(User, registry=TypeRegistry())


@pytest.fixture
def posts():
    return Entity(Post, registry=TypeRegistry())


def _user(entity, **overrides):
    record = {'name': 'Eve', 'email': 'eve@example.com'}
    record.update(overrides)
    return entity.new_document(record)


def _messages(result):
    return {e.path: e.message for e in result.errors}


@pytest.mark.asyncio
async def test_valid_document(users):
    assert await validate_document(_user(users, age=30, role=Role.GUEST), users) is None


@pytest.mark.asyncio
async def test_required_messages(users):
    doc = _user(users, name='', email=None)
    result = await validate_document(doc, users)
    assert _messages(result) == {
        'name': 'Path `name` is required.',
        'email': 'Path `email` is required.',
    }
    assert result.message == (
        'User validation failed: name: Path `name` is required., email: Path `email` is required.'
    )


@pytest.mark.asyncio
async def test_bounds_and_length(users):
    result = await validate_document(_user(users, name='x' * 101, age=-1), users)
    msgs = _messages(result)
    assert msgs['name'] == f"Path `name` (`{'x' * 101}`) is longer than the maximum allowed length (100)."
    assert msgs['age'] == 'Path `age` (-1) is less than minimum allowed value (0).'

    result = await validate_document(_user(users, age=151), users)
    assert _messages(result) == {'age': 'Path `age` (151) is more than maximum allowed value (150).'}
    assert result.errors[0].value == 151


@pytest.mark.asyncio
async def test_type_cast_and_enum(users):
    result = await validate_document(_user(users, age='old', role='OWNER'), users)
    msgs = _messages(result)
    assert msgs['age'] == 'Cast to Number failed for value "old" (type str) at path "age"'
    assert msgs['role'] == '`OWNER` is not a valid enum value for path `role`.'
    # member names are accepted as well as members
    assert await validate_document(_user(users, role='ADMIN'), users) is None


@pytest.mark.asyncio
async def test_custom_validators(users, posts):
    result = await validate_document(_user(users, name=' Eve'), users)
    assert _messages(result) == {'name': 'Validator failed for path `name` with value ` Eve`'}

    post = posts.new_document({'title': 'Root', 'author_id': 1})
    result = await validate_document(post, posts)
    assert _messages(result) == {'title': 'Validator failed for path `title` with value `Root`'}
    assert result.message.startswith('Post validation failed: ')


@pytest.mark.asyncio
async def test_computed_required(posts):
    draft = posts.new_document({'title': 'Draft', 'author_id': 1})
    assert draft.status is PostStatus.DRAFT
    assert await validate_document(draft, posts) is None

    published = posts.new_document({'title': 'Live', 'author_id': 1, 'status': PostStatus.PUBLISHED})
    result = await validate_document(published, posts)
    assert _messages(result) == {'published_at': 'Path `published_at` is required.'}


def test_computed_required_is_not_static(posts):
    assert 'published_at' not in posts.schema.required_fields
    assert 'title' in posts.schema.required_fields


@pytest.mark.asyncio
async def test_validate_many_keeps_input_order(users):
    docs = [
        _user(users, email='a@example.com'),
        _user(users, email='b@example.com', age=999),
        _user(users, email='c@example.com'),
        _user(users, email='d@example.com', name=''),
    ]
    results = await validate_many(docs, users)
    assert len(results) == 4
    assert results[0] is None and results[2] is None
    assert results[1].errors[0].path == 'age'
    assert results[3].errors[0].path == 'name'
    assert has_errors(results)
    assert not has_errors(await validate_many(docs[:1], users))
