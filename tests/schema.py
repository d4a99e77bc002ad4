"""Shared CRUD schema for GraphQL-level tests."""
from berrycrud import CrudSchema, ResolverOptions, LimitOptions, TypeRegistry
from tests.models import Post, User

crud = CrudSchema(registry=TypeRegistry())
user_entity = crud.register(User, opts=ResolverOptions(limit=LimitOptions(max=50)))
post_entity = crud.register(Post)

schema = crud.to_strawberry()
