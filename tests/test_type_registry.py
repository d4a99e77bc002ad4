import enum
import threading
import time
from concurrent.futures import ThreadPoolExecutor

import pytest

from berrycrud.entity import Entity
from berrycrud.registry import TypeRegistry
from berrycrud.core.introspection import FieldSpec, StaticRequired
from berrycrud.types import create_one_payload_type, ensure_output_type, scalar_annotation
from tests.models import User


def test_get_or_create_returns_first_descriptor():
    reg = TypeRegistry()
    first = reg.get_or_create('Thing', lambda: object())
    second = reg.get_or_create('Thing', lambda: object())
    assert first is second
    assert reg.has('Thing')
    assert 'Thing' in reg
    assert reg.names() == ['Thing']


def test_concurrent_first_use_builds_once():
    reg = TypeRegistry()
    calls = []
    lock = threading.Lock()

    def builder():
        with lock:
            calls.append(1)
        time.sleep(0.05)
        return object()

    with ThreadPoolExecutor(max_workers=8) as pool:
        results = list(pool.map(lambda _: reg.get_or_create('Shared', builder), range(16)))
    assert len(calls) == 1
    assert all(r is results[0] for r in results)


def test_builder_may_request_other_names():
    reg = TypeRegistry()

    def outer():
        inner = reg.get_or_create('Inner', lambda: 'inner')
        return ('outer', inner)

    assert reg.get_or_create('Outer', outer) == ('outer', 'inner')
    assert reg.names() == ['Inner', 'Outer']


def test_failed_builder_is_not_cached():
    reg = TypeRegistry()

    def boom():
        raise RuntimeError("nope")

    with pytest.raises(RuntimeError):
        reg.get_or_create('Broken', boom)
    assert not reg.has('Broken')
    assert reg.get_or_create('Broken', lambda: 42) == 42


def test_builder_returning_none_is_rejected():
    reg = TypeRegistry()
    with pytest.raises(ValueError):
        reg.get_or_create('Empty', lambda: None)
    assert len(reg) == 0


def test_entity_types_are_shared_per_registry():
    reg = TypeRegistry()
    a = Entity(User, registry=reg)
    b = Entity(User, registry=reg)
    assert ensure_output_type(a) is ensure_output_type(b)
    assert create_one_payload_type(a) is create_one_payload_type(b)
    assert {'User', 'CreateOneUserPayload'} <= set(reg.names())

    other = Entity(User, registry=TypeRegistry())
    assert ensure_output_type(other) is not ensure_output_type(a)


def test_clear_forgets_types():
    reg = TypeRegistry()
    reg.get_or_create('Thing', lambda: 1)
    assert len(reg) == 1
    reg.clear()
    assert len(reg) == 0
    assert reg.get('Thing') is None
    assert reg.get_or_create('Thing', lambda: 2) == 2


def _enum_field(enum_cls):
    return FieldSpec(name='status', storage_name='status', python_type=enum_cls,
                     required=StaticRequired(False), enum_class=enum_cls)


def test_same_named_enums_do_not_share_registration():
    first = enum.Enum('Status', ['OPEN', 'CLOSED'])
    second = enum.Enum('Status', ['DRAFT', 'PUBLISHED'])
    reg = TypeRegistry()
    assert scalar_annotation(_enum_field(first), reg) is first
    assert scalar_annotation(_enum_field(first), reg) is first
    with pytest.raises(ValueError):
        scalar_annotation(_enum_field(second), reg)
    assert reg.get('Status') is first
