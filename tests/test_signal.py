"""Tests for signal handles."""

import pytest

from bones_reactive import (
    ReadSignal,
    RwSignal,
    TypeMismatchError,
    WriteSignal,
    configure,
    create_rw_signal,
    create_signal,
)
from bones_reactive._graph import NodeState


class TestCreateSignal:
    def test_get(self):
        count, _ = create_signal(12)
        assert count.get() == 12

    def test_set(self):
        count, set_count = create_signal(1)
        set_count.set(5)
        assert count.get() == 5

    def test_handles_share_node(self):
        count, set_count = create_signal(1)
        assert isinstance(count, ReadSignal)
        assert isinstance(set_count, WriteSignal)
        assert count.node_id == set_count.node_id
        assert count == set_count

    def test_capabilities_are_split(self):
        count, set_count = create_signal(1)
        assert not hasattr(count, "set")
        assert not hasattr(set_count, "get")

    def test_fresh_signal_is_dirty(self):
        count, _ = create_signal(1)
        assert count.state is NodeState.DIRTY

    def test_written_signal_settles_clean(self):
        count, set_count = create_signal(1)
        set_count.set(2)
        assert count.state is NodeState.CLEAN

    def test_repr(self):
        count, set_count = create_signal(1)
        assert "ReadSignal" in repr(count)
        assert "WriteSignal" in repr(set_count)


class TestReads:
    def test_get_returns_copy(self):
        items, _ = create_signal([1])
        got = items.get()
        got.append(2)
        assert items.get() == [1]

    def test_get_without_clone(self):
        configure(clone_on_get=False)
        items, _ = create_signal([1])
        assert items.get() is items.get()

    def test_with_borrows(self):
        items, _ = create_signal([1, 2, 3])
        assert items.with_(len) == 3
        assert items.with_(lambda v: v) is items.with_(lambda v: v)


class TestWrites:
    def test_update_mutates_in_place(self):
        items, set_items = create_signal([1, 2])
        popped = set_items.update(lambda v: v.pop())
        assert popped == 2
        assert items.get() == [1]

    def test_set_returns_none(self):
        _, set_count = create_signal(1)
        assert set_count.set(2) is None

    def test_type_is_fixed(self):
        count, set_count = create_signal(1)
        with pytest.raises(TypeMismatchError):
            set_count.set("one")
        assert count.get() == 1

    def test_explicit_value_type(self):
        value, set_value = create_signal(None, value_type=object)
        set_value.set("now a string")
        assert value.get() == "now a string"

    def test_explicit_type_must_match_initial(self):
        with pytest.raises(TypeMismatchError):
            create_signal("x", value_type=int)

    def test_mismatched_handle(self):
        count, _ = create_signal(1)
        wrong = ReadSignal(count.node_id, str)
        with pytest.raises(TypeMismatchError):
            wrong.get()

    def test_failing_update_leaves_state(self):
        count, set_count = create_signal(1)

        def _boom(value):
            raise ValueError("boom")

        with pytest.raises(ValueError):
            set_count.update(_boom)
        assert count.get() == 1
        assert count.state is NodeState.DIRTY


class TestRwSignal:
    def test_get_set(self):
        rw = create_rw_signal(3)
        assert isinstance(rw, RwSignal)
        rw.set(4)
        assert rw.get() == 4
        assert rw.update(lambda v: v + 1) == 5
        assert rw.get() == 4

    def test_projections(self):
        rw = create_rw_signal("a")
        reader = rw.read_only()
        writer = rw.write_only()
        writer.set("b")
        assert reader.get() == "b"
        assert reader == rw == writer
        assert not hasattr(reader, "set")

    def test_repr(self):
        assert "RwSignal" in repr(create_rw_signal(0))
