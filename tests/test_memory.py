import pytest

from metamorphic.memory import BaseQueue, BaseStack


class Base:
    def __init__(self, value=0):
        self.value = value


class Derived(Base):
    pass


class Unrelated:
    pass


def test_queue_is_fifo():
    queue = BaseQueue(Base)
    items = [Base(1), Derived(2), Base(3)]
    for item in items:
        queue.push(item)
    assert [queue.pop() for _ in items] == items


def test_queue_push_returns_item():
    queue = BaseQueue(Base)
    item = Derived(5)
    assert queue.push(item) is item


def test_queue_rejects_unrelated_type():
    queue = BaseQueue(Base)
    with pytest.raises(TypeError):
        queue.push(Unrelated())
    assert len(queue) == 0


def test_queue_pop_empty_returns_none():
    queue = BaseQueue(Base)
    assert queue.pop() is None


def test_queue_len_and_clear():
    queue = BaseQueue(Base)
    queue.push(Base())
    queue.push(Base())
    assert len(queue) == 2
    queue.clear()
    assert len(queue) == 0
    assert queue.pop() is None


def test_queue_iter_does_not_consume():
    queue = BaseQueue(Base)
    items = [Base(i) for i in range(4)]
    for item in items:
        queue.push(item)
    assert list(queue) == items
    assert len(queue) == len(items)


def test_queue_interleaved_keeps_order():
    queue = BaseQueue(Base)
    popped = []
    pushed = []
    for i in range(100):
        item = Base(i)
        pushed.append(item)
        queue.push(item)
        if i % 3 == 0:
            popped.append(queue.pop())
    while len(queue):
        popped.append(queue.pop())
    assert popped == pushed


def test_stack_is_lifo():
    stack = BaseStack(Base)
    items = [Base(1), Derived(2), Base(3)]
    for item in items:
        stack.push(item)
    assert [stack.pop() for _ in items] == list(reversed(items))


def test_stack_top_does_not_remove():
    stack = BaseStack(Base)
    first = stack.push(Base(1))
    second = stack.push(Derived(2))
    assert stack.top() is second
    assert len(stack) == 2
    stack.pop()
    assert stack.top() is first


def test_stack_empty_behaviour():
    stack = BaseStack(Base)
    assert stack.pop() is None
    assert stack.top() is None
    assert len(stack) == 0


def test_stack_rejects_unrelated_type():
    stack = BaseStack(Base)
    with pytest.raises(TypeError):
        stack.push(Unrelated())


def test_stack_clear():
    stack = BaseStack(Base)
    stack.push(Base())
    stack.push(Base())
    stack.clear()
    assert len(stack) == 0
    assert stack.top() is None