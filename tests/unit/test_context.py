import asyncio
import threading

from affirm import AssertionScope
from affirm.context import assertion_scope_context, get_current_scope


def test_no_scope_outside_with_block():
    assert get_current_scope() is None

    with AssertionScope() as scope:
        assert get_current_scope() is scope

    assert get_current_scope() is None


def test_assertion_scope_context_binds_and_restores():
    scope = AssertionScope()

    with assertion_scope_context(scope):
        assert get_current_scope() is scope

    assert get_current_scope() is None


def test_scopes_are_isolated_between_tasks():
    async def worker(name: str) -> str | None:
        with AssertionScope(name) as scope:
            await asyncio.sleep(0)
            assert AssertionScope.current() is scope
            return AssertionScope.current().context

    async def main():
        return await asyncio.gather(worker("first"), worker("second"))

    assert asyncio.run(main()) == ["first", "second"]


def test_scopes_are_isolated_between_threads():
    seen = []

    def worker():
        seen.append(get_current_scope())

    with AssertionScope():
        thread = threading.Thread(target=worker)
        thread.start()
        thread.join()

    assert seen == [None]
