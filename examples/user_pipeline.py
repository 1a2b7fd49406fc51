"""Generator thunks in a message pipeline.

This example wires the generator thunk middleware into the reference Store
and runs a computation that mixes dispatched messages, awaited coroutines,
a nested computation and error recovery.

Key concepts:
- Decorate generator functions with @computation to make them drivable
- Yield plain messages to dispatch them; yield awaitables to await them
- Failures of awaited values are thrown back at the yield
- with_extra_argument() injects shared services into every computation

Run with: uv run python examples/user_pipeline.py
"""

import asyncio

from loguru import logger

from genthunk import Store, computation, generator_thunk


# ============================================================================
# Step 1: Services passed as the extra argument
# ============================================================================


class UserService:
    def __init__(self, users: dict[int, str]):
        self.users = users

    async def fetch_name(self, user_id: int) -> str:
        await asyncio.sleep(0.01)
        if user_id not in self.users:
            raise LookupError(f"user {user_id} not found")
        return self.users[user_id]


# ============================================================================
# Step 2: Reducer
# ============================================================================


def reducer(state, message):
    match message["type"]:
        case "user/loading":
            return {**state, "loading": True}
        case "user/loaded":
            return {**state, "loading": False, "names": (*state.get("names", ()), message["name"])}
        case "user/missing":
            return {**state, "loading": False, "missing": (*state.get("missing", ()), message["user_id"])}
        case _:
            return state


# ============================================================================
# Step 3: Computations
# ============================================================================


@computation
def load_user(get_state, service: UserService):
    user_id = get_state()["next_user"]
    yield {"type": "user/loading"}
    try:
        name = yield service.fetch_name(user_id)
    except LookupError:
        yield {"type": "user/missing", "user_id": user_id}
        return None
    yield {"type": "user/loaded", "name": name}
    return name


@computation
def load_all(get_state, service: UserService):
    loaded = []
    for user_id in (1, 2, 3):
        yield {"type": "select", "user_id": user_id}
        loaded.append((yield load_user))
    return loaded


def select_reducer(state, message):
    if message["type"] == "select":
        return {**state, "next_user": message["user_id"]}
    return reducer(state, message)


async def main() -> None:
    logger.enable("genthunk")
    service = UserService({1: "ada", 3: "grace"})
    store = Store(
        select_reducer,
        middleware=(generator_thunk.with_extra_argument(service),),
    )

    loaded = await store.dispatch(load_all)

    print(f"loaded:  {loaded}")
    print(f"state:   {dict(store.get_state())}")


if __name__ == "__main__":
    asyncio.run(main())
