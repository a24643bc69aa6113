"""
Benchmark — overhead of intensive runs compared to inline work.
"""

import asyncio
import timeit

import intensive as I
from examples._infra import banner, work

LOOP_LENGTH = 1_000
REPEAT = 5


def inline() -> None:
    for _ in range(LOOP_LENGTH):
        work()


def loop(embed):
    for _ in range(LOOP_LENGTH):
        work()
        yield


def embedded(embed):
    yield from embed(I.operation(loop))
    yield from embed(I.operation(loop))


def report(name: str, seconds: float, factor: int = 1) -> None:
    per_call = seconds / REPEAT / factor
    print(f"  {name:<24} {per_call * 1_000:8.2f} ms/call")


def main() -> None:
    banner(f"Benchmark: {LOOP_LENGTH} chunks, averaged over {REPEAT} calls")

    report("work once", timeit.timeit(work, number=REPEAT))
    report("inline", timeit.timeit(inline, number=REPEAT))
    report("intensive sync", timeit.timeit(lambda: I.operation(loop).run_sync(), number=REPEAT))
    report(
        "intensive async",
        timeit.timeit(lambda: asyncio.run(I.operation(loop).run()), number=REPEAT),
    )
    report(
        "embedded sync",
        timeit.timeit(lambda: I.operation(embedded).run_sync(), number=REPEAT),
        factor=2,
    )


if __name__ == "__main__":
    main()
