"""
Composition — operations embedding other operations.

Checkpoints of embedded operations count as the root's, errors raise at
the `yield from` like any exception.
"""

import intensive as I
from examples._infra import banner, run, work


def chunk(size: int) -> I.Operation[int]:
    def hash_chunk(embed):
        for _ in range(size):
            work()
            yield
        return size

    return I.operation(hash_chunk)


def corrupt(embed):
    yield
    raise ValueError("corrupt chunk")


def pipeline(embed):
    total = 0
    for size in (100, 200, 300):
        total += yield from embed(chunk(size))
    try:
        yield from embed(I.operation(corrupt))
    except ValueError as err:
        print(f"  skipped: {err}")
    return total


async def main() -> None:
    banner("Composition: three chunks and a corrupt one")

    op = I.operation(pipeline).on(
        "end",
        lambda stats, err: print(f"  {stats.checkpoint_count} checkpoints, {stats.breath_count} breaths"),
    )
    print(f"  hashed {await op.run(5)}")


if __name__ == "__main__":
    run(main)
