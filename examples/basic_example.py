"""
Basic — one operation, run both ways.

The async run breathes: a heartbeat task keeps ticking while it hashes.
"""

import asyncio

import intensive as I
from examples._infra import banner, run, work


def hash_all(embed):
    digests = 0
    for _ in range(2_000):
        work(cost=4)
        digests += 1
        yield
    return digests


async def heartbeat(ticks: list[int]) -> None:
    while True:
        ticks.append(1)
        await asyncio.sleep(0)


async def main() -> None:
    banner("run_sync(): holds the loop")
    op = I.operation(hash_all).on("end", lambda stats, err: print(f"  end: {stats}"))
    print(f"  hashed {op.run_sync()}")

    banner("run(10): breathes every 10ms")
    ticks: list[int] = []
    beat = asyncio.create_task(heartbeat(ticks))
    op.on("breath", lambda b: print(f"  breath after {b.interval} (lateness {b.lateness:.2f})"))
    print(f"  hashed {await op.run(10)}")
    beat.cancel()
    print(f"  heartbeat ticked {len(ticks)} times meanwhile")


if __name__ == "__main__":
    run(main)
