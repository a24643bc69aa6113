"""
Tracing — keep a request id attached to an operation across breaths,
and summarize how well it breathed.
"""

import asyncio
import contextvars

from intensive import operation, tracing
from examples._infra import banner, run, work

request_id: contextvars.ContextVar[str] = contextvars.ContextVar("request_id", default="-")


def crunch(embed):
    seen = set()
    for _ in range(1_000):
        work(cost=3)
        seen.add(request_id.get())
        yield
    return seen


def build(rid: str):
    token = request_id.set(rid)
    try:
        op = tracing.bind_context(operation(crunch))
    finally:
        request_id.reset(token)
    return tracing.trace(op, f"crunch[{rid}]", sink=report)


def report(summary: tracing.TraceSummary) -> None:
    print(
        f"  {summary.name}: {summary.breath_count} breaths"
        f" ({summary.late_breath_count} late), max interval {summary.max_interval}"
    )


async def main() -> None:
    banner("Tracing: two concurrent requests")

    results = await asyncio.gather(build("a").run(5), build("b").run(5))
    for seen in results:
        print(f"  steps saw request ids {sorted(seen)}")


if __name__ == "__main__":
    run(main)
