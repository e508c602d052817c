#!/usr/bin/env python3
"""
Demo: Constrained sampling of a separated integer list.

This walks a toy vocabulary through the grammar

    repeat(literal("  ") then integer(1, 3), min=3, max=5)

and shows, step by step, which tokens a sampler may pick, what must come
next, and when stopping is legal. No model is needed: the "sampler" always
takes the longest allowed token.
"""

import sys
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from parse_guard import IntegerParser, LiteralParser, ParseSession
from parse_guard.decoding import valid_token_ids

VOCABULARY = {
    0: b" ",
    1: b"  ",
    2: b"  1",
    3: b"  2",
    4: b"1",
    5: b"2",
    6: b"3",
    7: b"12",
    8: b"x",
}


def main():
    print("=" * 60)
    print("ParseGuard Demo: Separated Integer List")
    print("=" * 60)

    item = LiteralParser("  ").ignore_output_then(IntegerParser(1, 3))
    parser = item.repeat(3, 5)
    session = ParseSession(parser)

    print(f"\nGrammar: {parser!r}\n")

    while not session.is_finished:
        allowed = valid_token_ids(session, VOCABULARY)
        tokens = sorted(VOCABULARY[t] for t in allowed)

        print(f"Step {session.steps}:")
        print(f"  required_next: {session.required_next.tobytes()!r}")
        print(f"  can_stop:      {session.can_stop}")
        print(f"  allowed:       {tokens}")

        if not allowed:
            break

        choice = max(allowed, key=lambda t: (len(VOCABULARY[t]), -t))
        print(f"  sampled:       {VOCABULARY[choice]!r}\n")
        session.feed(VOCABULARY[choice])

    print("=" * 60)
    if session.is_finished:
        print(f"✓ Finished with output {session.output}")
    else:
        print("✓ Stopped at a legal position")
    print("=" * 60)

    return 0


if __name__ == "__main__":
    sys.exit(main())
