"""
LINQ-like API: execution policies.
Run: python examples/linq_policies.py
"""

import os
import sys
# Ensure project root is on sys.path for direct execution
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
from linq_query import from_collection, Policy


def main():
    items = [{"score": 0.9}, {"score": 0.0}, {"score": None}]

    # Default policy clamps negative counts silently
    res, err = from_collection(items).take(-1).results()
    print("Clamped take(-1):", res, err)

    # Error on negative counts
    res, err = from_collection(items).with_policy(Policy(on_negative="error")).take(-1).results()
    print("Expected fault (on_negative=error):", repr(err))

    # Callbacks returning (result, fault) pairs
    def scored(x):
        if x["score"] is None:
            return None, ValueError("missing score")
        return x["score"] > 0.8, None

    q = from_collection(items, Policy(callback_protocol="pair"))
    print("Pair protocol, first two:", q.take(2).where(scored).results())
    print("Pair protocol, all items:", q.where(scored).results())


if __name__ == "__main__":
    main()
