"""
LINQ-like API basic usage examples.
Run: python examples/linq_basic.py
"""

import os
import sys
# Ensure project root is on sys.path for direct execution
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
from linq_query import from_collection


def main():
    users = [
        {"id": 1, "first_name": "Alice", "last_name": "Zeus", "age": 30, "country": "ES", "email": "a@example.com", "last_login": 5},
        {"id": 2, "first_name": "Bob", "last_name": "Young", "age": 17, "country": "AR", "email": "b@example.com", "last_login": 10},
        {"id": 3, "first_name": "Carol", "last_name": "Xavier", "age": 25, "country": "US", "email": "c@example.com", "last_login": 2},
        {"id": 4, "first_name": "Dan", "last_name": "White", "age": 22, "country": "AR", "email": "a@example.com", "last_login": 7},
    ]

    # Filter + order + projection + pagination
    q = (
        from_collection(users)
        .where(lambda u: u["age"] >= 18 and u["country"] in ("ES", "AR"))
        .order_by(lambda a, b: a["last_login"] > b["last_login"])
        .select(lambda u: {"id": u["id"], "name": u["first_name"] + " " + u["last_name"]})
        .take(3)
    )
    print("Explain:", q.explain())
    res, err = q.results()
    if err is not None:
        print("Query failed:", err)
        return
    print("Top 3 ES/AR adults by last_login:")
    for r in res:
        print(r)

    # Distinct and natural order
    emails, _ = from_collection(users).select(lambda u: u["email"]).distinct().order().results()
    print("Distinct emails:", emails)

    # Quantifiers
    minors, _ = from_collection(users).any_with(lambda u: u["age"] < 18)
    print("Any minors:", minors)
    first_ar, _ = from_collection(users).first_by(lambda u: u["country"] == "AR")
    print("First AR user:", first_ar["first_name"])

    # A failing callback does not raise: the fault comes back with the results
    res, err = from_collection(users).select(lambda u: u["phone"]).take(2).results()
    print("Projection on a missing field:", res, repr(err))


if __name__ == "__main__":
    main()
