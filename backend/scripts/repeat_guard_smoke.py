# -*- coding: utf-8 -*-
"""Live smoke test for the repeat guard against a running server."""
import sys
import uuid

sys.path.insert(0, ".")
from scripts.test_utils import CheckList, ensure_utf8, make_generate_call

ensure_utf8()

FALLBACK_EN = "Few clear figures; follow your inner voice."


def main() -> int:
    cl = CheckList()
    user = f"smoke-{uuid.uuid4().hex[:8]}"

    print("\n--- first reading ---")
    r = make_generate_call(user, ["cup"], lang="en")
    cl.check("Status 200", r.status_code == 200, f"got={r.status_code}")
    text = r.json().get("text", "")
    cl.check("Opening line present", text.startswith("Fincandan görülenler"))
    cl.check("English closing present", text.rstrip().endswith("your intuition lights the way."))

    print("\n--- identical request ---")
    r = make_generate_call(user, ["cup"], lang="en")
    cl.check("Second identical request falls back", r.json().get("text") == FALLBACK_EN, r.text[:120])

    print("\n--- exact combination, swapped order ---")
    make_generate_call(user, ["cup", "moon"], lang="en")
    r = make_generate_call(user, ["moon", "cup"], lang="en")
    cl.check("Swapped combination still answered", r.status_code == 200, f"got={r.status_code}")

    print("\n--- validation ---")
    r = make_generate_call(user, [], lang="en")
    cl.check("Empty symbols rejected", r.status_code == 400, f"got={r.status_code}")

    cl.summary()
    return cl.exit_code()


if __name__ == "__main__":
    raise SystemExit(main())
