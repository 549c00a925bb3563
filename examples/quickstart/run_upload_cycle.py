"""End-to-end quickstart: produce → prune → upload → acknowledge.

Demonstrates a full upload cycle against a ping store, with a fake
uploader that rejects every third ping.

Usage:
    pip install -e ".[dev]"
    python examples/quickstart/run_upload_cycle.py
"""

import tempfile

from telemetry_ping_store import JSONFilePingStore, StoreConfig

# ── Configuration ─────────────────────────────────────────────────────
MAX_PINGS = 8
SERVER = "https://incoming.telemetry.example.org"

# ── 1. Set up the store ───────────────────────────────────────────────
root = tempfile.mkdtemp(prefix="pings-")
store = JSONFilePingStore(root, config=StoreConfig(max_ping_count=MAX_PINGS), store_id="core")

print("=" * 60)
print("  telemetry-ping-store · Upload Cycle Quickstart")
print("=" * 60)

# ── 2. Producer stores pings ──────────────────────────────────────────
print("\n── Step 1: Store pings ──\n")
for seq in range(1, 11):
    store.store(seq, f"/submit/core/{seq}", {"seq": seq, "session": "abc"})
print(f"  Stored: {store.stored_ids()}")

# ── 3. Scheduler prunes to capacity ───────────────────────────────────
print("\n── Step 2: Prune to capacity ──\n")
pruned = store.maybe_prune_pings()
print(f"  Evicted oldest: {pruned.removed}  (capacity={MAX_PINGS})")

# ── 4. Upload client reads everything back ────────────────────────────
print("\n── Step 3: Upload ──\n")
succeeded = set()
for ping in sorted(store.get_all_pings(), key=lambda p: p.unique_id):
    ok = ping.unique_id % 3 != 0
    print(f"  POST {SERVER}{ping.url_path}: {'200' if ok else '503'}")
    if ok:
        succeeded.add(ping.unique_id)

# ── 5. Acknowledge the delivered subset ───────────────────────────────
print("\n── Step 4: Acknowledge ──\n")
acked = store.on_upload_attempt_complete(succeeded)
print(f"  Removed: {sorted(acked.removed)}")
print(f"  Left for next attempt: {store.stored_ids()}")

print("\n" + "=" * 60)
print("  Done. Undelivered pings stay on disk until the next cycle.")
print("=" * 60)
