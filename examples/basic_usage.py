"""Example: basic usage of telemetry-ping-store."""

import tempfile

from telemetry_ping_store import JSONFilePingStore, StoreConfig

root = tempfile.mkdtemp(prefix="pings-")
store = JSONFilePingStore(root, config=StoreConfig(max_ping_count=3))

# Store some pings
store.store(1, "/submit/core/1", {"seq": 1, "os": "Android"})
store.store(2, "/submit/core/2", {"seq": 2, "os": "Android"})
store.store(3, "/submit/core/3", {"seq": 3, "os": "Android"})
store.store(4, "/submit/core/4", {"seq": 4, "os": "Android"})

print(f"Store dir   : {store.root_dir}")
print(f"Stored pings: {store.stored_ids()}")

# Enforce capacity: the oldest ID goes first
result = store.maybe_prune_pings()
print(f"Pruned      : {result.removed}")

for ping in sorted(store.get_all_pings(), key=lambda p: p.unique_id):
    print(f"  {ping.unique_id}: {ping.url_path} {ping.payload}")
