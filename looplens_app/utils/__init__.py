"""
Utility functions module.

Time Semantics:
- Snapshot timestamps are local, timezone-aware wall-clock times
- Day-of-week rules use Sunday=0 numbering (Thursday=4)
- Trigger slots are aligned to local midnight
"""
