"""
Market data ingestion module.

Fetches prices, the fear & greed index and trending assets, and assembles
them into an immutable SignalSnapshot for one pipeline run.
"""
