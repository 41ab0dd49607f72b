"""
Runtime around the automation components: cycle engine, events, telemetry,
configuration, logging and plotting.
"""
