import os

# Tests never hit real providers or the inbound limiter.
os.environ.setdefault("RATE_LIMIT_ENABLED", "0")
