"""
Request middleware for the API.

- correlation: X-Correlation-ID / X-Request-ID propagation and log injection
- timeout: bounded request time with a retryable 504 on expiry
"""
