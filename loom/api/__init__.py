"""HTTP surface: routes and rate limits."""
