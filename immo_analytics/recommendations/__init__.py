"""
Recommendation engine: per-property buy/sell/hold/review advice with a
human-readable reason.

Modules
-------
estimator : EstimatorSettings + recommend_property() + recommend_portfolio()
            + simulate_value_history(). Randomness comes from an injected
            ``random.Random``; no DB or I/O.
"""
