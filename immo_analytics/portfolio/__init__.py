"""
Portfolio state and analytics.

Modules
-------
aggregator : pure functions from a list of holdings to totals, diversification,
             risk and synergy figures; ``analyze_portfolio()`` composes them.
cache      : AnalysisCache + PortfolioAnalyzer — memoised analysis keyed on
             ids and statuses.
store      : PortfolioStore — copy-on-write snapshot with the mutation API.
events     : EventBus + NotificationFeed — change announcements.
"""
