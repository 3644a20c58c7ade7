"""
immo_analytics.reporting — terminal output for the CLI.

Modules:
  formatters — ASCII table formatters for region scores, portfolio analysis
               and recommendations.
"""
