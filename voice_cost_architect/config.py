#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
config.py

Configuration constants and defaults for the Voice Cost Architect tool.

Key idea: the engine itself is environment-free
-----------------------------------------------
Pricing math never reads the environment. Everything here is a default for the
CLI/reporting layer, or a physical constant the rate tables and capacity
formulas share. Rates themselves live in pricing/rates.py as a versioned
snapshot.
"""

import os  # Standard library: access environment variables (os.getenv).

# ---------------------------------------------------------------------
# Defaults: volume / chart range
# ---------------------------------------------------------------------
# DEFAULT_MONTHLY_MINUTES:
# - Volume priced when the CLI is not given --minutes and the stack file does
#   not carry a monthly_minutes value.
# - Can be overridden by environment variable VOICECOST_DEFAULT_MINUTES.
DEFAULT_MONTHLY_MINUTES = int(os.getenv("VOICECOST_DEFAULT_MINUTES", "10000"))

# DEFAULT_MAX_CHART_MINUTES:
# - Upper end of the generated cost curve (--series).
# - Ticks beyond 100k are only added when this is raised.
DEFAULT_MAX_CHART_MINUTES = int(os.getenv("VOICECOST_MAX_CHART_MINUTES", "100000"))

# ---------------------------------------------------------------------
# Output / logging
# ---------------------------------------------------------------------
DEFAULT_LOG_LEVEL = os.getenv("VOICECOST_LOG_LEVEL", "INFO")

# DEFAULT_OUTPUT_FORMAT:
#   - "markdown" -> comparison report rendered to the terminal
#   - "json"     -> breakdowns as JSON (machine-readable)
DEFAULT_OUTPUT_FORMAT = os.getenv("VOICECOST_OUTPUT_FORMAT", "markdown")

# Currency label only. All snapshot rates are USD pre-tax; no conversion.
CURRENCY = "USD"

# Maximum number of stacks compared side by side.
MAX_STACKS = 8

# ---------------------------------------------------------------------
# Time constants (used by capacity sizing)
# ---------------------------------------------------------------------
# MINUTES_PER_MONTH:
# - 30 days x 24 hours x 60 minutes.
# - One always-on reserved instance runs this many minutes per month.
MINUTES_PER_MONTH = 43_200

# SELF_HOSTED_HEADROOM:
# - Operational headroom applied to monthly minutes before comparing
#   self-hosted reserved-capacity profiles (App Service vs AKS).
SELF_HOSTED_HEADROOM = 1.15
