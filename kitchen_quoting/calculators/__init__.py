"""
Line-item pricing.

Pure Python math over an in-memory PricingCatalog. No database, no I/O.
Given one configuration entry, produce its dollar price; given an addon,
derive the quantities of the addons that depend on it.
"""
