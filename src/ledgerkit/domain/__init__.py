"""Domain layer for ledgerkit.

Services live in their own modules (``ledgerkit.domain.chart``,
``ledgerkit.domain.journal``, ...) and are imported from there.
"""
