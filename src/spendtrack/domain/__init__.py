"""Domain layer for spendtrack application.

Services are imported from their modules (``spendtrack.domain.expense``,
``spendtrack.domain.analytics``, ...) because the database layer depends on
the entities defined here.
"""
