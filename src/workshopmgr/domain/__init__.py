"""Domain layer for workshopmgr application.

Entities, the pure scheduling and finance computations, and one service per
entity family (``ClientService``, ``WorkshopService``, ``BillingService``, ...)
live in the submodules and are imported from there.
"""
