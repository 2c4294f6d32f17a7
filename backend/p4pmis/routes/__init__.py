# Routes package init
"""
P4P MIS Backend — API Routes Package
======================================

Route Inventory:
    - auth.py:         POST /api/login
    - collections.py:  GET  /api/collections
                       GET  /api/collections/{name}
    - dashboard.py:    GET  /api/participants, /api/dealers, /api/cooperatives,
                            /api/leverages, /api/market-surveys, /api/productivity,
                            /api/data-structure, /api/a2f, /api/a2m
    - health.py:       GET  /health

Routes stay thin: extract parameters, call one service method, return its model.
"""
