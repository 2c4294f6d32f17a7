# Services package init
"""
P4P MIS Backend — Services Layer
==================================

What:  Query-and-shape logic sitting between routes (HTTP) and MongoDB.
How:   Services are stateless singletons; each call receives the database handle.

Service Inventory:
    - AuthService:        credential check for POST /api/login
    - CollectionService:  collection listing and allow-listed generic reads
    - DashboardService:   fixed-collection reads, coercion and aggregation
    - documents:          shared fetch helpers and error translation
    - security:           bcrypt / plaintext password verification
"""
