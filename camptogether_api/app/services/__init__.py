"""
Service layer.

Each service encapsulates the business logic for one domain and talks to
storage only through ``core.db.get_store``, so the HTTP handlers stay thin.
"""
