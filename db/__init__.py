"""
db/ - Database Layer
====================
Handles PostgreSQL connections and composes parameterized SQL.
This layer is the lowest in the architecture and has no dependencies on other layers.
"""
