"""
Business Logic Layer Module.

Sits between the Lambda handlers and the data access layer: prices and
stores orders, maintains the catalog, reports changes as product and order
events and reads the order event history.
"""
