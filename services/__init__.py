"""
Service layer for the record store.

DynamoDB access, value encoding and the record store accessor itself.
"""
