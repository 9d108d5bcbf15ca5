"""
Product service package.

A FastAPI service that stores product photos in S3-compatible storage,
product rows in Postgres, short-lived photo lookups in Redis, and
announces new products on a Redis pub/sub channel.
"""
