"""Service layer: build orchestration and graph queries.

INVARIANT: All service-layer methods return ServiceResult.
"""
