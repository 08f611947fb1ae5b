"""
Tests Module: Unit and Integration Tests

Test Coverage:
    - Key normalization
    - Relation registry
    - Round-robin and substring strategies (boundaries, splits, fallback)
    - Snapshot export/import and checkpoints
    - Stream hosting and structured logging
"""
