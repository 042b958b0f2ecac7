"""Task Board Test Suite

Test organization:
- unit/: Unit tests for individual modules
  - ordering/: Allocator, rebalancer and the reorder transaction
  - tasks/: Task and category CRUD, guards, errors, users, suggestions
- integration/: API tests through FastAPI's TestClient

Running tests:
    # All tests
    pytest

    # Specific module
    pytest tests/unit/ordering/
"""
