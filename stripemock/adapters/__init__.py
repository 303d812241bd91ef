"""External adapters for the stripemock fake payment API.

This package contains everything outside the core and provides
implementations of, or callers into, the core port interfaces.

Adapter Organization:

- store/: Record store implementations (in-memory)
- http/: Request dispatch and the httpx transport that routes client calls to it
- helper/: Test helper with default params for common fixtures
- schema/: Loading schema tables from JSON files
- cli/: Interactive command handling
"""
