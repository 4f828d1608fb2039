# Schemas package init
"""
Blog Backend — Pydantic Schemas
=================================

    - common.py: response envelope, error body, system/health payloads
    - user.py:   register/login/reset payloads, sanitized user views
    - blog.py:   blog create/update payloads and responses
    - file.py:   upload, listing and deletion responses
"""
