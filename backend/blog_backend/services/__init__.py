# Services package init
"""
Blog Backend — Services Layer
===============================

What:  Business rules between the routes (HTTP) and the database/filesystem.
How:   Stateless singletons; database-backed methods take the request's
       AsyncSession as their first argument.

Service Inventory:
    - UserService: registration, login, password reset, profile, role lookup
    - BlogService: blog listing, CRUD, status changes, author-or-admin updates
    - FileService: upload validation and storage, deletion, listing
"""
