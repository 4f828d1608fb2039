# Routes package init
"""
Blog Backend — API Routes Package
===================================

Route Inventory:
    - system.py: GET  /                     (system info)
                 GET  /health               (health check)
    - users.py:  POST /user/register, POST /user/login,
                 PUT  /user/reset-pwd, GET /user/info
    - blogs.py:  GET/POST /blog, GET/PUT/DELETE /blog/{id},
                 PUT  /blog/{id}/status
    - files.py:  POST /file/upload, DELETE /file/delete, GET /file/list

Routes stay thin: parse the request, apply guards through dependencies,
call a service, wrap the result in the `{code, message, data}` envelope.
"""
