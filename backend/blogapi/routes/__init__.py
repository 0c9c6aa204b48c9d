# Routes package init
"""
Blog API Backend - API Routes Package
======================================

Route Inventory:
    - users.py:       GET/POST /api/users, GET/PUT/DELETE /api/users/{id},
                      GET /api/users/{id}/blogposts
    - blogposts.py:   GET/POST /api/blogposts, GET /api/blogposts/search,
                      GET/PUT/DELETE /api/blogposts/{id},
                      GET /api/blogposts/{id}/creator,
                      GET /api/blogposts/{id}/categories,
                      POST/DELETE /api/blogposts/{id}/categories/{category_id}
    - categories.py:  GET/POST /api/categories, GET /api/categories/{id},
                      GET /api/categories/{id}/blogposts
    - health.py:      GET /health

Routes stay thin: extract request data, call one service method, set the
status code and headers. Errors propagate to the handlers in main.py.
"""
