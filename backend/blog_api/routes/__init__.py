# Routes package init
"""
Blog API Backend — API Routes Package
======================================

Route Inventory (all under the configurable API prefix, default /api):
    - blogs.py:   POST/GET /blogs, GET/PUT/DELETE /blogs/{id}
    - health.py:  GET /health and the API index at the bare prefix

Routes are THIN: they extract data from the request, call BlogService with
the request's gateway, and return the envelope. Business rules live in
services/.
"""
