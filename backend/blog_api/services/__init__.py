# Services package init
"""
Blog API Backend — Services Layer
==================================

Service Inventory:
    - PostGateway (abstract): contract for post persistence
    - SqlPostGateway: SQLAlchemy implementation (production)
    - InMemoryPostGateway: dictionary implementation (tests, demos)
    - map_store_fault: gateway fault → API error translation
    - BlogService: the create/list/get/update/delete resource handlers
"""
