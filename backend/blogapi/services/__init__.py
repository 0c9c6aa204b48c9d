# Services package init
"""
Blog API Backend - Services Layer
==================================

What:  Business logic between routes (HTTP) and the data-access interface.

Service Inventory:
    - Repository (abstract):   Data-access contract (create/get/query_all/query_related)
    - SQLAlchemyRepository:    Repository over an AsyncSession and one model
    - UserService:             Users and their blog posts (children)
    - BlogPostService:         Blog posts, creator (parent), categories (siblings)
    - CategoryService:         Categories and their blog posts (siblings)
"""
