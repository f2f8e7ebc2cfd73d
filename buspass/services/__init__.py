"""
Bus Pass Backend - Services Layer
===================================

What:  Business logic between routes (HTTP) and the database (persistence).

Service Inventory:
    - LocationService: fare table listing, price resolution, seeding
    - BusPassService: pass creation and retrieval
    - PhotoStorage (abstract) / LocalPhotoStorage: rider photo persistence
"""
