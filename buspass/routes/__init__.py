"""
Bus Pass Backend - API Routes Package
=======================================

Route Inventory:
    - bus_pass.py:   POST /bus-pass               (submit an application)
                     GET  /bus-pass/{id}          (read a stored pass)
    - locations.py:  GET  /api/locations          (full fare table)
                     GET  /api/price              (fare for a route)
    - uploads.py:    GET  /uploads/{reference}    (stored rider photos)
    - health.py:     GET  /health                 (service health check)

Routes stay thin: they extract request data, call a service and let the
global exception handlers shape error responses.
"""
