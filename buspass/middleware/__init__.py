"""
Bus Pass Backend - Middleware Package
=======================================

Middleware Chain (order matters):
    Request → [Rate Limit] → [Request ID] → [Logging] → [CORS] → Route Handler

    1. Rate Limit first: reject abusive clients before any processing
    2. Request ID: correlation ID for logs and the X-Request-ID header
    3. Logging: method, path, status and duration with the request ID
    4. CORS: FastAPI's CORSMiddleware (handles preflight)
"""
